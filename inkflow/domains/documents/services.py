from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
import logging
import uuid

from inkflow.db.repositories.document_repository import (
    DocumentRepository, DatabaseRepository, CMSConnectionRepository
)
from inkflow.domains.documents.entities import Document, Database, CMSConnection
from inkflow.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DatabaseCreate, DatabaseUpdate, CMSConnectionCreate
)

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
    
    async def create_document(self, document_data: DocumentCreate, user_id: str) -> Document:
        """Создание нового документа"""
        document = Document.create_document(
            user_id=user_id,
            title=document_data.title,
            content=document_data.content,
            status=document_data.status,
            database_id=document_data.database_id,
            parent_id=document_data.parent_id,
            icon=document_data.icon,
            cover=document_data.cover,
            tags=document_data.tags,
            properties=document_data.properties
        )
        
        created = await self.document_repository.create(document)
        logger.info("Document %s created for user %s", created.id, user_id)
        return created
    
    async def get_document(self, document_id: str, user_id: str) -> Optional[Document]:
        """Получение документа владельца"""
        document = await self.document_repository.get_by_id(document_id)
        
        if document and document.user_id != user_id:
            raise PermissionError("You don't have access to this document")
        
        return document
    
    async def get_user_documents(self, user_id: str) -> List[Document]:
        """Получение документов пользователя"""
        return await self.document_repository.get_by_owner(user_id)
    
    async def update_document(
        self, 
        document_id: str, 
        update_data: DocumentUpdate,
        user_id: str
    ) -> Optional[Document]:
        """Частичное обновление документа"""
        document = await self.get_document(document_id, user_id)
        
        if not document:
            return None
        
        # Явно переданный None сбрасывает ссылку, поэтому только exclude_unset
        values = update_data.model_dump(exclude_unset=True)
        for field in ("title", "content", "status", "tags", "properties"):
            if field in values and values[field] is None:
                del values[field]
        
        return await self.document_repository.update(document_id, values)
    
    async def delete_document(self, document_id: str, user_id: str) -> bool:
        """Удаление документа"""
        document = await self.document_repository.get_by_id(document_id)
        
        if not document:
            return False
        
        # Только владелец может удалить документ
        if document.user_id != user_id:
            raise PermissionError("Only the owner can delete this document")
        
        deleted = await self.document_repository.delete(document_id)
        logger.info("Document %s deleted", document_id)
        return deleted
    
    async def export_document(self, document_id: str, format_type: str, user_id: str) -> Optional[dict]:
        """Экспорт документа в txt / md"""
        document = await self.get_document(document_id, user_id)
        
        if not document:
            return None
        
        return {
            "document_id": document.id,
            "format": format_type,
            "filename": f"inkflow-{datetime.utcnow().date().isoformat()}.{format_type}",
            "content": document.export(format_type),
            "exported_at": datetime.utcnow()
        }


class DatabaseService:
    """Сервис для баз (группировок документов)"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.database_repository = DatabaseRepository(session)
        self.document_repository = DocumentRepository(session)
    
    async def create_database(self, database_data: DatabaseCreate, user_id: str) -> Database:
        """Создание базы"""
        database = Database(
            id=str(uuid.uuid4()),
            name=database_data.name,
            user_id=user_id,
            description=database_data.description,
            view_type=database_data.view_type,
            color=database_data.color or "#000000"
        )
        return await self.database_repository.create(database)
    
    async def get_user_databases(self, user_id: str) -> List[Database]:
        """Получение баз пользователя"""
        return await self.database_repository.get_by_owner(user_id)
    
    async def update_database(
        self,
        database_id: str,
        update_data: DatabaseUpdate,
        user_id: str
    ) -> Optional[Database]:
        """Обновление базы"""
        database = await self._get_owned(database_id, user_id)
        if not database:
            return None
        
        values = {k: v for k, v in update_data.model_dump(exclude_unset=True).items() if v is not None}
        return await self.database_repository.update(database_id, values)
    
    async def delete_database(self, database_id: str, user_id: str) -> bool:
        """Удаление базы; документы остаются в общем списке"""
        database = await self._get_owned(database_id, user_id)
        if not database:
            return False
        
        # Сначала отвязываем документы
        unlinked = await self.document_repository.unlink(user_id, "database_id", database_id)
        logger.info("Database %s deleted, %d documents unlinked", database_id, unlinked)
        return await self.database_repository.delete(database_id)
    
    async def _get_owned(self, database_id: str, user_id: str) -> Optional[Database]:
        database = await self.database_repository.get_by_id(database_id)
        if database and database.user_id != user_id:
            raise PermissionError("You don't have access to this database")
        return database


class CMSConnectionService:
    """Сервис для подключений к CMS"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.connection_repository = CMSConnectionRepository(session)
        self.document_repository = DocumentRepository(session)
    
    async def create_connection(self, connection_data: CMSConnectionCreate, user_id: str) -> CMSConnection:
        """Создание подключения"""
        connection = CMSConnection(
            id=str(uuid.uuid4()),
            name=connection_data.name,
            platform=connection_data.platform,
            user_id=user_id,
            url=connection_data.url,
            api_key=connection_data.api_key
        )
        return await self.connection_repository.create(connection)
    
    async def get_user_connections(self, user_id: str) -> List[CMSConnection]:
        """Получение подключений пользователя"""
        return await self.connection_repository.get_by_owner(user_id)
    
    async def delete_connection(self, connection_id: str, user_id: str) -> bool:
        """Удаление подключения со сбросом ссылок в документах"""
        connection = await self.connection_repository.get_by_id(connection_id)
        if not connection:
            return False
        
        if connection.user_id != user_id:
            raise PermissionError("You don't have access to this connection")
        
        unlinked = await self.document_repository.unlink(user_id, "cms_connection_id", connection_id)
        logger.info("CMS connection %s deleted, %d documents unlinked", connection_id, unlinked)
        return await self.connection_repository.delete(connection_id)
