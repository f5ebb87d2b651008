from typing import Optional, List, Dict, Any, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from inkflow.db.models.document import (
    Document as DocumentModel, Database as DatabaseModel, CMSConnection as CMSConnectionModel
)
from inkflow.db.serialization import TAGS_AND_PROPERTIES, dump_json_fields, load_json_field

if TYPE_CHECKING:
    from inkflow.domains.documents.entities import Document, Database, CMSConnection


class DocumentRepository:
    """Репозиторий для работы с документами"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(**dump_json_fields({
            "id": document.id,
            "title": document.title,
            "content": document.content,
            "status": document.status.value,
            "user_id": document.user_id,
            "database_id": document.database_id,
            "cms_connection_id": document.cms_connection_id,
            "parent_id": document.parent_id,
            "icon": document.icon,
            "cover": document.cover,
            "tags": document.tags,
            "properties": document.properties,
        }, TAGS_AND_PROPERTIES))
        
        self.session.add(db_document)
        try:
            await self.session.commit()
            await self.session.refresh(db_document)
            return self._to_domain(db_document)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid user_id or linked entity")
    
    async def get_by_id(self, document_id: str) -> Optional["Document"]:
        """Получение документа по id"""
        db_document = await self._get_model(document_id)
        return self._to_domain(db_document) if db_document else None
    
    async def get_by_owner(self, user_id: str, limit: int = 1000, offset: int = 0) -> List["Document"]:
        """Получение документов владельца, свежие первыми"""
        result = await self.session.execute(
            select(DocumentModel)
            .where(DocumentModel.user_id == user_id)
            .order_by(DocumentModel.updated_at.desc())
            .offset(offset)
            .limit(limit)
        )
        db_documents = result.scalars().all()
        return [self._to_domain(doc) for doc in db_documents]
    
    async def update(self, document_id: str, values: Dict[str, Any]) -> Optional["Document"]:
        """Частичное обновление документа; updated_at всегда возрастает"""
        db_document = await self._get_model(document_id)
        if not db_document:
            return None
        
        for field, value in dump_json_fields(values, TAGS_AND_PROPERTIES).items():
            if field == "status" and value is not None:
                value = getattr(value, "value", value)
            setattr(db_document, field, value)
        db_document.touch()
        
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid linked entity")
        await self.session.refresh(db_document)
        return self._to_domain(db_document)
    
    async def delete(self, document_id: str) -> bool:
        """Удаление документа"""
        stmt = delete(DocumentModel).where(DocumentModel.id == document_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0
    
    async def unlink(self, user_id: str, field: str, linked_id: str) -> int:
        """Сброс ссылки (database_id / cms_connection_id) у документов владельца"""
        column = getattr(DocumentModel, field)
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.user_id == user_id, column == linked_id)
        )
        db_documents = result.scalars().all()
        for db_document in db_documents:
            setattr(db_document, field, None)
            db_document.touch()
        await self.session.commit()
        return len(db_documents)
    
    async def _get_model(self, document_id: str) -> Optional[DocumentModel]:
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.id == document_id)
        )
        return result.scalar_one_or_none()
    
    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from inkflow.domains.documents.entities import Document
        
        return Document(
            id=db_document.id,
            title=db_document.title,
            user_id=db_document.user_id,
            content=db_document.content or "",
            status=db_document.status,
            database_id=db_document.database_id,
            cms_connection_id=db_document.cms_connection_id,
            parent_id=db_document.parent_id,
            icon=db_document.icon,
            cover=db_document.cover,
            tags=load_json_field(db_document.tags, "[]"),
            properties=load_json_field(db_document.properties, "{}"),
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )


class DatabaseRepository:
    """Репозиторий для работы с базами документов"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, database: "Database") -> "Database":
        """Создание базы"""
        db_database = DatabaseModel(
            id=database.id,
            name=database.name,
            description=database.description,
            view_type=database.view_type,
            color=database.color,
            user_id=database.user_id
        )
        self.session.add(db_database)
        await self.session.commit()
        await self.session.refresh(db_database)
        return self._to_domain(db_database)
    
    async def get_by_id(self, database_id: str) -> Optional["Database"]:
        """Получение базы по id"""
        db_database = await self._get_model(database_id)
        return self._to_domain(db_database) if db_database else None
    
    async def get_by_owner(self, user_id: str) -> List["Database"]:
        """Получение баз владельца"""
        result = await self.session.execute(
            select(DatabaseModel)
            .where(DatabaseModel.user_id == user_id)
            .order_by(DatabaseModel.created_at)
        )
        return [self._to_domain(db) for db in result.scalars().all()]
    
    async def update(self, database_id: str, values: Dict[str, Any]) -> Optional["Database"]:
        """Обновление базы"""
        db_database = await self._get_model(database_id)
        if not db_database:
            return None
        
        for field, value in values.items():
            setattr(db_database, field, value)
        db_database.touch()
        
        await self.session.commit()
        await self.session.refresh(db_database)
        return self._to_domain(db_database)
    
    async def delete(self, database_id: str) -> bool:
        """Удаление базы"""
        result = await self.session.execute(delete(DatabaseModel).where(DatabaseModel.id == database_id))
        await self.session.commit()
        return result.rowcount > 0
    
    async def _get_model(self, database_id: str) -> Optional[DatabaseModel]:
        result = await self.session.execute(
            select(DatabaseModel).where(DatabaseModel.id == database_id)
        )
        return result.scalar_one_or_none()
    
    def _to_domain(self, db_database: DatabaseModel) -> "Database":
        from inkflow.domains.documents.entities import Database
        
        return Database(
            id=db_database.id,
            name=db_database.name,
            user_id=db_database.user_id,
            description=db_database.description,
            view_type=db_database.view_type,
            color=db_database.color,
            created_at=db_database.created_at,
            updated_at=db_database.updated_at
        )


class CMSConnectionRepository:
    """Репозиторий для подключений к CMS"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, connection: "CMSConnection") -> "CMSConnection":
        """Создание подключения"""
        db_connection = CMSConnectionModel(
            id=connection.id,
            name=connection.name,
            platform=connection.platform.value,
            url=connection.url,
            api_key=connection.api_key,
            user_id=connection.user_id
        )
        self.session.add(db_connection)
        await self.session.commit()
        await self.session.refresh(db_connection)
        return self._to_domain(db_connection)
    
    async def get_by_id(self, connection_id: str) -> Optional["CMSConnection"]:
        """Получение подключения по id"""
        result = await self.session.execute(
            select(CMSConnectionModel).where(CMSConnectionModel.id == connection_id)
        )
        db_connection = result.scalar_one_or_none()
        return self._to_domain(db_connection) if db_connection else None
    
    async def get_by_owner(self, user_id: str) -> List["CMSConnection"]:
        """Получение подключений владельца"""
        result = await self.session.execute(
            select(CMSConnectionModel)
            .where(CMSConnectionModel.user_id == user_id)
            .order_by(CMSConnectionModel.created_at)
        )
        return [self._to_domain(conn) for conn in result.scalars().all()]
    
    async def delete(self, connection_id: str) -> bool:
        """Удаление подключения"""
        result = await self.session.execute(
            delete(CMSConnectionModel).where(CMSConnectionModel.id == connection_id)
        )
        await self.session.commit()
        return result.rowcount > 0
    
    def _to_domain(self, db_connection: CMSConnectionModel) -> "CMSConnection":
        from inkflow.domains.documents.entities import CMSConnection
        
        return CMSConnection(
            id=db_connection.id,
            name=db_connection.name,
            platform=db_connection.platform,
            user_id=db_connection.user_id,
            url=db_connection.url,
            api_key=db_connection.api_key,
            created_at=db_connection.created_at,
            updated_at=db_connection.updated_at
        )
