import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class DocumentStatus(str, Enum):
    """Статусы публикации документа"""
    DRAFT = "Draft"
    IN_REVIEW = "In Review"
    PUBLISHED = "Published"


PLACEHOLDER_TITLES = ("Untitled Page", "Untitled Draft")
DEFAULT_TITLE = PLACEHOLDER_TITLES[0]
TITLE_FROM_CONTENT_LENGTH = 30


def is_placeholder_title(title: Optional[str]) -> bool:
    return title in PLACEHOLDER_TITLES


def infer_title(title: str, content: str) -> str:
    """Заголовок из первой строки текста, пока документ назван по умолчанию"""
    if not is_placeholder_title(title):
        return title
    
    first_line = content.split("\n")[0][:TITLE_FROM_CONTENT_LENGTH]
    if first_line.strip():
        return first_line
    return title


class Document:
    """Сущность документа домена Documents"""
    
    def __init__(
        self,
        id: str,
        title: str,
        user_id: str,
        content: str = "",
        status: DocumentStatus = DocumentStatus.DRAFT,
        database_id: Optional[str] = None,
        cms_connection_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        icon: Optional[str] = None,
        cover: Optional[str] = None,
        tags: Optional[List[str]] = None,
        properties: Optional[Dict[str, Any]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.title = title
        self.user_id = user_id
        self.content = content
        self.status = DocumentStatus(status)
        self.database_id = database_id
        self.cms_connection_id = cms_connection_id
        self.parent_id = parent_id
        self.icon = icon
        self.cover = cover
        self.tags = list(tags or [])
        self.properties = dict(properties or {})
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()
    
    def get_content_length(self) -> int:
        """Получение длины содержимого документа"""
        return len(self.content)
    
    def get_word_count(self) -> int:
        """Подсчет количества слов в документе"""
        if not self.content.strip():
            return 0
        return len(self.content.split())
    
    def export(self, format_type: str) -> str:
        """Экспорт содержимого в текстовые форматы"""
        if format_type == "txt":
            return self.content
        if format_type == "md":
            return f"# {self.title}\n\n{self.content}"
        raise ValueError(f"Unsupported format: {format_type}")
    
    @classmethod
    def create_document(
        cls,
        user_id: str,
        title: str = DEFAULT_TITLE,
        content: str = "",
        **fields
    ) -> "Document":
        """Создание нового документа"""
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            user_id=user_id,
            content=content,
            **fields
        )
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.id == other.id
    
    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title}, status={self.status.value})"


class Database:
    """Группа документов (база в библиотеке)"""
    
    def __init__(
        self,
        id: str,
        name: str,
        user_id: str,
        description: Optional[str] = None,
        view_type: str = "TABLE",
        color: str = "#000000",
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.user_id = user_id
        self.description = description
        self.view_type = view_type
        self.color = color
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()
    
    def __repr__(self) -> str:
        return f"Database(id={self.id}, name={self.name})"


class CMSPlatform(str, Enum):
    WORDPRESS = "WordPress"
    GHOST = "Ghost"
    WEBFLOW = "Webflow"
    MEDIUM = "Medium"
    DEVTO = "Dev.to"


class CMSConnection:
    """Подключение к внешней CMS для публикации документов"""
    
    def __init__(
        self,
        id: str,
        name: str,
        platform: CMSPlatform,
        user_id: str,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.platform = CMSPlatform(platform)
        self.user_id = user_id
        self.url = url
        self.api_key = api_key
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()
    
    def __repr__(self) -> str:
        return f"CMSConnection(id={self.id}, platform={self.platform.value})"
