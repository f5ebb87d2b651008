from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime

from inkflow.domains.documents.entities import DEFAULT_TITLE, CMSPlatform, DocumentStatus


class DocumentBase(BaseModel):
    """Базовая схема документа"""
    title: str = Field(default=DEFAULT_TITLE, min_length=1, max_length=255)
    content: str = Field(default="", max_length=1000000)  # 1MB max content
    status: DocumentStatus = DocumentStatus.DRAFT
    database_id: Optional[str] = None
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    cover: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)
    
    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class DocumentCreate(DocumentBase):
    """Схема для создания документа"""
    pass


class DocumentUpdate(BaseModel):
    """Схема для частичного обновления документа"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, max_length=1000000)
    status: Optional[DocumentStatus] = None
    database_id: Optional[str] = None
    cms_connection_id: Optional[str] = None
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    cover: Optional[str] = None
    tags: Optional[List[str]] = None
    properties: Optional[Dict[str, Any]] = None
    
    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v


class DocumentResponse(DocumentBase):
    """Схема для ответа с данными документа"""
    id: str
    user_id: str
    cms_connection_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    word_count: int = 0
    content_length: int = 0
    
    model_config = ConfigDict(from_attributes=True)


class DocumentExportRequest(BaseModel):
    """Схема для запроса на экспорт документа"""
    format: str = Field(..., pattern="^(txt|md)$")


class DocumentExportResponse(BaseModel):
    """Схема для ответа с экспортированным документом"""
    document_id: str
    format: str
    filename: str
    content: str
    exported_at: datetime


class DatabaseCreate(BaseModel):
    """Схема для создания базы"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    view_type: str = "TABLE"
    color: Optional[str] = Field(None, pattern="^#[0-9a-fA-F]{6}$")
    
    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()


class DatabaseUpdate(BaseModel):
    """Схема для обновления базы"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    view_type: Optional[str] = None
    color: Optional[str] = Field(None, pattern="^#[0-9a-fA-F]{6}$")


class DatabaseResponse(BaseModel):
    """Схема для ответа с данными базы"""
    id: str
    name: str
    description: Optional[str] = None
    view_type: str
    color: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class CMSConnectionCreate(BaseModel):
    """Схема для создания подключения к CMS"""
    name: str = Field(..., min_length=1, max_length=255)
    platform: CMSPlatform
    url: Optional[str] = None
    api_key: Optional[str] = None
    
    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty')
        return v.strip()


class CMSConnectionResponse(BaseModel):
    """Схема для ответа с данными подключения"""
    id: str
    name: str
    platform: CMSPlatform
    url: Optional[str] = None
    api_key: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
