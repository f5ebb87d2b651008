from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime

from inkflow.domains.library.entities import DEFAULT_PROMPT_CATEGORY, ReadingSource, ReadingStatus


class PromptBase(BaseModel):
    """Базовая схема промпта"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = DEFAULT_PROMPT_CATEGORY
    tags: List[str] = Field(default_factory=list)
    
    @field_validator('title', 'content')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v
    
    @field_validator('category')
    @classmethod
    def default_category(cls, v):
        return v.strip() or DEFAULT_PROMPT_CATEGORY


class PromptCreate(PromptBase):
    """Схема для создания промпта"""
    pass


class PromptBatchCreate(BaseModel):
    """Импорт нескольких промптов за один запрос"""
    prompts: List[PromptCreate]


class PromptBatchDelete(BaseModel):
    """Удаление нескольких промптов"""
    ids: List[str]


class PromptUpdate(BaseModel):
    """Схема для обновления промпта"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None


class PromptResponse(PromptBase):
    """Схема для ответа с данными промпта"""
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class BatchResult(BaseModel):
    success: bool = True
    count: int = 0


class ReadingItemCreate(BaseModel):
    """Схема для добавления статьи в список чтения"""
    url: str = Field(..., min_length=1, max_length=2048)
    title: str = Field(..., min_length=1, max_length=512)
    domain: Optional[str] = None
    excerpt: Optional[str] = None
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    source_type: ReadingSource = ReadingSource.MANUAL


class ReadingItemUpdate(BaseModel):
    """Схема для обновления статьи"""
    status: Optional[ReadingStatus] = None
    tags: Optional[List[str]] = None
    ai_summary: Optional[str] = None


class ReadingItemResponse(BaseModel):
    """Схема для ответа со статьёй"""
    id: str
    url: str
    title: str
    domain: str
    excerpt: Optional[str] = None
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: ReadingStatus
    ai_summary: Optional[str] = None
    source_type: ReadingSource
    user_id: str
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
