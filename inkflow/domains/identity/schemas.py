from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime


class UserLogin(BaseModel):
    """Схема для входа (создание или обновление пользователя по email)"""
    email: EmailStr
    name: str = Field(default="", max_length=255)
    avatar: Optional[str] = None


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя"""
    id: str
    email: EmailStr
    name: str
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Пользователь и JWT токен для последующих запросов"""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
