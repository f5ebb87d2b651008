from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from inkflow.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"
    
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False, default="")
    avatar = Column(String(1024), nullable=True)
    # Настройки хранятся как JSON-строка
    settings = Column(Text, nullable=True)
    
    # Relationships
    documents = relationship("Document", back_populates="owner", cascade="all, delete-orphan")
    databases = relationship("Database", back_populates="owner", cascade="all, delete-orphan")
    cms_connections = relationship("CMSConnection", back_populates="owner", cascade="all, delete-orphan")
    prompts = relationship("Prompt", back_populates="owner", cascade="all, delete-orphan")
    reading_items = relationship("ReadingItem", back_populates="owner", cascade="all, delete-orphan")
