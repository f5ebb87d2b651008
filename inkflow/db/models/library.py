from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from inkflow.db.base import BaseModel


class Prompt(BaseModel):
    __tablename__ = "prompts"
    
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(120), nullable=False, default="General")
    tags = Column(Text, nullable=False, default="[]")
    
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    
    # Relationships
    owner = relationship("User", back_populates="prompts")


class ReadingItem(BaseModel):
    __tablename__ = "reading_items"
    
    url = Column(String(2048), nullable=False)
    title = Column(String(512), nullable=False)
    domain = Column(String(255), nullable=False, default="")
    excerpt = Column(Text, nullable=True)
    image = Column(String(2048), nullable=True)
    tags = Column(Text, nullable=False, default="[]")
    status = Column(String(16), nullable=False, default="unread")
    ai_summary = Column(Text, nullable=True)
    source_type = Column(String(16), nullable=False, default="manual")
    
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    
    # Relationships
    owner = relationship("User", back_populates="reading_items")
