from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from inkflow.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"
    
    title = Column(String(255), nullable=False, default="Untitled Page")
    content = Column(Text, default="")
    status = Column(String(32), nullable=False, default="Draft")
    icon = Column(String(64), nullable=True)
    cover = Column(String(1024), nullable=True)
    # Теги и свойства хранятся сериализованными в JSON
    tags = Column(Text, nullable=False, default="[]")
    properties = Column(Text, nullable=False, default="{}")
    
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    database_id = Column(String(36), ForeignKey("databases.id"), nullable=True, index=True)
    cms_connection_id = Column(String(36), ForeignKey("cms_connections.id"), nullable=True, index=True)
    parent_id = Column(String(36), ForeignKey("documents.id"), nullable=True)
    
    # Relationships
    owner = relationship("User", back_populates="documents")
    database = relationship("Database", back_populates="documents")
    cms_connection = relationship("CMSConnection", back_populates="documents")


class Database(BaseModel):
    __tablename__ = "databases"
    
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    view_type = Column(String(32), nullable=False, default="TABLE")
    color = Column(String(7), nullable=False, default="#000000")
    
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    
    # Relationships
    owner = relationship("User", back_populates="databases")
    documents = relationship("Document", back_populates="database")


class CMSConnection(BaseModel):
    __tablename__ = "cms_connections"
    
    name = Column(String(255), nullable=False)
    platform = Column(String(32), nullable=False)
    url = Column(String(1024), nullable=True)
    api_key = Column(String(512), nullable=True)
    
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    
    # Relationships
    owner = relationship("User", back_populates="cms_connections")
    documents = relationship("Document", back_populates="cms_connection")
