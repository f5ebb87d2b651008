from inkflow.db.repositories.user_repository import UserRepository
from inkflow.db.repositories.document_repository import (
    DocumentRepository, DatabaseRepository, CMSConnectionRepository
)
from inkflow.db.repositories.library_repository import PromptRepository, ReadingItemRepository

__all__ = [
    "UserRepository",
    "DocumentRepository",
    "DatabaseRepository",
    "CMSConnectionRepository",
    "PromptRepository",
    "ReadingItemRepository"
]
