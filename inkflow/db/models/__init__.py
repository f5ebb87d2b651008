from inkflow.db.models.user import User
from inkflow.db.models.document import Document, Database, CMSConnection
from inkflow.db.models.library import Prompt, ReadingItem

__all__ = [
    "User",
    "Document",
    "Database",
    "CMSConnection",
    "Prompt",
    "ReadingItem"
]
