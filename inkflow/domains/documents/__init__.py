from inkflow.domains.documents.entities import (
    Document, Database, CMSConnection, CMSPlatform, DocumentStatus,
    PLACEHOLDER_TITLES, infer_title, is_placeholder_title
)
from inkflow.domains.documents.schemas import (
    DocumentBase, DocumentCreate, DocumentUpdate, DocumentResponse,
    DocumentExportRequest, DocumentExportResponse,
    DatabaseCreate, DatabaseUpdate, DatabaseResponse,
    CMSConnectionCreate, CMSConnectionResponse
)
from inkflow.domains.documents.services import DocumentService, DatabaseService, CMSConnectionService

__all__ = [
    "Document", "Database", "CMSConnection", "CMSPlatform", "DocumentStatus",
    "PLACEHOLDER_TITLES", "infer_title", "is_placeholder_title",
    "DocumentBase", "DocumentCreate", "DocumentUpdate", "DocumentResponse",
    "DocumentExportRequest", "DocumentExportResponse",
    "DatabaseCreate", "DatabaseUpdate", "DatabaseResponse",
    "CMSConnectionCreate", "CMSConnectionResponse",
    "DocumentService", "DatabaseService", "CMSConnectionService"
]
