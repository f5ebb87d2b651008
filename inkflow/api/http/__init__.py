from inkflow.api.http.health import router as health_router
from inkflow.api.http.users import router as users_router
from inkflow.api.http.documents import router as documents_router
from inkflow.api.http.databases import router as databases_router
from inkflow.api.http.cms_connections import router as cms_connections_router
from inkflow.api.http.prompts import router as prompts_router
from inkflow.api.http.reading_list import router as reading_list_router
from inkflow.api.http.assistant import router as assistant_router

__all__ = [
    "health_router",
    "users_router",
    "documents_router",
    "databases_router",
    "cms_connections_router",
    "prompts_router",
    "reading_list_router",
    "assistant_router"
]
