from fastapi import APIRouter

from inkflow.api.http import (
    users_router,
    documents_router,
    databases_router,
    cms_connections_router,
    prompts_router,
    reading_list_router,
    assistant_router
)

api_router = APIRouter(prefix="/api")
api_router.include_router(users_router)
api_router.include_router(documents_router)
api_router.include_router(databases_router)
api_router.include_router(cms_connections_router)
api_router.include_router(prompts_router)
api_router.include_router(reading_list_router)
api_router.include_router(assistant_router)
