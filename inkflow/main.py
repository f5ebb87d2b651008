from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkflow.api.http import health_router
from inkflow.api.router import api_router
from inkflow.core.config import settings
from inkflow.core.db import init_models
from inkflow.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_models()
    logger.info("InkFlow API ready on port %s", settings.port)
    yield


app = FastAPI(
    title="InkFlow",
    description="Редактор документов с автосохранением и AI-ассистентом",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(api_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "InkFlow API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
