from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from inkflow.core.auth import get_current_user
from inkflow.core.db import get_db
from inkflow.domains.documents.entities import Document
from inkflow.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse,
    DocumentExportRequest, DocumentExportResponse
)
from inkflow.domains.documents.services import DocumentService
from inkflow.domains.identity.entities import User

router = APIRouter(prefix="/documents", tags=["documents"])


def _to_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        title=document.title,
        content=document.content,
        status=document.status,
        user_id=document.user_id,
        database_id=document.database_id,
        cms_connection_id=document.cms_connection_id,
        parent_id=document.parent_id,
        icon=document.icon,
        cover=document.cover,
        tags=document.tags,
        properties=document.properties,
        created_at=document.created_at,
        updated_at=document.updated_at,
        word_count=document.get_word_count(),
        content_length=document.get_content_length()
    )


@router.get("", response_model=List[DocumentResponse])
async def get_user_documents(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение списка документов, последние изменённые первыми"""
    documents = await DocumentService(db).get_user_documents(current_user.id)
    return [_to_response(doc) for doc in documents]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    try:
        document = await DocumentService(db).create_document(document_data, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _to_response(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по id"""
    try:
        document = await DocumentService(db).get_document(document_id, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    
    return _to_response(document)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    update_data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Частичное обновление документа; ответ содержит документ целиком"""
    try:
        document = await DocumentService(db).update_document(document_id, update_data, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    
    return _to_response(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление документа"""
    try:
        success = await DocumentService(db).delete_document(document_id, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )


@router.post("/{document_id}/export", response_model=DocumentExportResponse)
async def export_document(
    document_id: str,
    export_request: DocumentExportRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Экспорт документа"""
    try:
        export_data = await DocumentService(db).export_document(
            document_id,
            export_request.format,
            current_user.id
        )
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not export_data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    
    return DocumentExportResponse(**export_data)
