from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from inkflow.core.auth import get_current_user
from inkflow.core.db import get_db
from inkflow.domains.documents.schemas import CMSConnectionCreate, CMSConnectionResponse
from inkflow.domains.documents.services import CMSConnectionService
from inkflow.domains.identity.entities import User

router = APIRouter(prefix="/cms-connections", tags=["cms"])


@router.get("", response_model=List[CMSConnectionResponse])
async def get_user_connections(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    connections = await CMSConnectionService(db).get_user_connections(current_user.id)
    return [CMSConnectionResponse.model_validate(connection) for connection in connections]


@router.post("", response_model=CMSConnectionResponse, status_code=status.HTTP_201_CREATED)
async def create_connection(
    connection_data: CMSConnectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание подключения к CMS"""
    connection = await CMSConnectionService(db).create_connection(connection_data, current_user.id)
    return CMSConnectionResponse.model_validate(connection)


@router.delete("/{connection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_connection(
    connection_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление подключения; ссылки в документах сбрасываются"""
    try:
        success = await CMSConnectionService(db).delete_connection(connection_id, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Connection not found"
        )
