from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from inkflow.core.auth import get_current_user
from inkflow.core.db import get_db
from inkflow.domains.documents.schemas import DatabaseCreate, DatabaseUpdate, DatabaseResponse
from inkflow.domains.documents.services import DatabaseService
from inkflow.domains.identity.entities import User

router = APIRouter(prefix="/databases", tags=["databases"])


@router.get("", response_model=List[DatabaseResponse])
async def get_user_databases(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    databases = await DatabaseService(db).get_user_databases(current_user.id)
    return [DatabaseResponse.model_validate(database) for database in databases]


@router.post("", response_model=DatabaseResponse, status_code=status.HTTP_201_CREATED)
async def create_database(
    database_data: DatabaseCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание базы"""
    database = await DatabaseService(db).create_database(database_data, current_user.id)
    return DatabaseResponse.model_validate(database)


@router.put("/{database_id}", response_model=DatabaseResponse)
async def update_database(
    database_id: str,
    update_data: DatabaseUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Обновление базы"""
    try:
        database = await DatabaseService(db).update_database(database_id, update_data, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not database:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Database not found"
        )
    
    return DatabaseResponse.model_validate(database)


@router.delete("/{database_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_database(
    database_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление базы; документы отвязываются и остаются у пользователя"""
    try:
        success = await DatabaseService(db).delete_database(database_id, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Database not found"
        )
