from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from inkflow.core.auth import get_current_user
from inkflow.core.db import get_db
from inkflow.domains.identity.entities import User
from inkflow.domains.library.schemas import ReadingItemCreate, ReadingItemUpdate, ReadingItemResponse
from inkflow.domains.library.services import ReadingListService

router = APIRouter(prefix="/reading-list", tags=["reading-list"])


@router.get("", response_model=List[ReadingItemResponse])
async def get_reading_list(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Список чтения, новые статьи первыми"""
    items = await ReadingListService(db).get_user_items(current_user.id)
    return [ReadingItemResponse.model_validate(item) for item in items]


@router.post("", response_model=ReadingItemResponse, status_code=status.HTTP_201_CREATED)
async def add_reading_item(
    item_data: ReadingItemCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    item = await ReadingListService(db).add_item(item_data, current_user.id)
    return ReadingItemResponse.model_validate(item)


@router.put("/{item_id}", response_model=ReadingItemResponse)
async def update_reading_item(
    item_id: str,
    update_data: ReadingItemUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Смена статуса, тегов или AI-резюме статьи"""
    try:
        item = await ReadingListService(db).update_item(item_id, update_data, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reading item not found"
        )
    
    return ReadingItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reading_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        success = await ReadingListService(db).delete_item(item_id, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reading item not found"
        )
