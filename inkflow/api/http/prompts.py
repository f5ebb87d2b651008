from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from inkflow.core.auth import get_current_user
from inkflow.core.db import get_db
from inkflow.domains.identity.entities import User
from inkflow.domains.library.schemas import (
    PromptCreate, PromptBatchCreate, PromptBatchDelete, PromptUpdate, PromptResponse, BatchResult
)
from inkflow.domains.library.services import PromptService

router = APIRouter(prefix="/prompts", tags=["prompts"])


@router.get("", response_model=List[PromptResponse])
async def get_user_prompts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    prompts = await PromptService(db).get_user_prompts(current_user.id)
    return [PromptResponse.model_validate(prompt) for prompt in prompts]


@router.post("", response_model=PromptResponse, status_code=status.HTTP_201_CREATED)
async def create_prompt(
    prompt_data: PromptCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание промпта"""
    prompt = await PromptService(db).create_prompt(prompt_data, current_user.id)
    return PromptResponse.model_validate(prompt)


@router.post("/batch", response_model=BatchResult)
async def import_prompts(
    batch: PromptBatchCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Импорт нескольких промптов"""
    prompts = await PromptService(db).import_prompts(batch.prompts, current_user.id)
    return BatchResult(count=len(prompts))


@router.post("/delete-batch", response_model=BatchResult)
async def delete_prompts(
    batch: PromptBatchDelete,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Удаление нескольких промптов; чужие id пропускаются"""
    deleted = await PromptService(db).delete_prompts(batch.ids, current_user.id)
    return BatchResult(count=deleted)


@router.put("/{prompt_id}", response_model=PromptResponse)
async def update_prompt(
    prompt_id: str,
    update_data: PromptUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        prompt = await PromptService(db).update_prompt(prompt_id, update_data, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not prompt:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt not found"
        )
    
    return PromptResponse.model_validate(prompt)


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(
    prompt_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    try:
        success = await PromptService(db).delete_prompt(prompt_id, current_user.id)
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt not found"
        )
