from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from inkflow.core.auth import get_current_user
from inkflow.core.db import get_db
from inkflow.domains.identity.entities import User
from inkflow.domains.identity.schemas import UserLogin, UserResponse, LoginResponse
from inkflow.domains.identity.services import IdentityService

router = APIRouter(tags=["users"])


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        avatar=user.avatar,
        created_at=user.created_at,
        updated_at=user.updated_at
    )


@router.post("/users", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Вход: пользователь создаётся или обновляется по email"""
    identity_service = IdentityService(db)
    user, token = await identity_service.login_user(login_data)
    return LoginResponse(user=_to_response(user), access_token=token)


@router.get("/users/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Получение информации о текущем пользователе"""
    return _to_response(current_user)


@router.get("/settings")
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """Сохранённые настройки пользователя (пустой объект, если их нет)"""
    return await IdentityService(db).get_settings(current_user.id)


@router.put("/settings")
async def update_settings(
    settings: Dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Сохранение настроек пользователя"""
    try:
        await IdentityService(db).update_settings(current_user.id, settings)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True}
