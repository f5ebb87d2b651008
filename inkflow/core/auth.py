from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkflow.core.db import get_db
from inkflow.core.security import bearer_token, session_user_id
from inkflow.db.repositories.user_repository import UserRepository
from inkflow.domains.identity.entities import User


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя по Bearer-токену"""
    user_id = session_user_id(bearer_token(authorization))
    
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")
    
    return user
