from typing import Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from inkflow.db.repositories.user_repository import UserRepository
from inkflow.domains.identity.entities import User
from inkflow.domains.identity.schemas import UserLogin
from inkflow.core.security import issue_session_token

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для входа пользователей и их настроек"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)
    
    async def login_user(self, login_data: UserLogin) -> Tuple[User, str]:
        """Вход по email: пользователь создаётся или обновляется, выдаётся JWT"""
        user = await self.user_repository.get_by_email(login_data.email)
        
        if user:
            user.update_profile(name=login_data.name, avatar=login_data.avatar)
            user = await self.user_repository.update(user)
        else:
            user = await self.user_repository.create(
                User.create_user(email=login_data.email, name=login_data.name, avatar=login_data.avatar)
            )
            logger.info("Registered user %s", user.id)
        
        token = issue_session_token(user.id, user.email)
        return user, token
    
    async def get_settings(self, user_id: str) -> Dict[str, Any]:
        """Получение сохранённых настроек пользователя"""
        user = await self.user_repository.get_by_id(user_id)
        return user.settings if user else {}
    
    async def update_settings(self, user_id: str, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Полная замена настроек пользователя"""
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise ValueError("User not found")
        
        user.settings = dict(settings)
        user = await self.user_repository.update(user)
        return user.settings
