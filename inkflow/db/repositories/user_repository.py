from typing import Optional, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import json

from inkflow.db.models.user import User as UserModel
from inkflow.db.serialization import load_json_field

if TYPE_CHECKING:
    from inkflow.domains.identity.entities import User


class UserRepository:
    """Репозиторий для работы с пользователями"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, user: "User") -> "User":
        """Создание нового пользователя"""
        db_user = UserModel(
            id=user.id,
            email=user.email,
            name=user.name,
            avatar=user.avatar,
            settings=json.dumps(user.settings)
        )
        
        self.session.add(db_user)
        try:
            await self.session.commit()
            await self.session.refresh(db_user)
            return self._to_domain(db_user)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("User with this email already exists")
    
    async def get_by_id(self, user_id: str) -> Optional["User"]:
        """Получение пользователя по id"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None
    
    async def get_by_email(self, email: str) -> Optional["User"]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return self._to_domain(db_user) if db_user else None
    
    async def update(self, user: "User") -> "User":
        """Обновление пользователя"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user.id)
        )
        db_user = result.scalar_one()
        db_user.name = user.name
        db_user.avatar = user.avatar
        db_user.settings = json.dumps(user.settings)
        db_user.touch()
        
        await self.session.commit()
        await self.session.refresh(db_user)
        return self._to_domain(db_user)
    
    def _to_domain(self, db_user: UserModel) -> "User":
        """Преобразование модели БД в доменную сущность"""
        from inkflow.domains.identity.entities import User
        
        return User(
            id=db_user.id,
            email=db_user.email,
            name=db_user.name,
            avatar=db_user.avatar,
            settings=load_json_field(db_user.settings, "{}"),
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
