import uuid
from datetime import datetime
from typing import Optional, Dict, Any


class User:
    """Сущность пользователя домена Identity"""
    
    def __init__(
        self,
        id: str,
        email: str,
        name: str = "",
        avatar: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.name = name
        self.avatar = avatar
        self.settings = dict(settings or {})
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()
    
    def update_profile(self, name: Optional[str] = None, avatar: Optional[str] = None) -> None:
        """Обновление профиля пользователя"""
        if name:
            self.name = name
        if avatar:
            self.avatar = avatar
        self.updated_at = datetime.utcnow()
    
    @classmethod
    def create_user(cls, email: str, name: str = "", avatar: Optional[str] = None) -> "User":
        """Создание нового пользователя"""
        return cls(
            id=str(uuid.uuid4()),
            email=email,
            name=name or email.split("@")[0],
            avatar=avatar
        )
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id
    
    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
