import uuid
from datetime import datetime, timedelta

from sqlalchemy import Column, DateTime, String

from inkflow.core.db import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class BaseModel(Base):
    """Общие поля всех таблиц: строковый UUID и временные метки"""
    __abstract__ = True
    
    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    def touch(self) -> datetime:
        """Обновление updated_at со строгим возрастанием"""
        now = datetime.utcnow()
        # Часы могут вернуть то же значение для двух быстрых записей подряд
        if self.updated_at is not None and now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now
        return now
