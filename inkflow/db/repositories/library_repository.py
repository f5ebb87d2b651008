from typing import Optional, List, Dict, Any, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from inkflow.db.models.library import Prompt as PromptModel, ReadingItem as ReadingItemModel
from inkflow.db.serialization import TAGS, dump_json_fields, load_json_field

if TYPE_CHECKING:
    from inkflow.domains.library.entities import Prompt, ReadingItem


class PromptRepository:
    """Репозиторий библиотеки промптов"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, prompt: "Prompt") -> "Prompt":
        """Создание промпта"""
        created = await self.create_many([prompt])
        return created[0]
    
    async def create_many(self, prompts: List["Prompt"]) -> List["Prompt"]:
        """Создание нескольких промптов в одной транзакции"""
        db_prompts = [
            PromptModel(**dump_json_fields({
                "id": prompt.id,
                "title": prompt.title,
                "content": prompt.content,
                "description": prompt.description,
                "category": prompt.category,
                "tags": prompt.tags,
                "user_id": prompt.user_id,
            }, TAGS))
            for prompt in prompts
        ]
        self.session.add_all(db_prompts)
        await self.session.commit()
        for db_prompt in db_prompts:
            await self.session.refresh(db_prompt)
        return [self._to_domain(db_prompt) for db_prompt in db_prompts]
    
    async def get_by_id(self, prompt_id: str) -> Optional["Prompt"]:
        """Получение промпта по id"""
        db_prompt = await self._get_model(prompt_id)
        return self._to_domain(db_prompt) if db_prompt else None
    
    async def get_by_owner(self, user_id: str) -> List["Prompt"]:
        """Промпты владельца, последние изменённые первыми"""
        result = await self.session.execute(
            select(PromptModel)
            .where(PromptModel.user_id == user_id)
            .order_by(PromptModel.updated_at.desc())
        )
        return [self._to_domain(p) for p in result.scalars().all()]
    
    async def update(self, prompt_id: str, values: Dict[str, Any]) -> Optional["Prompt"]:
        """Обновление промпта"""
        db_prompt = await self._get_model(prompt_id)
        if not db_prompt:
            return None
        
        for field, value in dump_json_fields(values, TAGS).items():
            setattr(db_prompt, field, value)
        db_prompt.touch()
        
        await self.session.commit()
        await self.session.refresh(db_prompt)
        return self._to_domain(db_prompt)
    
    async def delete(self, prompt_id: str) -> bool:
        """Удаление промпта"""
        result = await self.session.execute(delete(PromptModel).where(PromptModel.id == prompt_id))
        await self.session.commit()
        return result.rowcount > 0
    
    async def delete_many(self, prompt_ids: List[str], user_id: str) -> int:
        """Удаление нескольких промптов владельца"""
        result = await self.session.execute(
            delete(PromptModel).where(PromptModel.id.in_(prompt_ids), PromptModel.user_id == user_id)
        )
        await self.session.commit()
        return result.rowcount
    
    async def _get_model(self, prompt_id: str) -> Optional[PromptModel]:
        result = await self.session.execute(select(PromptModel).where(PromptModel.id == prompt_id))
        return result.scalar_one_or_none()
    
    def _to_domain(self, db_prompt: PromptModel) -> "Prompt":
        from inkflow.domains.library.entities import Prompt
        
        return Prompt(
            id=db_prompt.id,
            title=db_prompt.title,
            content=db_prompt.content,
            user_id=db_prompt.user_id,
            description=db_prompt.description,
            category=db_prompt.category,
            tags=load_json_field(db_prompt.tags, "[]"),
            created_at=db_prompt.created_at,
            updated_at=db_prompt.updated_at
        )


class ReadingItemRepository:
    """Репозиторий списка чтения"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, item: "ReadingItem") -> "ReadingItem":
        """Добавление статьи"""
        db_item = ReadingItemModel(**dump_json_fields({
            "id": item.id,
            "url": item.url,
            "title": item.title,
            "domain": item.domain,
            "excerpt": item.excerpt,
            "image": item.image,
            "tags": item.tags,
            "status": item.status.value,
            "source_type": item.source_type.value,
            "user_id": item.user_id,
        }, TAGS))
        self.session.add(db_item)
        await self.session.commit()
        await self.session.refresh(db_item)
        return self._to_domain(db_item)
    
    async def get_by_id(self, item_id: str) -> Optional["ReadingItem"]:
        """Получение статьи по id"""
        db_item = await self._get_model(item_id)
        return self._to_domain(db_item) if db_item else None
    
    async def get_by_owner(self, user_id: str) -> List["ReadingItem"]:
        """Список чтения, недавно добавленные первыми"""
        result = await self.session.execute(
            select(ReadingItemModel)
            .where(ReadingItemModel.user_id == user_id)
            .order_by(ReadingItemModel.created_at.desc())
        )
        return [self._to_domain(item) for item in result.scalars().all()]
    
    async def update(self, item_id: str, values: Dict[str, Any]) -> Optional["ReadingItem"]:
        """Обновление статуса, тегов или AI-конспекта"""
        db_item = await self._get_model(item_id)
        if not db_item:
            return None
        
        for field, value in dump_json_fields(values, TAGS).items():
            setattr(db_item, field, getattr(value, "value", value))
        db_item.touch()
        
        await self.session.commit()
        await self.session.refresh(db_item)
        return self._to_domain(db_item)
    
    async def delete(self, item_id: str) -> bool:
        """Удаление статьи"""
        result = await self.session.execute(delete(ReadingItemModel).where(ReadingItemModel.id == item_id))
        await self.session.commit()
        return result.rowcount > 0
    
    async def _get_model(self, item_id: str) -> Optional[ReadingItemModel]:
        result = await self.session.execute(select(ReadingItemModel).where(ReadingItemModel.id == item_id))
        return result.scalar_one_or_none()
    
    def _to_domain(self, db_item: ReadingItemModel) -> "ReadingItem":
        from inkflow.domains.library.entities import ReadingItem, ReadingSource, ReadingStatus
        
        return ReadingItem(
            id=db_item.id,
            url=db_item.url,
            title=db_item.title,
            user_id=db_item.user_id,
            domain=db_item.domain,
            excerpt=db_item.excerpt,
            image=db_item.image,
            tags=load_json_field(db_item.tags, "[]"),
            status=ReadingStatus(db_item.status),
            ai_summary=db_item.ai_summary,
            source_type=ReadingSource(db_item.source_type),
            created_at=db_item.created_at,
            updated_at=db_item.updated_at
        )
