from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from inkflow.db.repositories.library_repository import PromptRepository, ReadingItemRepository
from inkflow.domains.library.entities import Prompt, ReadingItem, domain_from_url
from inkflow.domains.library.schemas import (
    PromptCreate, PromptUpdate, ReadingItemCreate, ReadingItemUpdate
)

logger = logging.getLogger(__name__)


class PromptService:
    """Сервис библиотеки промптов"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.prompt_repository = PromptRepository(session)
    
    async def create_prompt(self, prompt_data: PromptCreate, user_id: str) -> Prompt:
        """Создание промпта"""
        return await self.prompt_repository.create(self._build(prompt_data, user_id))
    
    async def import_prompts(self, prompts: List[PromptCreate], user_id: str) -> List[Prompt]:
        """Пакетный импорт промптов"""
        created = await self.prompt_repository.create_many([self._build(p, user_id) for p in prompts])
        logger.info("Imported %d prompts for user %s", len(created), user_id)
        return created
    
    async def get_user_prompts(self, user_id: str) -> List[Prompt]:
        """Получение промптов пользователя"""
        return await self.prompt_repository.get_by_owner(user_id)
    
    async def update_prompt(self, prompt_id: str, update_data: PromptUpdate, user_id: str) -> Optional[Prompt]:
        """Обновление промпта"""
        prompt = await self._get_owned(prompt_id, user_id)
        if not prompt:
            return None
        
        values = {k: v for k, v in update_data.model_dump(exclude_unset=True).items() if v is not None}
        return await self.prompt_repository.update(prompt_id, values)
    
    async def delete_prompt(self, prompt_id: str, user_id: str) -> bool:
        """Удаление промпта"""
        prompt = await self._get_owned(prompt_id, user_id)
        if not prompt:
            return False
        return await self.prompt_repository.delete(prompt_id)
    
    async def delete_prompts(self, prompt_ids: List[str], user_id: str) -> int:
        """Пакетное удаление; чужие промпты не затрагиваются"""
        return await self.prompt_repository.delete_many(prompt_ids, user_id)
    
    async def _get_owned(self, prompt_id: str, user_id: str) -> Optional[Prompt]:
        prompt = await self.prompt_repository.get_by_id(prompt_id)
        if prompt and prompt.user_id != user_id:
            raise PermissionError("You don't have access to this prompt")
        return prompt
    
    @staticmethod
    def _build(prompt_data: PromptCreate, user_id: str) -> Prompt:
        return Prompt(
            id=str(uuid.uuid4()),
            title=prompt_data.title,
            content=prompt_data.content,
            user_id=user_id,
            description=prompt_data.description or "",
            category=prompt_data.category,
            tags=list(prompt_data.tags)
        )


class ReadingListService:
    """Сервис списка чтения"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.item_repository = ReadingItemRepository(session)
    
    async def add_item(self, item_data: ReadingItemCreate, user_id: str) -> ReadingItem:
        """Добавление статьи в список чтения"""
        item = ReadingItem(
            id=str(uuid.uuid4()),
            url=item_data.url,
            title=item_data.title,
            user_id=user_id,
            domain=item_data.domain or domain_from_url(item_data.url),
            excerpt=item_data.excerpt,
            image=item_data.image,
            tags=list(item_data.tags),
            source_type=item_data.source_type
        )
        return await self.item_repository.create(item)
    
    async def get_user_items(self, user_id: str) -> List[ReadingItem]:
        """Получение списка чтения пользователя"""
        return await self.item_repository.get_by_owner(user_id)
    
    async def update_item(self, item_id: str, update_data: ReadingItemUpdate, user_id: str) -> Optional[ReadingItem]:
        """Обновление статьи"""
        item = await self._get_owned(item_id, user_id)
        if not item:
            return None
        
        values = {k: v for k, v in update_data.model_dump(exclude_unset=True).items() if v is not None}
        return await self.item_repository.update(item_id, values)
    
    async def delete_item(self, item_id: str, user_id: str) -> bool:
        """Удаление статьи"""
        item = await self._get_owned(item_id, user_id)
        if not item:
            return False
        return await self.item_repository.delete(item_id)
    
    async def _get_owned(self, item_id: str, user_id: str) -> Optional[ReadingItem]:
        item = await self.item_repository.get_by_id(item_id)
        if item and item.user_id != user_id:
            raise PermissionError("You don't have access to this item")
        return item
