"""Рабочее пространство клиента.

Workspace объединяет шлюз, локальные коллекции, контроллер автосохранения и
ассистента. Действия пользователя возвращают результат или None: ошибки
сервера логируются и не пробрасываются, а пустые обязательные поля
отсекаются до сетевого вызова. Удаление выполняется только после
подтверждения через переданный confirm.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from inkflow.client.gateway import GatewayError, PersistenceGateway
from inkflow.client.sync import EntityCollectionStore, SyncController, SyncStatus
from inkflow.core.config import settings as app_settings
from inkflow.domains.assistant.prompts import DEFAULT_PROMPT_SETTINGS
from inkflow.domains.assistant.services import AssistantResult, AssistantService
from inkflow.domains.documents.entities import DEFAULT_TITLE, CMSPlatform, DocumentStatus
from inkflow.domains.identity.schemas import UserResponse
from inkflow.domains.library.entities import ReadingStatus, domain_from_url

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


def _filled(*values: Optional[str]) -> bool:
    return all(value is not None and value.strip() for value in values)


def can_submit_login(email: Optional[str], name: Optional[str]) -> bool:
    return _filled(email, name) and "@" in email


def can_submit_database(name: Optional[str]) -> bool:
    return _filled(name)


def can_submit_cms_connection(name: Optional[str], platform: Optional[str]) -> bool:
    return _filled(name, platform)


def can_submit_prompt(title: Optional[str], content: Optional[str]) -> bool:
    return _filled(title, content)


def can_submit_reading_item(url: Optional[str]) -> bool:
    return _filled(url)


class Workspace:
    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        confirm: ConfirmCallback,
        assistant: Optional[AssistantService] = None,
        autosave_delay: Optional[float] = None,
        completion_delay: Optional[float] = None,
        autocomplete: bool = False
    ):
        self.gateway = gateway
        self.confirm = confirm
        self.assistant = assistant or AssistantService()
        self.completion_delay = (
            completion_delay if completion_delay is not None
            else app_settings.completion_delay_ms / 1000
        )
        self.autocomplete = autocomplete

        self.documents = EntityCollectionStore("documents")
        self.databases = EntityCollectionStore("databases")
        self.cms_connections = EntityCollectionStore("cms-connections")
        self.prompts = EntityCollectionStore("prompts")
        self.reading_list = EntityCollectionStore("reading-list")
        self.databases.link(self.documents, "database_id")
        self.cms_connections.link(self.documents, "cms_connection_id")

        self.controller = SyncController(gateway, self.documents, delay=autosave_delay)

        self.user: Optional[UserResponse] = None
        self.settings: Dict[str, Any] = {}
        self.ghost_text = ""
        self._completion_timer: Optional[asyncio.TimerHandle] = None
        self._completion_task: Optional[asyncio.Task] = None

    @property
    def stores(self) -> List[EntityCollectionStore]:
        return [self.documents, self.databases, self.cms_connections, self.prompts, self.reading_list]

    @property
    def status(self) -> SyncStatus:
        return self.controller.status

    @property
    def active_document(self):
        return self.controller.active

    @property
    def content(self) -> str:
        return self.controller.buffer.read()

    @property
    def prompt_settings(self) -> Dict[str, str]:
        return {**DEFAULT_PROMPT_SETTINGS, **self.settings.get("prompts", {})}

    # Сессия

    async def login(self, email: str, name: str, avatar: Optional[str] = None) -> Optional[UserResponse]:
        if not can_submit_login(email, name):
            return None
        try:
            self.user = await self.gateway.login(email.strip(), name.strip(), avatar)
        except GatewayError as exc:
            logger.warning("Login failed: %s", exc)
            return None

        await self.refresh()
        return self.user

    async def logout(self) -> None:
        self._cancel_completion()
        self.controller.reset()
        for store in self.stores:
            store.clear()
        self.settings = {}
        self.user = None
        self.gateway.logout()

    async def refresh(self) -> bool:
        """Полная загрузка всех коллекций и настроек пользователя"""
        try:
            results = await asyncio.gather(*(self.gateway.list(store.kind) for store in self.stores))
            self.settings = await self.gateway.get_settings()
        except GatewayError as exc:
            logger.warning("Failed to load workspace: %s", exc)
            return False

        for store, entities in zip(self.stores, results):
            store.replace_all(entities)
        if self.controller.active_id and self.active_document is None:
            self.controller.forget(self.controller.active_id)
        return True

    async def save_prompt_settings(self, values: Dict[str, str]) -> bool:
        updated = {**self.settings, "prompts": {**self.settings.get("prompts", {}), **values}}
        try:
            await self.gateway.update_settings(updated)
        except GatewayError as exc:
            logger.warning("Failed to save settings: %s", exc)
            return False
        self.settings = updated
        return True

    # Документы

    async def create_document(
        self,
        title: str = DEFAULT_TITLE,
        database_id: Optional[str] = None,
        parent_id: Optional[str] = None
    ):
        """Новая страница сразу сохраняется на сервере и открывается"""
        fields = {"title": title, "content": "", "database_id": database_id, "parent_id": parent_id}
        try:
            document = await self.gateway.create("documents", fields)
        except GatewayError as exc:
            logger.warning("Failed to create document: %s", exc)
            return None

        self.documents.upsert_one(document)
        self.open_document(document.id)
        return document

    def open_document(self, document_id: str) -> None:
        self._cancel_completion()
        self.controller.select(document_id)

    def close_document(self) -> None:
        self._cancel_completion()
        self.controller.select(None)

    def edit(self, new_text: str) -> None:
        self.controller.mutate(new_text)
        self._after_edit()

    def insert_text(self, position: int, text: str) -> None:
        self.controller.insert(position, text)
        self._after_edit()

    async def delete_document(self, document_id: str) -> bool:
        if not self.confirm("Are you sure you want to delete this page?"):
            return False

        # Пока удаление не подтверждено, несохранённая правка остаётся в буфере
        if not await self._delete("documents", document_id):
            return False
        self.controller.forget(document_id)
        self.documents.remove_one(document_id)
        return True

    async def set_document_cms(self, document_id: str, cms_connection_id: Optional[str]):
        return await self._update_document(document_id, {"cms_connection_id": cms_connection_id})

    async def set_document_status(self, document_id: str, status: DocumentStatus):
        return await self._update_document(document_id, {"status": DocumentStatus(status)})

    async def _update_document(self, document_id: str, fields: Dict[str, Any]):
        try:
            document = await self.gateway.update("documents", document_id, fields)
        except GatewayError as exc:
            logger.warning("Failed to update document %s: %s", document_id, exc)
            return None
        if document_id in self.documents:
            self.documents.upsert_one(document)
        return document

    # Базы и подключения к CMS

    async def create_database(
        self,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None
    ):
        if not can_submit_database(name):
            return None
        return await self._create(self.databases, {"name": name, "description": description, "color": color})

    async def delete_database(self, database_id: str) -> bool:
        if not self.confirm("Delete this database? Pages inside it will be kept."):
            return False
        if not await self._delete("databases", database_id):
            return False
        self.databases.remove_one(database_id)
        return True

    async def save_cms_connection(
        self,
        name: str,
        platform: CMSPlatform,
        url: Optional[str] = None,
        api_key: Optional[str] = None
    ):
        if not can_submit_cms_connection(name, platform):
            return None
        fields = {"name": name, "platform": CMSPlatform(platform), "url": url, "api_key": api_key}
        return await self._create(self.cms_connections, fields)

    async def delete_cms_connection(self, connection_id: str) -> bool:
        if not self.confirm("Remove this connection?"):
            return False
        if not await self._delete("cms-connections", connection_id):
            return False
        self.cms_connections.remove_one(connection_id)
        return True

    # Промпты

    async def save_prompt(
        self,
        title: str,
        content: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        tags: Optional[List[str]] = None,
        prompt_id: Optional[str] = None
    ):
        """Создать промпт или обновить существующий (prompt_id)"""
        if not can_submit_prompt(title, content):
            return None

        fields = {"title": title, "content": content, "description": description, "tags": tags or []}
        if category:
            fields["category"] = category
        if prompt_id is None:
            return await self._create(self.prompts, fields)

        try:
            prompt = await self.gateway.update("prompts", prompt_id, fields)
        except GatewayError as exc:
            logger.warning("Failed to update prompt %s: %s", prompt_id, exc)
            return None
        self.prompts.upsert_one(prompt)
        return prompt

    async def import_prompts(self, prompts: Iterable[Dict[str, Any]]) -> int:
        valid = [p for p in prompts if can_submit_prompt(p.get("title"), p.get("content"))]
        if not valid:
            return 0
        try:
            count = await self.gateway.import_prompts(valid)
            self.prompts.replace_all(await self.gateway.list("prompts"))
        except GatewayError as exc:
            logger.warning("Failed to import prompts: %s", exc)
            return 0
        return count

    async def delete_prompts(self, prompt_ids: List[str]) -> int:
        if not prompt_ids:
            return 0
        if not self.confirm(f"Delete {len(prompt_ids)} prompt(s)?"):
            return 0
        try:
            count = await self.gateway.delete_prompts(prompt_ids)
        except GatewayError as exc:
            logger.warning("Failed to delete prompts: %s", exc)
            return 0
        for prompt_id in prompt_ids:
            self.prompts.remove_one(prompt_id)
        return count

    # Список чтения

    async def add_reading_item(
        self,
        url: str,
        title: Optional[str] = None,
        excerpt: Optional[str] = None,
        tags: Optional[List[str]] = None
    ):
        if not can_submit_reading_item(url):
            return None
        url = url.strip()
        fields = {
            "url": url,
            "title": (title or "").strip() or url,
            "domain": domain_from_url(url),
            "excerpt": excerpt,
            "tags": tags or [],
        }
        return await self._create(self.reading_list, fields)

    async def set_reading_status(self, item_id: str, status: ReadingStatus):
        return await self._update_reading_item(item_id, {"status": ReadingStatus(status)})

    async def summarize_reading_item(self, item_id: str) -> Optional[AssistantResult]:
        """AI-резюме статьи; сохраняется только удачный ответ модели"""
        item = self.reading_list.get(item_id)
        if item is None:
            return None

        result = await self.assistant.article_insights(item.url, item.title)
        if not result.used_fallback:
            await self._update_reading_item(item_id, {"ai_summary": result.text})
        return result

    async def delete_reading_item(self, item_id: str) -> bool:
        if not self.confirm("Remove this article from your reading list?"):
            return False
        if not await self._delete("reading-list", item_id):
            return False
        self.reading_list.remove_one(item_id)
        return True

    async def _update_reading_item(self, item_id: str, fields: Dict[str, Any]):
        try:
            item = await self.gateway.update("reading-list", item_id, fields)
        except GatewayError as exc:
            logger.warning("Failed to update reading item %s: %s", item_id, exc)
            return None
        if item_id in self.reading_list:
            self.reading_list.upsert_one(item)
        return item

    # Ассистент

    async def request_completion(self) -> str:
        """Ghost-text для конца буфера; ответ отбрасывается, если текст уже изменился"""
        document_id = self.controller.active_id
        snapshot = self.content
        if document_id is None:
            return ""

        result = await self.assistant.complete(snapshot)
        if self.controller.active_id != document_id or self.content != snapshot:
            logger.debug("Discarding stale completion for %s", document_id)
            return ""

        self.ghost_text = result.text
        return self.ghost_text

    def accept_completion(self) -> None:
        if self.ghost_text:
            self.edit(self.content + self.ghost_text)

    async def apply_rewrite(self, start: int, end: int, instruction: str) -> Optional[AssistantResult]:
        """Переписать выделение [start, end); instruction может быть ключом prompt_settings"""
        document_id = self.controller.active_id
        buffer = self.controller.buffer
        selection = buffer.slice(start, end)
        if document_id is None or not selection.strip() or not instruction.strip():
            return None

        snapshot = buffer.read()
        instruction = self.prompt_settings.get(instruction, instruction)
        result = await self.assistant.rewrite(selection, instruction, snapshot)
        if self.controller.active_id != document_id or buffer.read() != snapshot:
            logger.debug("Discarding rewrite for %s, buffer changed", document_id)
            return None

        if not result.used_fallback and result.text != selection:
            self.controller.replace(start, end, result.text)
        return result

    async def close(self) -> None:
        """Дописать несохранённое и дождаться фоновых задач"""
        self._cancel_completion()
        await self.controller.flush()
        await self.controller.drain()

    def _after_edit(self) -> None:
        self.ghost_text = ""
        self._cancel_completion()
        if self.autocomplete and self.controller.active_id is not None:
            loop = asyncio.get_running_loop()
            self._completion_timer = loop.call_later(self.completion_delay, self._start_completion)

    def _start_completion(self) -> None:
        self._completion_timer = None
        self._completion_task = asyncio.get_running_loop().create_task(self.request_completion())

    def _cancel_completion(self) -> None:
        if self._completion_timer is not None:
            self._completion_timer.cancel()
            self._completion_timer = None
        if self._completion_task is not None and not self._completion_task.done():
            self._completion_task.cancel()
        self._completion_task = None

    async def _create(self, store: EntityCollectionStore, fields: Dict[str, Any]):
        try:
            entity = await self.gateway.create(store.kind, fields)
        except GatewayError as exc:
            logger.warning("Failed to create %s: %s", store.kind, exc)
            return None
        store.upsert_one(entity)
        logger.debug("Created %s %s", store.kind, entity.id)
        return entity

    async def _delete(self, kind: str, entity_id: str) -> bool:
        try:
            await self.gateway.delete(kind, entity_id)
        except GatewayError as exc:
            logger.warning("Failed to delete %s %s: %s", kind, entity_id, exc)
            return False
        logger.info("Deleted %s %s", kind, entity_id)
        return True
