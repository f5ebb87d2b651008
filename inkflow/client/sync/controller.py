"""Отложенное автосохранение открытой сущности.

Контроллер связывает буфер редактирования, локальную коллекцию и шлюз.
Каждое изменение буфера перезапускает таймер; когда пользователь перестаёт
печатать на delay секунд, содержимое уходит на сервер одним update().
Ошибки шлюза не выходят за пределы контроллера: они логируются, а статус
остаётся "pending" до следующей успешной записи.
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional, Set

from inkflow.client.gateway import GatewayError, PersistenceGateway
from inkflow.client.sync.buffer import EditBuffer
from inkflow.client.sync.store import EntityCollectionStore
from inkflow.core.config import settings
from inkflow.domains.documents.entities import infer_title

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    SAVED = "saved"
    DIRTY_PENDING = "dirty_pending"
    WRITING = "writing"
    WRITE_FAILED = "write_failed"


class SyncStatus(str, Enum):
    """То, что видит пользователь: сохранено или ещё сохраняется"""
    SAVED = "saved"
    PENDING = "pending"


UNSAVED_STATES = (SyncState.DIRTY_PENDING, SyncState.WRITE_FAILED)


class SyncController:
    def __init__(
        self,
        gateway: PersistenceGateway,
        store: EntityCollectionStore,
        *,
        buffer: Optional[EditBuffer] = None,
        delay: Optional[float] = None,
        kind: str = "documents"
    ):
        self.gateway = gateway
        self.store = store
        self.buffer = buffer or EditBuffer()
        self.delay = delay if delay is not None else settings.autosave_delay_ms / 1000
        self.kind = kind

        self.state = SyncState.IDLE
        self.active_id: Optional[str] = None
        self._revision = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[Callable[[SyncState], None]] = []

    @property
    def status(self) -> SyncStatus:
        if self.state in (SyncState.IDLE, SyncState.SAVED):
            return SyncStatus.SAVED
        return SyncStatus.PENDING

    @property
    def active(self):
        return self.store.get(self.active_id)

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: Callable[[SyncState], None]) -> None:
        self._listeners.append(listener)

    def select(self, entity_id: Optional[str]) -> None:
        """Открыть сущность (None - снять выделение).

        Несохранённая правка предыдущей сущности записывается в неё же
        фоновой задачей до загрузки новой.
        """
        if entity_id is not None and entity_id == self.active_id and self.active is not None:
            return

        if self.active_id is not None and self.state in UNSAVED_STATES:
            self._spawn(self._write(self.active_id, self.buffer.read(), self._revision))

        self._load(self.store.get(entity_id) if entity_id else None)

    def forget(self, entity_id: str) -> None:
        """Сущность удаляется: отменить таймер и закрыть её без записи"""
        if entity_id == self.active_id:
            self._load(None)

    def reset(self) -> None:
        """Выход пользователя: отменить таймер и фоновые записи"""
        for task in list(self._tasks):
            task.cancel()
        self._load(None)

    def mutate(self, new_text: str) -> None:
        if self.active_id is None:
            logger.debug("Ignoring edit with nothing selected")
            return
        self.buffer.mutate(new_text)
        self._mark_dirty()

    def insert(self, position: int, text: str) -> None:
        if self.active_id is None:
            logger.debug("Ignoring insert with nothing selected")
            return
        self.buffer.insert(position, text)
        self._mark_dirty()

    def replace(self, start: int, end: int, text: str) -> None:
        if self.active_id is None:
            logger.debug("Ignoring replace with nothing selected")
            return
        self.buffer.replace(start, end, text)
        self._mark_dirty()

    async def flush(self) -> bool:
        """Записать открытую сущность немедленно; True, если запись подтверждена"""
        self._cancel_timer()
        if self.active_id is None or self.state not in UNSAVED_STATES:
            return self.state != SyncState.WRITE_FAILED
        return await self._write(self.active_id, self.buffer.read(), self._revision)

    async def drain(self) -> None:
        """Дождаться фоновых записей (при закрытии и в тестах)"""
        while self._tasks:
            await asyncio.wait(list(self._tasks))

    def _load(self, entity) -> None:
        self._cancel_timer()
        self._revision += 1
        self.active_id = entity.id if entity is not None else None
        self.buffer.load(entity)
        self._set_state(SyncState.SAVED if entity is not None else SyncState.IDLE)

    def _mark_dirty(self) -> None:
        self._revision += 1
        self._set_state(SyncState.DIRTY_PENDING)
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._on_timer, self.active_id, self._revision)

    def _on_timer(self, entity_id: str, revision: int) -> None:
        self._timer = None
        if entity_id != self.active_id or revision != self._revision:
            return
        self._spawn(self._write(entity_id, self.buffer.read(), revision))

    async def _write(self, entity_id: str, content: str, revision: int) -> bool:
        entity = self.store.get(entity_id)
        if entity is None:
            logger.debug("Skipping write for removed %s %s", self.kind, entity_id)
            return False

        fields = {"content": content}
        title = infer_title(entity.title, content)
        if title != entity.title:
            fields["title"] = title

        if self._is_current(entity_id, revision):
            self._set_state(SyncState.WRITING)

        try:
            updated = await self.gateway.update(self.kind, entity_id, fields)
        except GatewayError as exc:
            logger.warning("Autosave of %s %s failed: %s", self.kind, entity_id, exc)
            return self._write_failed(entity_id, revision)
        except Exception:
            # Шлюз нарушил контракт; правка остаётся несохранённой
            logger.exception("Autosave of %s %s crashed", self.kind, entity_id)
            return self._write_failed(entity_id, revision)

        # Сущность могли удалить, пока запрос был в полёте
        if not self.store.contains(entity_id):
            logger.debug("Dropping write response for removed %s %s", self.kind, entity_id)
            return False

        self.store.upsert_one(updated)
        if self._is_current(entity_id, revision):
            self._set_state(SyncState.SAVED)
        return True

    def _write_failed(self, entity_id: str, revision: int) -> bool:
        if self._is_current(entity_id, revision):
            self._set_state(SyncState.WRITE_FAILED)
        return False

    def _is_current(self, entity_id: str, revision: int) -> bool:
        return entity_id == self.active_id and revision == self._revision

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background write crashed", exc_info=task.exception())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_state(self, state: SyncState) -> None:
        if state == self.state:
            return
        logger.debug("Sync state %s -> %s", self.state.value, state.value)
        self.state = state
        for listener in self._listeners:
            listener(state)
