import logging
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Set, Tuple, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class EntityCollectionStore(Generic[EntityT]):
    """Локальная коллекция сущностей одного вида, последние первыми.

    Ответы сервера применяются целиком; ответ старше закэшированной копии
    (по updated_at) отбрасывается. При удалении сущности ссылки на неё в
    связанных коллекциях сбрасываются в None.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._items: List[EntityT] = []
        self._links: List[Tuple["EntityCollectionStore", str]] = []
        # Поле -> id удалённых сущностей, на которые оно больше не может ссылаться
        self._dangling: Dict[str, Set[str]] = {}

    def link(self, store: "EntityCollectionStore", field: str) -> None:
        """Поле field сущностей store ссылается на id этой коллекции"""
        self._links.append((store, field))

    def replace_all(self, entities: Iterable[EntityT]) -> None:
        items: List[EntityT] = []
        seen = set()
        for entity in entities:
            if entity.id in seen:
                continue
            seen.add(entity.id)
            items.append(self._drop_dangling(entity))
        self._items = items

    def upsert_one(self, entity: EntityT) -> bool:
        """Вставить или заменить сущность; False, если ответ устарел"""
        entity = self._drop_dangling(entity)
        index = self._index(entity.id)
        if index is None:
            self._items.insert(0, entity)
            return True

        current = self._items[index]
        if entity.updated_at < current.updated_at:
            logger.debug("Discarding stale %s %s", self.kind, entity.id)
            return False

        self._items[index] = entity
        return True

    def remove_one(self, entity_id: str) -> Optional[EntityT]:
        index = self._index(entity_id)
        if index is None:
            return None

        removed = self._items.pop(index)
        for store, field in self._links:
            store.clear_references(field, entity_id)
        return removed

    def clear_references(self, field: str, entity_id: str) -> int:
        self._dangling.setdefault(field, set()).add(entity_id)
        cleared = 0
        for index, entity in enumerate(self._items):
            if getattr(entity, field, None) == entity_id:
                self._items[index] = entity.model_copy(update={field: None})
                cleared += 1
        return cleared

    def get(self, entity_id: Optional[str]) -> Optional[EntityT]:
        index = self._index(entity_id) if entity_id else None
        return self._items[index] if index is not None else None

    def contains(self, entity_id: str) -> bool:
        return self._index(entity_id) is not None

    def clear(self) -> None:
        self._items = []
        self._dangling = {}

    def ids(self) -> List[str]:
        return [entity.id for entity in self._items]

    def _drop_dangling(self, entity: EntityT) -> EntityT:
        """Поздний ответ сервера мог вернуть ссылку на уже удалённую сущность"""
        update = {
            field: None for field, removed in self._dangling.items()
            if getattr(entity, field, None) in removed
        }
        return entity.model_copy(update=update) if update else entity

    def _index(self, entity_id: str) -> Optional[int]:
        for index, entity in enumerate(self._items):
            if entity.id == entity_id:
                return index
        return None

    def __contains__(self, entity_id: str) -> bool:
        return self.contains(entity_id)

    def __iter__(self) -> Iterator[EntityT]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"EntityCollectionStore(kind={self.kind}, size={len(self._items)})"
