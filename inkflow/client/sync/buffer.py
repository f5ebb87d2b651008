from typing import Any, Optional


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class EditBuffer:
    """Текст сущности, открытой для редактирования.

    Буфер ничего не знает о сети: его меняют только ввод пользователя и
    load(). Позиции за пределами строки прижимаются к её границам.
    """

    def __init__(self, content: str = ""):
        self._content = content

    def load(self, entity: Optional[Any] = None) -> None:
        """Заменить содержимое текстом сущности (пусто, если сущности нет)"""
        self._content = (getattr(entity, "content", None) or "") if entity is not None else ""

    def mutate(self, new_text: str) -> None:
        self._content = new_text

    def read(self) -> str:
        return self._content

    def insert(self, position: int, text: str) -> str:
        position = _clamp(position, 0, len(self._content))
        self._content = self._content[:position] + text + self._content[position:]
        return self._content

    def replace(self, start: int, end: int, text: str) -> str:
        start = _clamp(start, 0, len(self._content))
        end = _clamp(end, start, len(self._content))
        self._content = self._content[:start] + text + self._content[end:]
        return self._content

    def slice(self, start: int, end: int) -> str:
        start = _clamp(start, 0, len(self._content))
        end = _clamp(end, start, len(self._content))
        return self._content[start:end]

    @property
    def word_count(self) -> int:
        return len(self._content.split())

    def __len__(self) -> int:
        return len(self._content)

    def __repr__(self) -> str:
        return f"EditBuffer(length={len(self._content)})"
