"""Сериализация полей со свободной структурой (tags, properties) в JSON-текст.

Наружу из репозиториев эти поля уходят только в структурированном виде.
"""
import json
from typing import Any, Dict, Optional

TAGS = {"tags": "[]"}
TAGS_AND_PROPERTIES = {"tags": "[]", "properties": "{}"}


def dump_json_fields(values: Dict[str, Any], fields: Dict[str, str]) -> Dict[str, Any]:
    dumped = dict(values)
    for field, empty in fields.items():
        if field in dumped:
            value = dumped[field]
            if value is None:
                dumped[field] = empty
            elif not isinstance(value, str):
                dumped[field] = json.dumps(value)
    return dumped


def load_json_field(raw: Optional[str], empty: str):
    try:
        return json.loads(raw or empty)
    except ValueError:
        # Повреждённое значение не должно ронять выдачу списка
        return json.loads(empty)
