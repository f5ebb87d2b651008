"""Шлюз сохранения: CRUD сущностей через REST API сервера.

Владелец сущностей определяется токеном сессии, поэтому методы шлюза
принимают только вид сущности, id и поля. Любая сетевая ошибка, ответ
не из диапазона 2xx или тело, которое не удалось разобрать, превращается
в GatewayError.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Type

import httpx
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from inkflow.core.config import settings
from inkflow.domains.documents.schemas import CMSConnectionResponse, DatabaseResponse, DocumentResponse
from inkflow.domains.identity.schemas import UserResponse
from inkflow.domains.library.schemas import PromptResponse, ReadingItemResponse

logger = logging.getLogger(__name__)

KINDS: Dict[str, Type[BaseModel]] = {
    "documents": DocumentResponse,
    "databases": DatabaseResponse,
    "cms-connections": CMSConnectionResponse,
    "prompts": PromptResponse,
    "reading-list": ReadingItemResponse,
}


class GatewayError(Exception):
    """Сбой обращения к серверу"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def entity_type(kind: str) -> Type[BaseModel]:
    try:
        return KINDS[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind}") from None


class PersistenceGateway(ABC):
    """Контракт хранилища, которым пользуются контроллер и рабочее пространство"""

    @abstractmethod
    async def login(self, email: str, name: str, avatar: Optional[str] = None) -> UserResponse:
        ...

    def logout(self) -> None:
        pass

    @abstractmethod
    async def list(self, kind: str) -> List[BaseModel]:
        ...

    @abstractmethod
    async def create(self, kind: str, fields: Dict[str, Any]) -> BaseModel:
        ...

    @abstractmethod
    async def update(self, kind: str, entity_id: str, fields: Dict[str, Any]) -> BaseModel:
        ...

    @abstractmethod
    async def delete(self, kind: str, entity_id: str) -> None:
        ...

    @abstractmethod
    async def get_settings(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update_settings(self, values: Dict[str, Any]) -> None:
        ...

    async def import_prompts(self, prompts: Iterable[Dict[str, Any]]) -> int:
        """Импорт по одному; HTTP-шлюз переопределяет пакетным запросом"""
        count = 0
        for fields in prompts:
            await self.create("prompts", fields)
            count += 1
        return count

    async def delete_prompts(self, prompt_ids: Iterable[str]) -> int:
        count = 0
        for prompt_id in prompt_ids:
            await self.delete("prompts", prompt_id)
            count += 1
        return count


class HttpPersistenceGateway(PersistenceGateway):
    """Шлюз поверх httpx.AsyncClient и bearer-токена"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token: Optional[str] = None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def login(self, email: str, name: str, avatar: Optional[str] = None) -> UserResponse:
        data = await self._request("POST", "/users", {"email": email, "name": name, "avatar": avatar})
        try:
            token = data["access_token"]
        except (KeyError, TypeError):
            raise GatewayError("POST /users returned no access token") from None
        user = _parse(UserResponse, data.get("user"), "POST /users")
        self.token = token
        return user

    def logout(self) -> None:
        self.token = None

    async def list(self, kind: str) -> List[BaseModel]:
        model = entity_type(kind)
        data = await self._request("GET", f"/{kind}")
        if not isinstance(data, list):
            raise GatewayError(f"GET /{kind} returned a non-list body")
        return [_parse(model, item, f"GET /{kind}") for item in data]

    async def create(self, kind: str, fields: Dict[str, Any]) -> BaseModel:
        model = entity_type(kind)
        return _parse(model, await self._request("POST", f"/{kind}", fields), f"POST /{kind}")

    async def update(self, kind: str, entity_id: str, fields: Dict[str, Any]) -> BaseModel:
        model = entity_type(kind)
        path = f"/{kind}/{entity_id}"
        return _parse(model, await self._request("PUT", path, fields), f"PUT {path}")

    async def delete(self, kind: str, entity_id: str) -> None:
        entity_type(kind)
        await self._request("DELETE", f"/{kind}/{entity_id}")

    async def get_settings(self) -> Dict[str, Any]:
        return await self._request("GET", "/settings") or {}

    async def update_settings(self, values: Dict[str, Any]) -> None:
        await self._request("PUT", "/settings", values)

    async def import_prompts(self, prompts: Iterable[Dict[str, Any]]) -> int:
        data = await self._request("POST", "/prompts/batch", {"prompts": list(prompts)})
        return _count(data, "POST /prompts/batch")

    async def delete_prompts(self, prompt_ids: Iterable[str]) -> int:
        data = await self._request("POST", "/prompts/delete-batch", {"ids": list(prompt_ids)})
        return _count(data, "POST /prompts/delete-batch")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, payload: Optional[Any] = None) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        body = jsonable_encoder(payload) if payload is not None else None
        try:
            response = await self._client.request(method, self.base_url + path, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise GatewayError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise GatewayError(
                f"{method} {path} returned {response.status_code}: {response.text}",
                status_code=response.status_code
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GatewayError(
                f"{method} {path} returned a malformed body", status_code=response.status_code
            ) from exc


def _parse(model: Type[BaseModel], data: Any, request: str) -> BaseModel:
    """Ответ 2xx, не совпавший со схемой, - такой же сбой шлюза"""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise GatewayError(f"{request} returned an invalid {model.__name__}: {exc}") from exc


def _count(data: Any, request: str) -> int:
    try:
        return int(data["count"])
    except (KeyError, TypeError, ValueError):
        raise GatewayError(f"{request} returned no count") from None
