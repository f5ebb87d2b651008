"""
Pytest configuration and shared fixtures.

Provides a per-test SQLite database wired into the FastAPI app, an
authenticated TestClient helper, an in-memory persistence gateway with
controllable latency and a fake text generator for the assistant.
"""

import asyncio
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.encoders import jsonable_encoder
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from inkflow.client.gateway import KINDS, GatewayError, HttpPersistenceGateway, PersistenceGateway
from inkflow.core.db import get_db, init_models
from inkflow.domains.assistant.generator import GenerationResult
from inkflow.domains.identity.schemas import UserResponse
from inkflow.main import app

# ==============================================================================
# Database / API Fixtures
# ==============================================================================


@pytest.fixture
def db_url(tmp_path):
    """URL of a fresh SQLite database file for one test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'inkflow-test.db'}"


def _override_db(engine):
    session_factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client(db_url):
    """TestClient bound to a temporary database (lifespan is not run)."""
    engine = create_async_engine(db_url, poolclass=NullPool)
    asyncio.run(init_models(engine))
    _override_db(engine)

    yield TestClient(app)

    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture
def login(client):
    """Log a user in and return Authorization headers."""

    def _login(email: str = "alice@inkflow.io", name: str = "Alice") -> Dict[str, str]:
        response = client.post("/api/users", json={"email": email, "name": name})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
def auth_headers(login):
    return login()


@pytest_asyncio.fixture
async def http_gateway(db_url):
    """HttpPersistenceGateway talking to the app in-process over ASGI."""
    engine = create_async_engine(db_url, poolclass=NullPool)
    await init_models(engine)
    _override_db(engine)

    transport = httpx.ASGITransport(app=app)
    gateway = HttpPersistenceGateway(
        "http://testserver/api",
        client=httpx.AsyncClient(transport=transport)
    )

    yield gateway

    await gateway.aclose()
    app.dependency_overrides.clear()
    await engine.dispose()


# ==============================================================================
# Fakes
# ==============================================================================


class FakeGateway(PersistenceGateway):
    """In-memory server: writes apply when called, responses may be delayed."""

    DEFAULTS: Dict[str, Dict[str, Any]] = {
        "documents": {"title": "Untitled Page", "content": "", "status": "Draft", "tags": [], "properties": {}},
        "databases": {"view_type": "TABLE", "color": "#000000"},
        "cms-connections": {},
        "prompts": {"category": "General", "tags": []},
        "reading-list": {"domain": "", "status": "unread", "source_type": "manual", "tags": []},
    }

    def __init__(self):
        self.rows: Dict[str, Dict[str, Dict[str, Any]]] = {kind: {} for kind in KINDS}
        self.calls: List[tuple] = []
        self.update_delays: List[float] = []
        self.latency = 0.0
        self.fail_updates = False
        self.fail_deletes = False
        self.settings: Dict[str, Any] = {}
        self.user_id = "user-1"
        self._clock = datetime(2024, 1, 1)

    def updates(self, entity_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return [
            fields for op, kind, row_id, fields in self.calls
            if op == "update" and (entity_id is None or row_id == entity_id)
        ]

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _entity(self, kind: str, row: Dict[str, Any]):
        return KINDS[kind].model_validate(row)

    async def login(self, email, name, avatar=None):
        self.calls.append(("login", "users", None, {"email": email, "name": name}))
        now = self._tick()
        return UserResponse(id=self.user_id, email=email, name=name, avatar=avatar, created_at=now, updated_at=now)

    async def list(self, kind):
        self.calls.append(("list", kind, None, {}))
        rows = sorted(self.rows[kind].values(), key=lambda row: row["updated_at"], reverse=True)
        return [self._entity(kind, row) for row in rows]

    async def create(self, kind, fields):
        self.calls.append(("create", kind, None, dict(fields)))
        now = self._tick()
        values = {k: v for k, v in jsonable_encoder(fields).items() if v is not None}
        row = {
            **self.DEFAULTS[kind],
            **values,
            "id": str(uuid.uuid4()),
            "user_id": self.user_id,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[kind][row["id"]] = row
        return self._entity(kind, row)

    async def update(self, kind, entity_id, fields):
        self.calls.append(("update", kind, entity_id, dict(fields)))
        if self.fail_updates:
            raise GatewayError("connection refused")
        row = self.rows[kind].get(entity_id)
        if row is None:
            raise GatewayError("not found", status_code=404)

        row.update(jsonable_encoder(fields))
        row["updated_at"] = self._tick()
        snapshot = self._entity(kind, row)

        delay = self.update_delays.pop(0) if self.update_delays else self.latency
        if delay:
            await asyncio.sleep(delay)
        return snapshot

    async def delete(self, kind, entity_id):
        self.calls.append(("delete", kind, entity_id, {}))
        if self.fail_deletes:
            raise GatewayError("connection reset")
        if self.rows[kind].pop(entity_id, None) is None:
            raise GatewayError("not found", status_code=404)

        field = {"databases": "database_id", "cms-connections": "cms_connection_id"}.get(kind)
        if field:
            for row in self.rows["documents"].values():
                if row.get(field) == entity_id:
                    row[field] = None

    async def get_settings(self):
        return dict(self.settings)

    async def update_settings(self, values):
        self.settings = dict(values)


class FakeGenerator:
    """Text generator returning canned text; can fail or wait on a gate."""

    def __init__(self, text: str = "generated text"):
        self.text = text
        self.sources: List[tuple] = []
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[Dict[str, Any]] = []

    async def generate(
        self,
        model,
        prompt,
        *,
        attachments=(),
        system_instruction=None,
        use_search=False,
        response_schema=None,
    ):
        self.calls.append({
            "model": model,
            "prompt": prompt,
            "attachments": list(attachments),
            "use_search": use_search,
            "response_schema": response_schema,
        })
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return GenerationResult(text=self.text, sources=list(self.sources))


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def fake_generator():
    return FakeGenerator()
