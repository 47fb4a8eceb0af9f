"""Shared test fixtures for the TaskFlow test suite.

Provides an in-memory Redis double, test settings, and FastAPI apps with
their Redis dependency bound to the double instead of a real server.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from taskflow.api.main import attach_store, create_app
from taskflow.core.config import Settings
from taskflow.worker.main import attach_consumer, create_worker_app

# -- Fake Redis for testing ---------------------------------------------------


class FakeRedis:
    """In-memory Redis mock supporting get/set(ex)/ttl/lpush/rpop/llen.

    Expiry is driven by a manual clock: call ``advance(seconds)`` to move
    time forward and let keys lapse.
    """

    def __init__(self) -> None:
        self._strings: dict[str, tuple[str, float | None]] = {}
        self._lists: dict[str, list[str]] = {}
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def _expire_if_due(self, key: str) -> None:
        entry = self._strings.get(key)
        if entry is not None and entry[1] is not None and entry[1] <= self.now:
            del self._strings[key]

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        expires_at = self.now + ex if ex is not None else None
        self._strings[key] = (value, expires_at)
        return True

    async def get(self, key: str) -> str | None:
        self._expire_if_due(key)
        entry = self._strings.get(key)
        return entry[0] if entry is not None else None

    async def ttl(self, key: str) -> int:
        self._expire_if_due(key)
        entry = self._strings.get(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return int(entry[1] - self.now)

    async def lpush(self, key: str, *values: str) -> int:
        items = self._lists.setdefault(key, [])
        for value in values:
            items.insert(0, value)
        return len(items)

    async def rpop(self, key: str) -> str | None:
        items = self._lists.get(key)
        if not items:
            return None
        return items.pop()

    async def llen(self, key: str) -> int:
        return len(self._lists.get(key, []))

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        pass

    # -- test helpers ---------------------------------------------------------

    def list_items(self, key: str) -> list[str]:
        return list(self._lists.get(key, []))

    def raw(self, key: str) -> str | None:
        entry = self._strings.get(key)
        return entry[0] if entry is not None else None

    def put_raw(self, key: str, value: str) -> None:
        self._strings[key] = (value, None)


# -- Fixtures -----------------------------------------------------------------


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings that don't read the environment's .env file."""
    return Settings(
        app_env="testing",
        debug=False,
        redis_addr="localhost:6379",
        cors_origins=["*"],
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def api_app(test_settings: Settings, fake_redis: FakeRedis) -> FastAPI:
    """Producer app with its store bound to FakeRedis.

    The lifespan is skipped (ASGITransport does not run it); ``attach_store``
    does the binding the lifespan would do.
    """
    app = create_app(test_settings)
    attach_store(app, fake_redis)
    return app


@pytest.fixture
async def client(api_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client for the producer API."""
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def worker_app(test_settings: Settings, fake_redis: FakeRedis) -> FastAPI:
    app = create_worker_app(test_settings)
    attach_consumer(app, fake_redis)
    return app


@pytest.fixture
async def worker_client(worker_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=worker_app)
    async with AsyncClient(transport=transport, base_url="http://worker") as ac:
        yield ac
