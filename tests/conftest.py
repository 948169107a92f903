"""
Shared test fixtures.

Uses an in-memory ``RealtimeStore`` so tests run without Firebase or
Redis.  It mirrors the realtime-database semantics the repositories rely
on: path-addressed get / set / update / remove and a child equality
query returning ``{id: record}``.
"""

import copy
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.infrastructure import realtime
from src.infrastructure.store import split_path


class InMemoryRealtimeStore:
    """Dict-backed store; records every call in ``calls``."""

    def __init__(self, data: Optional[dict[str, Any]] = None):
        self.data: dict[str, dict[str, Any]] = copy.deepcopy(data or {})
        self.calls: list[tuple[str, str]] = []

    async def get(self, path: str) -> Optional[Any]:
        self.calls.append(("get", path))
        collection, key = split_path(path)
        node = self.data.get(collection)
        if key is None:
            return copy.deepcopy(node) if node else None
        if not node or key not in node:
            return None
        return copy.deepcopy(node[key])

    async def exists(self, path: str) -> bool:
        self.calls.append(("exists", path))
        collection, key = split_path(path)
        node = self.data.get(collection)
        if key is None:
            return bool(node)
        return bool(node) and key in node

    async def set(self, path: str, value: Any) -> None:
        self.calls.append(("set", path))
        collection, key = split_path(path)
        if key is None:
            self.data[collection] = copy.deepcopy(value)
        else:
            self.data.setdefault(collection, {})[key] = copy.deepcopy(value)

    async def update(self, path: str, values: dict[str, Any]) -> None:
        self.calls.append(("update", path))
        collection, key = split_path(path)
        node = self.data.setdefault(collection, {})
        if key is None:
            node.update(copy.deepcopy(values))
        else:
            node.setdefault(key, {}).update(copy.deepcopy(values))

    async def remove(self, path: str) -> None:
        self.calls.append(("remove", path))
        collection, key = split_path(path)
        if key is None:
            self.data.pop(collection, None)
        else:
            self.data.get(collection, {}).pop(key, None)

    async def query_equal(self, path: str, field: str, value: Any) -> dict[str, Any]:
        self.calls.append(("query_equal", path))
        node = self.data.get(path, {})
        return {
            k: copy.deepcopy(v)
            for k, v in node.items()
            if isinstance(v, dict) and v.get(field) == value
        }


class BrokenRealtimeStore:
    """Every operation raises, like a store whose connection dropped."""

    def __getattr__(self, name):
        async def _fail(*args, **kwargs):
            raise ConnectionError("realtime store unreachable")

        return _fail


class FixedClock:
    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_realtime():
    realtime.reset_realtime()
    yield
    realtime.reset_realtime()


@pytest.fixture
def store() -> InMemoryRealtimeStore:
    return InMemoryRealtimeStore()


@pytest.fixture
def broken_store() -> BrokenRealtimeStore:
    return BrokenRealtimeStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest_asyncio.fixture
async def client(store) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient whose routes see the in-memory store."""
    from src.api.app import create_app
    from src.api.dependencies import get_store

    app = create_app()
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
