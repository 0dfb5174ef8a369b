import asyncio
from typing import Any, Dict, List, Mapping, Optional

import pytest
import sys
from pathlib import Path

# Ensure repository root is on sys.path for `import feedhub`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from fastapi.testclient import TestClient

from feedhub.core.errors import StoreError


class FakeStore:
    """In-memory store with per-call instrumentation.

    ``count_results`` maps a channel id to either an int or an exception
    instance to raise; ``count_delays`` lets a test make some counts finish
    later than others.
    """

    def __init__(
        self,
        tables: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        *,
        count_results: Optional[Dict[Any, Any]] = None,
        count_delays: Optional[Dict[Any, float]] = None,
        select_error: Optional[Exception] = None,
    ) -> None:
        self.tables = tables or {}
        self.count_results = count_results or {}
        self.count_delays = count_delays or {}
        self.select_error = select_error
        self.select_calls: List[tuple] = []
        self.count_calls: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.connected = False
        self.closed = False
        self.completed: List[Any] = []

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.closed = True

    async def select(self, collection, filters=None, order_by=None, descending=False):
        self.select_calls.append((collection, dict(filters or {}), order_by, descending))
        if self.select_error is not None:
            raise self.select_error
        rows = [r for r in self.tables.get(collection, []) if _matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: r[order_by], reverse=descending)
        return [dict(r) for r in rows]

    async def count(self, collection, filters):
        self.count_calls.append((collection, dict(filters)))
        key = next(iter(filters.values()))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.count_delays.get(key, 0))
            self.completed.append(key)
            result = self.count_results.get(key)
            if isinstance(result, Exception):
                raise result
            if result is not None:
                return result
            return sum(1 for r in self.tables.get(collection, []) if _matches(r, filters))
        finally:
            self.in_flight -= 1


def _matches(row: Dict[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    return all(row.get(k) == v for k, v in (filters or {}).items())


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def fake_store():
    return FakeStore(
        {
            "channels": [
                {"id": 1, "name": "Tech", "description": "Gadgets"},
                {"id": 2, "name": "Science"},
                {"id": 3, "name": "Art"},
            ],
            "subscriptions": [
                {"id": 10, "channel_id": 1, "user_id": "a"},
                {"id": 11, "channel_id": 1, "user_id": "b"},
                {"id": 12, "channel_id": 3, "user_id": "a"},
            ],
            "articles": [
                {"id": 100, "title": "Old", "published": True, "created_at": "2024-01-01T00:00:00+00:00"},
                {"id": 101, "title": "Draft", "published": False, "created_at": "2024-06-01T00:00:00+00:00"},
                {"id": 102, "title": "New", "published": True, "created_at": "2024-03-01T00:00:00+00:00"},
            ],
        }
    )


@pytest.fixture()
def client(monkeypatch, fake_store):
    # Swap the real store factory used by the lifespan for the in-memory one
    from feedhub import main as main_mod

    monkeypatch.setattr(main_mod, "create_store", lambda settings: fake_store)

    with TestClient(main_mod.app) as test_client:
        yield test_client


@pytest.fixture()
def store_error():
    return StoreError("connection refused", collection="channels")
