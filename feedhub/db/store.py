# feedhub/db/store.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Protocol

from feedhub.config import Settings

Row = Dict[str, Any]

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DataStore(Protocol):
    """Query client for the remote store.

    One instance is built at process start (see ``create_store``) and shared by
    every request. ``select`` and ``count`` are single round trips; both raise
    ``StoreError`` when the round trip fails.
    """

    async def connect(self) -> None: ...

    async def close(self) -> None: ...

    async def select(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]: ...

    async def count(self, collection: str, filters: Mapping[str, Any]) -> int: ...


def check_identifier(name: str) -> str:
    """Collection and column names end up in SQL / URLs, so only plain identifiers pass."""
    if not _IDENT_RE.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def create_store(settings: Settings) -> DataStore:
    # Misconfigured table names fail at startup, not as a 500 on every request
    for name in (settings.channels_table, settings.subscriptions_table, settings.articles_table):
        check_identifier(name)
    if settings.store_backend == "postgres":
        from feedhub.db.pool import PostgresStore

        return PostgresStore(settings.database_url, command_timeout=settings.store_timeout)
    if settings.store_backend == "rest":
        from feedhub.db.rest import RestStore

        if not settings.supabase_url or not settings.supabase_service_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set for the rest store")
        return RestStore(settings.supabase_url, settings.supabase_service_key, timeout=settings.store_timeout)
    raise RuntimeError(f"Unknown STORE_BACKEND: {settings.store_backend!r}")
