# feedhub/db/pool.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import asyncpg

from feedhub.core.errors import StoreError
from feedhub.db.store import Row, check_identifier

logger = logging.getLogger("feedhub.store")

_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _where(filters: Optional[Mapping[str, Any]]) -> Tuple[str, List[Any]]:
    if not filters:
        return "", []
    clauses = []
    args: List[Any] = []
    for idx, (column, value) in enumerate(filters.items(), start=1):
        clauses.append('"%s" = $%d' % (check_identifier(column), idx))
        args.append(value)
    return " WHERE " + " AND ".join(clauses), args


def build_select(
    collection: str,
    filters: Optional[Mapping[str, Any]] = None,
    order_by: Optional[str] = None,
    descending: bool = False,
) -> Tuple[str, List[Any]]:
    where_sql, args = _where(filters)
    sql = f'SELECT * FROM "{check_identifier(collection)}"{where_sql}'
    if order_by:
        sql += f' ORDER BY "{check_identifier(order_by)}" {"DESC" if descending else "ASC"}'
    return sql, args


def build_count(collection: str, filters: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    where_sql, args = _where(filters)
    return f'SELECT count(*) FROM "{check_identifier(collection)}"{where_sql}', args


class PostgresStore:
    """asyncpg-backed store.

    The pool is opened with ``min_size=0`` so ``connect`` never dials the
    server; connections are made on the first query. If ``connect`` failed or
    was never called, the first query retries it. Connection and query
    failures both surface as ``StoreError``.
    """

    def __init__(
        self,
        dsn: Optional[str],
        *,
        command_timeout: Optional[float] = None,
        min_size: int = 0,
        max_size: int = 10,
    ) -> None:
        self._dsn = dsn
        self._command_timeout = command_timeout
        self._min_size = min_size
        self._max_size = max_size
        self._pool: Optional[asyncpg.pool.Pool] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        async with self._lock:
            if self._pool is not None:
                return
            if not self._dsn:
                raise StoreError("DATABASE_URL is not configured")
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    command_timeout=self._command_timeout,
                )
            except (*_DB_ERRORS, ValueError) as e:
                raise StoreError(f"Could not open database pool: {type(e).__name__}: {e}") from e

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def pool(self) -> asyncpg.pool.Pool:
        if self._pool is None:
            await self.connect()
        return self._pool

    async def select(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        sql, args = build_select(collection, filters, order_by, descending)
        rows = await self._run("fetch", collection, sql, args)
        return [dict(r) for r in rows]

    async def count(self, collection: str, filters: Mapping[str, Any]) -> int:
        sql, args = build_count(collection, filters)
        value = await self._run("fetchval", collection, sql, args)
        return int(value or 0)

    async def _run(self, method: str, collection: str, sql: str, args: Sequence[Any]) -> Any:
        try:
            p = await self.pool()
        except StoreError as e:
            e.collection = collection
            raise
        try:
            async with p.acquire() as conn:
                return await getattr(conn, method)(sql, *args)
        except _DB_ERRORS as e:
            logger.debug("Query failed: %s", sql, extra={"event": "store_query_failed"})
            raise StoreError(f"{type(e).__name__}: {e}", collection=collection) from e
