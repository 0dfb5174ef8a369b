# feedhub/db/rest.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import httpx

from feedhub.core.errors import StoreError
from feedhub.db.store import Row, check_identifier


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _filter_params(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    return {check_identifier(k): f"eq.{_literal(v)}" for k, v in (filters or {}).items()}


def parse_content_range(header: Optional[str]) -> int:
    """``Content-Range: 0-24/573`` or ``*/0`` -> the total after the slash."""
    if not header or "/" not in header:
        raise StoreError(f"Missing or malformed Content-Range header: {header!r}")
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        raise StoreError(f"Store did not report an exact count: {header!r}")
    return int(total)


class RestStore:
    """PostgREST (Supabase REST) backed store over httpx.

    The client is stateless on our side, so ``connect`` does nothing and
    ``close`` only releases the connection pool of the underlying client.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/rest/v1"
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
            timeout=httpx.Timeout(timeout),
        )

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        await self._client.aclose()

    async def select(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        params = {"select": "*", **_filter_params(filters)}
        if order_by:
            params["order"] = f"{check_identifier(order_by)}.{'desc' if descending else 'asc'}"
        resp = await self._request("GET", collection, params)
        try:
            data = resp.json()
        except ValueError as e:
            raise StoreError(f"Invalid JSON from store: {e}", collection=collection) from e
        if not isinstance(data, list):
            raise StoreError(f"Expected a list of rows, got {type(data).__name__}", collection=collection)
        return data

    async def count(self, collection: str, filters: Mapping[str, Any]) -> int:
        resp = await self._request(
            "HEAD", collection, {"select": "*", **_filter_params(filters)}, headers={"Prefer": "count=exact"}
        )
        try:
            return parse_content_range(resp.headers.get("content-range"))
        except StoreError as e:
            e.collection = collection
            raise

    async def _request(
        self,
        method: str,
        collection: str,
        params: Dict[str, str],
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                method, f"/{check_identifier(collection)}", params=params, headers=headers
            )
        except httpx.HTTPError as e:
            raise StoreError(f"{type(e).__name__}: {e}", collection=collection) from e
        if resp.status_code >= 400:
            message = f"Store responded {resp.status_code} for {collection}"
            # HEAD responses carry no body
            if method != "HEAD" and resp.text:
                message += f": {resp.text}"
            raise StoreError(message, collection=collection)
        return resp
