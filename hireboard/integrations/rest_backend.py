"""HTTP backend speaking PostgREST query conventions over httpx."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence
from typing import Any

import httpx

from ..core.errors import BackendError
from ..core.storage.base import AnyOf, Backend, Eq, ILike, Page, Predicate, Row, Sort
from ..observability.logger import get_logger

logger = get_logger(__name__)

# Characters with meaning inside PostgREST filter expressions
_RESERVED = re.compile(r'[,.:()"\\]')
_CONTENT_RANGE = re.compile(r"^(?:\d+-\d+|\*)/(\d+|\*)$")


def _quote(value: str) -> str:
    if _RESERVED.search(value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _operator(predicate: Predicate, quoted: bool = False) -> str:
    """Operator part of a predicate, e.g. ``eq.active``.

    Values are only quoted inside ``or=(...)`` groups; a top-level filter
    takes its value verbatim.
    """
    wrap = _quote if quoted else str
    if isinstance(predicate, Eq):
        if predicate.value is None:
            return "is.null"
        return f"eq.{wrap(_format_value(predicate.value))}"
    if isinstance(predicate, ILike):
        return f"ilike.{wrap(f'*{predicate.text}*')}"
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def _inline(predicate: Predicate) -> str:
    """Predicate as it appears inside an ``or=(...)`` group."""
    if isinstance(predicate, AnyOf):
        return f"or({','.join(_inline(p) for p in predicate.predicates)})"
    return f"{predicate.field}.{_operator(predicate, quoted=True)}"


def encode_filters(filters: Sequence[Predicate]) -> list[tuple[str, str]]:
    """Translate predicates into PostgREST query parameters."""
    params: list[tuple[str, str]] = []
    for predicate in filters:
        if isinstance(predicate, AnyOf):
            params.append(("or", f"({','.join(_inline(p) for p in predicate.predicates)})"))
        else:
            params.append((predicate.field, _operator(predicate)))
    return params


def encode_order(order: Sequence[Sort]) -> list[tuple[str, str]]:
    if not order:
        return []
    keys = ",".join(f"{s.field}.{'asc' if s.ascending else 'desc'}" for s in order)
    return [("order", keys)]


def parse_content_range(header: str | None, fallback: int) -> int:
    """Total row count from a ``Content-Range: 0-9/42`` header."""
    if not header:
        return fallback
    match = _CONTENT_RANGE.match(header.strip())
    if not match or match.group(1) == "*":
        return fallback
    return int(match.group(1))


class RestBackend(Backend):
    """Backend client for a hosted PostgREST endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the REST backend.

        Args:
            base_url: Project URL (defaults to SUPABASE_URL env var)
            api_key: Anonymous API key (defaults to SUPABASE_ANON_KEY env var)
            timeout: Request timeout in seconds
            client: Pre-built httpx client (tests inject a mock transport)
        """
        self.base_url = (base_url or os.getenv("SUPABASE_URL") or "").rstrip("/")
        self.api_key = api_key or os.getenv("SUPABASE_ANON_KEY")
        if not self.base_url or not self.api_key:
            raise ValueError("Backend URL and API key must be provided or set in the environment")

        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        if client is None:
            client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout)
        client.headers.update(headers)
        self.client = client

        logger.info("rest_backend_initialized", base_url=self.base_url, timeout=timeout)

    def _path(self, collection: str) -> str:
        return f"{self.base_url}/rest/v1/{collection}"

    async def _request(
        self,
        method: str,
        collection: str,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else {}
        try:
            response = await self.client.request(
                method, self._path(collection), params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("backend_request_failed", method=method, collection=collection, error=str(e))
            raise BackendError(f"Network error: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("message", response.text) if isinstance(body, dict) else response.text
            logger.error(
                "backend_request_rejected",
                method=method,
                collection=collection,
                status_code=response.status_code,
                detail=detail,
            )
            raise BackendError(f"HTTP {response.status_code}: {detail}", status_code=response.status_code)

        return response

    async def fetch_page(
        self,
        collection: str,
        filters: Sequence[Predicate] = (),
        order: Sequence[Sort] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> Page:
        params = [("select", "*"), *encode_filters(filters), *encode_order(order)]
        if offset:
            params.append(("offset", str(offset)))
        if limit is not None:
            params.append(("limit", str(limit)))

        response = await self._request("GET", collection, params=params, prefer="count=exact")
        rows = response.json()
        count = parse_content_range(response.headers.get("Content-Range"), offset + len(rows))
        return Page(rows=rows, count=count)

    async def insert(self, collection: str, rows: Sequence[Row]) -> list[Row]:
        response = await self._request(
            "POST", collection, json=list(rows), prefer="return=representation"
        )
        return response.json()

    async def update(self, collection: str, record_id: str, fields: Row) -> Row | None:
        response = await self._request(
            "PATCH",
            collection,
            params=encode_filters([Eq("id", record_id)]),
            json=fields,
            prefer="return=representation",
        )
        rows = response.json()
        return rows[0] if rows else None

    async def upsert(
        self,
        collection: str,
        rows: Sequence[Row],
        on_conflict: Sequence[str],
    ) -> list[Row]:
        response = await self._request(
            "POST",
            collection,
            params=[("on_conflict", ",".join(on_conflict))],
            json=list(rows),
            prefer="resolution=merge-duplicates,return=representation",
        )
        return response.json()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RestBackend":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
