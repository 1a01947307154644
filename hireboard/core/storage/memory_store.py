"""In-memory backend holding one ordered table per collection."""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from .base import Backend, Page, Predicate, Row, Sort


class MemoryStore(Backend):
    """Dict-backed implementation of the backend contract.

    Mimics the database defaults the services rely on: generated ``id``,
    ``created_at`` and ``updated_at``. Timestamps are strictly increasing so
    "newest first" orderings are deterministic.
    """

    def __init__(self, tables: dict[str, list[Row]] | None = None):
        self._tables: dict[str, dict[str, Row]] = defaultdict(dict)
        self._last_stamp: datetime | None = None
        for collection, rows in (tables or {}).items():
            for row in rows:
                self._store(collection, row)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _next_stamp(self) -> str:
        stamp = datetime.now(timezone.utc)
        if self._last_stamp is not None and stamp <= self._last_stamp:
            stamp = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = stamp
        return stamp.isoformat(timespec="microseconds")

    def _store(self, collection: str, row: Row) -> Row:
        stored = copy.deepcopy(dict(row))
        stored.setdefault("id", str(uuid.uuid4()))
        stamp = self._next_stamp()
        stored.setdefault("created_at", stamp)
        stored.setdefault("updated_at", stored["created_at"])
        self._tables[collection][stored["id"]] = stored
        return copy.deepcopy(stored)

    def rows(self, collection: str) -> list[Row]:
        """Copies of every row in insertion order."""
        return [copy.deepcopy(row) for row in self._tables[collection].values()]

    # ------------------------------------------------------------------
    # Backend contract
    # ------------------------------------------------------------------
    async def fetch_page(
        self,
        collection: str,
        filters: Sequence[Predicate] = (),
        order: Sequence[Sort] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> Page:
        rows = [r for r in self._tables[collection].values() if all(f.matches(r) for f in filters)]
        # Stable sorts applied least significant key first
        for sort in reversed(order):
            rows.sort(key=lambda r, f=sort.field: _sort_key(r.get(f)), reverse=not sort.ascending)

        end = None if limit is None else offset + limit
        window = rows[offset:end]
        return Page(rows=[copy.deepcopy(r) for r in window], count=len(rows))

    async def insert(self, collection: str, rows: Sequence[Row]) -> list[Row]:
        return [self._store(collection, row) for row in rows]

    async def update(self, collection: str, record_id: str, fields: Row) -> Row | None:
        existing = self._tables[collection].get(record_id)
        if existing is None:
            return None
        existing.update(copy.deepcopy({k: v for k, v in fields.items() if k != "id"}))
        return copy.deepcopy(existing)

    async def upsert(
        self,
        collection: str,
        rows: Sequence[Row],
        on_conflict: Sequence[str],
    ) -> list[Row]:
        stored: list[Row] = []
        for row in rows:
            match = next(
                (
                    existing
                    for existing in self._tables[collection].values()
                    if all(existing.get(key) == row.get(key) for key in on_conflict)
                ),
                None,
            )
            if match is None:
                stored.append(self._store(collection, row))
            else:
                match.update(copy.deepcopy({k: v for k, v in row.items() if k != "id"}))
                stored.append(copy.deepcopy(match))
        return stored


def _sort_key(value: Any) -> tuple[int, Any]:
    # NULLs sort after every value ascending, like the hosted database
    if value is None:
        return (1, 0)
    return (0, value)
