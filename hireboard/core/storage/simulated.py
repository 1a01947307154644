"""Latency and failure injection around a real backend.

Reproduces a flaky network for demos and failure-path tests: every call
waits a random delay, and writes fail at a configurable rate before they
reach the wrapped backend.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Sequence

from ..errors import BackendError
from ...observability.logger import get_logger
from .base import Backend, Page, Predicate, Row, Sort

logger = get_logger(__name__)


class SimulatedNetworkBackend(Backend):
    """Wrap ``inner`` with random delays and random write failures."""

    def __init__(
        self,
        inner: Backend,
        min_delay: float = 0.2,
        max_delay: float = 1.2,
        error_rate: float = 0.08,
        rng: random.Random | None = None,
    ):
        if not 0.0 <= error_rate <= 1.0:
            raise ValueError("error_rate must be between 0 and 1")
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError("delays must satisfy 0 <= min_delay <= max_delay")
        self.inner = inner
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.error_rate = error_rate
        self.rng = rng or random.Random()

    async def _delay(self) -> None:
        if self.max_delay > 0:
            await asyncio.sleep(self.rng.uniform(self.min_delay, self.max_delay))

    def _maybe_fail(self, action: str, collection: str) -> None:
        if self.rng.random() < self.error_rate:
            logger.warning("simulated_write_failure", action=action, collection=collection)
            raise BackendError(f"Network error: Failed to {action} {collection}")

    async def fetch_page(
        self,
        collection: str,
        filters: Sequence[Predicate] = (),
        order: Sequence[Sort] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> Page:
        await self._delay()
        return await self.inner.fetch_page(collection, filters, order, offset, limit)

    async def insert(self, collection: str, rows: Sequence[Row]) -> list[Row]:
        await self._delay()
        self._maybe_fail("insert into", collection)
        return await self.inner.insert(collection, rows)

    async def update(self, collection: str, record_id: str, fields: Row) -> Row | None:
        await self._delay()
        self._maybe_fail("update", collection)
        return await self.inner.update(collection, record_id, fields)

    async def upsert(
        self,
        collection: str,
        rows: Sequence[Row],
        on_conflict: Sequence[str],
    ) -> list[Row]:
        await self._delay()
        self._maybe_fail("upsert into", collection)
        return await self.inner.upsert(collection, rows, on_conflict)

    async def aclose(self) -> None:
        await self.inner.aclose()
