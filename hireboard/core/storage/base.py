"""Backend interface: the tabular query contract every store implements.

Services depend on this interface only, so tests can substitute the
in-memory store for the hosted backend.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

Row = dict[str, Any]


# =============================================================================
# Filter predicates and ordering
# =============================================================================


@dataclass(frozen=True)
class Eq:
    """``field == value``."""

    field: str
    value: Any

    def matches(self, row: Row) -> bool:
        return row.get(self.field) == self.value


@dataclass(frozen=True)
class ILike:
    """Case-insensitive substring match on ``field``."""

    field: str
    text: str

    def matches(self, row: Row) -> bool:
        value = row.get(self.field)
        return value is not None and self.text.lower() in str(value).lower()


@dataclass(frozen=True)
class AnyOf:
    """Logical OR of predicates."""

    predicates: tuple["Predicate", ...]

    def __init__(self, *predicates: "Predicate"):
        object.__setattr__(self, "predicates", tuple(predicates))

    def matches(self, row: Row) -> bool:
        return any(p.matches(row) for p in self.predicates)


Predicate = Eq | ILike | AnyOf


@dataclass(frozen=True)
class Sort:
    field: str
    ascending: bool = True


@dataclass
class Page:
    """Rows of one requested range plus the total matching count."""

    rows: list[Row] = field(default_factory=list)
    count: int = 0


# =============================================================================
# Backend interface
# =============================================================================


class Backend(ABC):
    """Abstract tabular backend.

    Implementations:
    - MemoryStore: in-process tables (tests, offline CLI)
    - RestBackend: hosted PostgREST endpoint over HTTP
    - SimulatedNetworkBackend: latency/failure wrapper around either

    Every method raises BackendError when the backend call fails.
    """

    @abstractmethod
    async def fetch_page(
        self,
        collection: str,
        filters: Sequence[Predicate] = (),
        order: Sequence[Sort] = (),
        offset: int = 0,
        limit: int | None = None,
    ) -> Page:
        """Fetch one range of a filtered, sorted collection.

        Args:
            collection: Table name
            filters: Predicates that must all hold
            order: Sort keys, most significant first
            offset: Rows to skip
            limit: Maximum rows to return (None = all)

        Returns:
            Page with the rows and the exact count of matching rows
        """

    @abstractmethod
    async def insert(self, collection: str, rows: Sequence[Row]) -> list[Row]:
        """Insert rows; returns them as stored (ids and timestamps filled)."""

    @abstractmethod
    async def update(self, collection: str, record_id: str, fields: Row) -> Row | None:
        """Patch one row by id; returns the stored row or None if absent."""

    @abstractmethod
    async def upsert(
        self,
        collection: str,
        rows: Sequence[Row],
        on_conflict: Sequence[str],
    ) -> list[Row]:
        """Insert rows, merging into existing rows that share ``on_conflict`` values."""

    async def fetch_one(self, collection: str, filters: Sequence[Predicate]) -> Row | None:
        """First row matching ``filters`` or None."""
        page = await self.fetch_page(collection, filters=filters, limit=1)
        return page.rows[0] if page.rows else None

    async def aclose(self) -> None:
        """Release held resources (connections); no-op by default."""
