"""Base Pydantic schemas and helpers for Hireboard models."""

import math
import uuid
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

# Type variable for generic result types
T = TypeVar("T")


# =============================================================================
# Pydantic Base Classes
# =============================================================================


class HireboardBaseModel(BaseModel):
    """Base Pydantic model for all schemas with common configuration."""

    model_config = ConfigDict(
        # Accept both field names and wire aliases
        populate_by_name=True,
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )

    def to_row(self, **kwargs: Any) -> dict[str, Any]:
        """Dump to a JSON-compatible row using wire aliases."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class TimestampSchema(HireboardBaseModel):
    """Schema with backend-maintained timestamp fields."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IdentifiedSchema(HireboardBaseModel):
    """Schema with UUID identifier."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier")


# =============================================================================
# Common Response Models
# =============================================================================


class PagedResult(HireboardBaseModel, Generic[T]):
    """One page of a filtered, sorted collection plus the exact total."""

    data: list[T] = Field(default_factory=list, description="Rows on this page")
    count: int = Field(0, ge=0, description="Total rows matching the filters")
    page: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(..., ge=1, description="Rows per page")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.count / self.page_size)

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


# =============================================================================
# Utility Functions
# =============================================================================


def generate_id(prefix: str = "") -> str:
    """Generate a prefixed UUID.

    Args:
        prefix: Optional prefix for the ID (e.g., "sec_", "q_")

    Returns:
        Prefixed UUID string
    """
    uid = str(uuid.uuid4())
    return f"{prefix}{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with microseconds."""
    return utc_now().isoformat(timespec="microseconds")
