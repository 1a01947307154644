"""Job posting models."""

import re

from pydantic import ConfigDict, Field, field_validator

from .base import HireboardBaseModel, IdentifiedSchema, TimestampSchema
from .enums import JobStatus


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse every non-alphanumeric run into one dash."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _dedupe(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class JobDraft(HireboardBaseModel):
    """Fields a recruiter fills in when creating a job."""

    title: str = Field(..., min_length=1, description="Job title")
    slug: str = Field("", description="URL slug (derived from title when blank)")
    status: JobStatus = Field(JobStatus.ACTIVE, description="Posting status")
    tags: list[str] = Field(default_factory=list, description="Free-form tags (a set)")
    order: int = Field(0, description="Display position on the jobs board")
    description: str = Field("", description="Job description")

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags):
        return _dedupe(tags)

    def with_slug(self) -> "JobDraft":
        if self.slug:
            return self
        return self.model_copy(update={"slug": slugify(self.title)})


class JobUpdate(HireboardBaseModel):
    """Partial job update; only the fields that were set are written."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1)
    slug: str | None = None
    status: JobStatus | None = None
    tags: list[str] | None = None
    order: int | None = None
    description: str | None = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags):
        return _dedupe(tags)


class Job(JobDraft, IdentifiedSchema, TimestampSchema):
    """Job posting as stored by the backend."""

    @property
    def is_active(self) -> bool:
        return self.status == JobStatus.ACTIVE
