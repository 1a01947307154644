"""Candidate, timeline and note models."""

import re
from datetime import datetime

from pydantic import ConfigDict, Field

from .base import HireboardBaseModel, IdentifiedSchema, TimestampSchema, utc_now
from .enums import Stage

MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_mentions(content: str) -> list[str]:
    """Return the ``@word`` tokens of a note, without the ``@``, in order."""
    return MENTION_PATTERN.findall(content)


class CandidateDraft(HireboardBaseModel):
    """Fields supplied when a candidate applies."""

    name: str = Field(..., min_length=1, description="Full name")
    email: str = Field(..., min_length=3, description="Email address")
    stage: Stage = Field(Stage.APPLIED, description="Pipeline stage")
    job_id: str = Field(..., description="Job the candidate applied to")


class Candidate(CandidateDraft, IdentifiedSchema, TimestampSchema):
    """Candidate as stored by the backend."""


class TimelineEvent(IdentifiedSchema):
    """Append-only record of one stage transition."""

    candidate_id: str = Field(..., description="Candidate identifier")
    from_stage: Stage | None = Field(None, description="Previous stage (None on apply)")
    to_stage: Stage = Field(..., description="New stage")
    notes: str = Field("", description="Free-text note")
    created_at: datetime = Field(default_factory=utc_now)


class CandidateNote(IdentifiedSchema):
    """Free-text note on a candidate with extracted @-mentions."""

    candidate_id: str = Field(..., description="Candidate identifier")
    content: str = Field(..., min_length=1, description="Note body")
    mentions: list[str] = Field(default_factory=list, description="Mentioned handles")
    created_at: datetime = Field(default_factory=utc_now)


class CandidateUpdate(HireboardBaseModel):
    """Partial candidate update; only the fields that were set are written."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1)
    email: str | None = Field(None, min_length=3)
    stage: Stage | None = None
    job_id: str | None = None
