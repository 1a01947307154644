"""Assessments: one form per job plus candidate responses."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..core.models.assessment import Assessment, AssessmentResponse, AssessmentSection
from ..core.models.base import utc_timestamp
from ..core.storage.base import Backend, Eq
from ..observability.logger import get_logger
from .collections import ASSESSMENTS, RESPONSES

logger = get_logger(__name__)


class AssessmentsService:
    """Save and load job assessments and their responses."""

    def __init__(self, backend: Backend):
        self.backend = backend

    async def get_assessment(self, job_id: str) -> Assessment | None:
        row = await self.backend.fetch_one(ASSESSMENTS, [Eq("job_id", job_id)])
        return Assessment(**row) if row else None

    async def save_assessment(
        self,
        job_id: str,
        title: str,
        sections: Sequence[AssessmentSection],
    ) -> Assessment:
        """Create the job's assessment or overwrite its title and sections."""
        section_rows = [s.to_row(exclude_none=True) for s in sections]
        existing = await self.get_assessment(job_id)

        if existing is not None:
            row = await self.backend.update(
                ASSESSMENTS,
                existing.id,
                {"title": title, "sections": section_rows, "updated_at": utc_timestamp()},
            )
            if row is not None:
                logger.info("assessment_updated", job_id=job_id, assessment_id=existing.id)
                return Assessment(**row)

        rows = await self.backend.insert(
            ASSESSMENTS, [{"job_id": job_id, "title": title, "sections": section_rows}]
        )
        assessment = Assessment(**rows[0])
        logger.info("assessment_created", job_id=job_id, assessment_id=assessment.id)
        return assessment

    async def submit_response(
        self,
        assessment_id: str,
        candidate_id: str,
        responses: dict[str, Any],
    ) -> AssessmentResponse:
        """Store a candidate's answers, replacing any earlier submission."""
        rows = await self.backend.upsert(
            RESPONSES,
            [
                {
                    "assessment_id": assessment_id,
                    "candidate_id": candidate_id,
                    "responses": responses,
                    "submitted_at": utc_timestamp(),
                }
            ],
            on_conflict=("assessment_id", "candidate_id"),
        )
        logger.info(
            "assessment_submitted",
            assessment_id=assessment_id,
            candidate_id=candidate_id,
            answers=len(responses),
        )
        return AssessmentResponse(**rows[0])

    async def get_response(self, assessment_id: str, candidate_id: str) -> AssessmentResponse | None:
        row = await self.backend.fetch_one(
            RESPONSES,
            [Eq("assessment_id", assessment_id), Eq("candidate_id", candidate_id)],
        )
        return AssessmentResponse(**row) if row else None
