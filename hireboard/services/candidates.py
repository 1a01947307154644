"""Candidates: listing, lookup, stage changes and the stage timeline."""

from __future__ import annotations

from typing import Any

from ..core.errors import RecordNotFoundError
from ..core.models.base import PagedResult, utc_timestamp
from ..core.models.candidate import Candidate, CandidateDraft, CandidateUpdate, TimelineEvent
from ..core.models.enums import Stage
from ..core.storage.base import AnyOf, Backend, Eq, ILike, Predicate, Sort
from ..observability.logger import get_logger
from .collections import CANDIDATES, TIMELINE

logger = get_logger(__name__)

APPLIED_NOTE = "Candidate applied"


class CandidatesService:
    """Candidate CRUD plus the append-only stage timeline."""

    def __init__(self, backend: Backend):
        self.backend = backend

    async def list_candidates(
        self,
        search: str | None = None,
        stage: Stage | str | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> PagedResult[Candidate]:
        """One page of candidates, newest first.

        Args:
            search: Case-insensitive substring of the name or the email
            stage: Exact stage filter
            page: 1-based page number
            page_size: Candidates per page
        """
        filters: list[Predicate] = []
        if search:
            filters.append(AnyOf(ILike("name", search), ILike("email", search)))
        if stage:
            filters.append(Eq("stage", Stage(stage).value))

        result = await self.backend.fetch_page(
            CANDIDATES,
            filters=filters,
            order=[Sort("created_at", ascending=False)],
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return PagedResult[Candidate](
            data=[Candidate(**row) for row in result.rows],
            count=result.count,
            page=page,
            page_size=page_size,
        )

    async def fetch_all_candidates(self, page_size: int = 100) -> list[Candidate]:
        """Walk every page of the unfiltered listing."""
        candidates: list[Candidate] = []
        page = 1
        while True:
            result = await self.list_candidates(page=page, page_size=page_size)
            candidates.extend(result.data)
            if not result.has_more:
                break
            page += 1
        logger.debug("candidates_fetched", count=len(candidates), pages=page)
        return candidates

    async def get_candidate(self, candidate_id: str) -> Candidate | None:
        row = await self.backend.fetch_one(CANDIDATES, [Eq("id", candidate_id)])
        return Candidate(**row) if row else None

    async def get_timeline(self, candidate_id: str) -> list[TimelineEvent]:
        """Stage transitions of a candidate, oldest first."""
        result = await self.backend.fetch_page(
            TIMELINE,
            filters=[Eq("candidate_id", candidate_id)],
            order=[Sort("created_at")],
        )
        return [TimelineEvent(**row) for row in result.rows]

    async def create_candidate(self, draft: CandidateDraft) -> Candidate:
        rows = await self.backend.insert(CANDIDATES, [draft.to_row()])
        candidate = Candidate(**rows[0])
        await self._record_transition(candidate.id, None, Stage(candidate.stage), APPLIED_NOTE)
        logger.info("candidate_created", candidate_id=candidate.id, job_id=candidate.job_id)
        return candidate

    async def update_candidate(self, candidate_id: str, **updates: Any) -> Candidate:
        """Patch a candidate; a real stage change is appended to the timeline.

        Setting the stage to its current value writes no timeline event.

        Raises:
            RecordNotFoundError: If the candidate does not exist
            BackendError: If a read or write fails
        """
        fields = CandidateUpdate(**updates).to_row(exclude_unset=True)
        previous = await self.get_candidate(candidate_id)
        if previous is None:
            raise RecordNotFoundError(CANDIDATES, candidate_id)

        fields["updated_at"] = utc_timestamp()
        row = await self.backend.update(CANDIDATES, candidate_id, fields)
        if row is None:
            raise RecordNotFoundError(CANDIDATES, candidate_id)
        candidate = Candidate(**row)

        new_stage = fields.get("stage")
        if new_stage and new_stage != previous.stage:
            await self._record_transition(candidate_id, Stage(previous.stage), Stage(new_stage))
            logger.info(
                "candidate_stage_changed",
                candidate_id=candidate_id,
                from_stage=previous.stage,
                to_stage=new_stage,
            )
        return candidate

    async def _record_transition(
        self,
        candidate_id: str,
        from_stage: Stage | None,
        to_stage: Stage,
        notes: str = "",
    ) -> None:
        event = TimelineEvent(
            candidate_id=candidate_id,
            from_stage=from_stage,
            to_stage=to_stage,
            notes=notes,
        )
        await self.backend.insert(TIMELINE, [event.to_row(exclude={"id", "created_at"})])
