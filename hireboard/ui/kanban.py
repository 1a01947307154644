"""Kanban board: candidates grouped by stage, drag to change stage."""

from __future__ import annotations

from typing import Any

from ..core.errors import HireboardError
from ..core.models.candidate import Candidate
from ..core.models.enums import Stage
from ..observability.logger import get_logger
from ..services.candidates import CandidatesService
from .optimistic import OptimisticState

logger = get_logger(__name__)

STAGE_LABELS: dict[Stage, str] = {
    Stage.APPLIED: "Applied",
    Stage.SCREEN: "Screen",
    Stage.TECH: "Tech",
    Stage.OFFER: "Offer",
    Stage.HIRED: "Hired",
    Stage.REJECTED: "Rejected",
}


class KanbanBoard:
    def __init__(self, candidates: CandidatesService, fetch_page_size: int = 100):
        self.service = candidates
        self.fetch_page_size = fetch_page_size
        self.loading = False
        self.state: OptimisticState[Candidate] = OptimisticState()

    @property
    def candidates(self) -> list[Candidate]:
        return self.state.items

    @property
    def error(self) -> str | None:
        return self.state.error

    async def load(self) -> None:
        self.loading = True
        self.state.error = None
        try:
            self.state.replace(await self.service.fetch_all_candidates(self.fetch_page_size))
        except HireboardError as e:
            self.state.error = str(e)
            logger.warning("board_load_failed", error=str(e))
        finally:
            self.loading = False

    def columns(self) -> dict[Stage, list[Candidate]]:
        """Every stage in board order, each with its candidates."""
        columns: dict[Stage, list[Candidate]] = {stage: [] for stage in Stage}
        for candidate in self.candidates:
            columns[Stage(candidate.stage)].append(candidate)
        return columns

    async def move(self, candidate_id: str, target_stage: Stage | str) -> bool:
        """Drop a candidate card on another column.

        Dropping on the card's current column does nothing. Otherwise the
        card moves at once and moves back if the update fails.

        Returns:
            True when a stage change was committed
        """
        target = Stage(target_stage)
        current = next((c for c in self.candidates if c.id == candidate_id), None)
        if current is None or current.stage == target.value:
            return False

        speculative = [
            c.model_copy(update={"stage": target.value}) if c.id == candidate_id else c
            for c in self.candidates
        ]

        async def commit() -> Any:
            return await self.service.update_candidate(candidate_id, stage=target)

        return await self.state.apply(speculative, commit, action="move_candidate")
