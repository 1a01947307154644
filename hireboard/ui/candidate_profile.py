"""Candidate profile: details, stage timeline and notes."""

from __future__ import annotations

import asyncio

from ..core.errors import HireboardError
from ..core.models.candidate import Candidate, CandidateNote, TimelineEvent
from ..core.models.enums import Stage
from ..observability.logger import get_logger
from ..services.candidates import CandidatesService
from ..services.notes import NotesService

logger = get_logger(__name__)


class CandidateProfileView:
    """State behind one candidate's page."""

    def __init__(self, candidates: CandidatesService, notes: NotesService, candidate_id: str):
        self.candidates = candidates
        self.notes_service = notes
        self.candidate_id = candidate_id
        self.candidate: Candidate | None = None
        self.timeline: list[TimelineEvent] = []
        self.notes: list[CandidateNote] = []
        self.loading = False
        self.loaded = False
        self.error: str | None = None

    @property
    def not_found(self) -> bool:
        """True once a completed fetch found no record."""
        return self.loaded and self.error is None and self.candidate is None

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.candidate, self.timeline, self.notes = await asyncio.gather(
                self.candidates.get_candidate(self.candidate_id),
                self.candidates.get_timeline(self.candidate_id),
                self.notes_service.list_notes(self.candidate_id),
            )
            self.loaded = True
        except HireboardError as e:
            self.error = str(e)
            logger.warning("profile_load_failed", candidate_id=self.candidate_id, error=str(e))
        finally:
            self.loading = False

    async def change_stage(self, stage: Stage | str) -> bool:
        if self.candidate is None:
            return False
        try:
            await self.candidates.update_candidate(self.candidate_id, stage=Stage(stage))
        except HireboardError as e:
            self.error = str(e)
            logger.warning("stage_change_failed", candidate_id=self.candidate_id, error=str(e))
            return False
        await self.load()
        return True

    async def add_note(self, content: str) -> bool:
        """Add a note unless it is blank; mentions come from ``@word`` tokens."""
        if not content.strip():
            return False
        try:
            await self.notes_service.add_note(self.candidate_id, content)
        except HireboardError as e:
            self.error = str(e)
            logger.warning("note_add_failed", candidate_id=self.candidate_id, error=str(e))
            return False
        await self.load()
        return True
