"""Free-text candidate notes with @-mentions."""

from __future__ import annotations

from ..core.models.candidate import CandidateNote, extract_mentions
from ..core.storage.base import Backend, Eq, Sort
from ..observability.logger import get_logger
from .collections import NOTES

logger = get_logger(__name__)


class NotesService:
    def __init__(self, backend: Backend):
        self.backend = backend

    async def list_notes(self, candidate_id: str) -> list[CandidateNote]:
        """Notes on a candidate, newest first."""
        result = await self.backend.fetch_page(
            NOTES,
            filters=[Eq("candidate_id", candidate_id)],
            order=[Sort("created_at", ascending=False)],
        )
        return [CandidateNote(**row) for row in result.rows]

    async def add_note(
        self,
        candidate_id: str,
        content: str,
        mentions: list[str] | None = None,
    ) -> CandidateNote:
        content = content.strip()
        if not content:
            raise ValueError("Note content must not be empty")
        if mentions is None:
            mentions = extract_mentions(content)

        rows = await self.backend.insert(
            NOTES,
            [{"candidate_id": candidate_id, "content": content, "mentions": mentions}],
        )
        logger.info("note_added", candidate_id=candidate_id, mentions=mentions)
        return CandidateNote(**rows[0])
