"""Candidates screen: full client-side list, filtered and windowed."""

from __future__ import annotations

from ..core.errors import HireboardError
from ..core.models.candidate import Candidate
from ..core.models.enums import Stage
from ..observability.logger import get_logger
from ..services.candidates import CandidatesService
from .windowing import DEFAULT_BUFFER, WindowedList, WindowRange

logger = get_logger(__name__)


def filter_candidates(
    candidates: list[Candidate],
    search: str = "",
    stage: Stage | str | None = None,
) -> list[Candidate]:
    """Case-insensitive name/email substring and exact stage filter."""
    filtered = candidates
    if search:
        needle = search.lower()
        filtered = [c for c in filtered if needle in c.name.lower() or needle in c.email.lower()]
    if stage:
        stage_value = Stage(stage).value
        filtered = [c for c in filtered if c.stage == stage_value]
    return filtered


class CandidatesList:
    """Loads every candidate once and filters in memory."""

    def __init__(
        self,
        candidates: CandidatesService,
        fetch_page_size: int = 100,
        item_height: float = 80,
        viewport_height: float = 600,
        buffer: int = DEFAULT_BUFFER,
    ):
        self.service = candidates
        self.fetch_page_size = fetch_page_size
        self.all_candidates: list[Candidate] = []
        self.search = ""
        self.stage_filter: Stage | None = None
        self.loading = False
        self.error: str | None = None
        self.window_list: WindowedList[Candidate] = WindowedList(
            item_height=item_height, viewport_height=viewport_height, buffer=buffer
        )

    @property
    def candidates(self) -> list[Candidate]:
        """The filtered list."""
        return self.window_list.items

    @property
    def window(self) -> WindowRange:
        return self.window_list.window

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.all_candidates = await self.service.fetch_all_candidates(self.fetch_page_size)
        except HireboardError as e:
            self.error = str(e)
            logger.warning("candidates_load_failed", error=str(e))
        finally:
            self.loading = False
        self._refilter()

    def set_search(self, search: str) -> None:
        self.search = search
        self._refilter()

    def set_stage_filter(self, stage: Stage | str | None) -> None:
        self.stage_filter = Stage(stage) if stage else None
        self._refilter()

    def on_scroll(self, scroll_top: float) -> WindowRange:
        return self.window_list.on_scroll(scroll_top)

    def visible_rows(self) -> list[tuple[int, Candidate]]:
        return self.window_list.visible_items()

    def _refilter(self) -> None:
        # set_items also resets the scroll position to the top
        self.window_list.set_items(
            filter_candidates(self.all_candidates, self.search, self.stage_filter)
        )
