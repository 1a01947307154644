"""Jobs board: filtered, paginated job list with drag-to-reorder."""

from __future__ import annotations

from typing import Any

from ..core.errors import HireboardError
from ..core.models.enums import JobStatus
from ..core.models.job import Job, JobDraft
from ..core.ordering import apply_order_updates, plan_reorder
from ..observability.logger import get_logger
from ..services.jobs import JobsService
from .optimistic import OptimisticState

logger = get_logger(__name__)


class JobsBoard:
    """State behind the jobs screen."""

    def __init__(self, jobs: JobsService, page_size: int = 10):
        self.service = jobs
        self.page_size = page_size
        self.search = ""
        self.status_filter: JobStatus | None = None
        self.page = 1
        self.total_pages = 1
        self.count = 0
        self.loading = False
        self.state: OptimisticState[Job] = OptimisticState()

    @property
    def jobs(self) -> list[Job]:
        return self.state.items

    @property
    def error(self) -> str | None:
        return self.state.error

    async def load(self) -> None:
        """Fetch the current page; failures become ``error``."""
        self.loading = True
        self.state.error = None
        try:
            result = await self.service.list_jobs(
                search=self.search or None,
                status=self.status_filter,
                page=self.page,
                page_size=self.page_size,
            )
        except HireboardError as e:
            self.state.error = str(e)
            logger.warning("jobs_load_failed", error=str(e))
            return
        finally:
            self.loading = False

        self.state.replace(result.data)
        self.count = result.count
        self.total_pages = max(1, result.total_pages)

    async def set_search(self, search: str) -> None:
        self.search = search
        self.page = 1
        await self.load()

    async def set_status_filter(self, status: JobStatus | str | None) -> None:
        self.status_filter = JobStatus(status) if status else None
        self.page = 1
        await self.load()

    async def set_page(self, page: int) -> None:
        self.page = min(max(1, page), self.total_pages)
        await self.load()

    async def save_job(self, draft: JobDraft, editing: Job | None = None) -> Job:
        """Create a job at the end of the board, or update ``editing``.

        Errors propagate so the edit form can stay open and show them.
        """
        if editing is not None:
            job = await self.service.update_job(
                editing.id,
                **draft.with_slug().model_dump(exclude={"order"}),
            )
        else:
            order = await self.service.next_order()
            job = await self.service.create_job(draft.model_copy(update={"order": order}))
        await self.load()
        return job

    async def toggle_archive(self, job: Job) -> None:
        try:
            await self.service.toggle_archive(job)
        except HireboardError as e:
            self.state.error = str(e)
            logger.warning("job_archive_failed", job_id=job.id, error=str(e))
            return
        await self.load()

    async def reorder(self, dragged_id: str, target_id: str) -> bool:
        """Drop ``dragged_id`` onto ``target_id``'s position.

        The board shows the new order at once; a failed write restores the
        previous order and sets ``error``.

        Returns:
            True when the move was committed
        """
        if dragged_id == target_id:
            return False
        by_id = {job.id: job for job in self.jobs}
        dragged, target = by_id.get(dragged_id), by_id.get(target_id)
        if dragged is None or target is None:
            return False

        updates = plan_reorder(self.jobs, dragged.id, dragged.order, target.order)
        speculative = apply_order_updates(self.jobs, updates)

        async def commit() -> Any:
            return await self.service.reorder_job(dragged.id, dragged.order, target.order)

        committed = await self.state.apply(speculative, commit, action="reorder_job")
        if committed:
            await self.load()
        return committed
