"""Job postings: paged listing, create/update, archive and reorder."""

from __future__ import annotations

from typing import Any

from ..core.errors import RecordNotFoundError
from ..core.models.base import PagedResult, utc_timestamp
from ..core.models.enums import JobStatus
from ..core.models.job import Job, JobDraft, JobUpdate
from ..core.ordering import OrderUpdate, plan_reorder
from ..core.storage.base import Backend, Eq, ILike, Predicate, Sort
from ..observability.logger import get_logger
from .collections import JOBS

logger = get_logger(__name__)


class JobsService:
    """CRUD and ordering for job postings."""

    def __init__(self, backend: Backend):
        self.backend = backend

    async def list_jobs(
        self,
        search: str | None = None,
        status: JobStatus | str | None = None,
        page: int = 1,
        page_size: int = 10,
        sort: str = "order",
    ) -> PagedResult[Job]:
        """One page of jobs filtered by title substring and status.

        Args:
            search: Case-insensitive substring of the title
            status: Exact status filter
            page: 1-based page number
            page_size: Jobs per page
            sort: Field sorted ascending

        Returns:
            PagedResult with the page's jobs and the total match count
        """
        filters: list[Predicate] = []
        if search:
            filters.append(ILike("title", search))
        if status:
            filters.append(Eq("status", JobStatus(status).value))

        result = await self.backend.fetch_page(
            JOBS,
            filters=filters,
            order=[Sort(sort)],
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        return PagedResult[Job](
            data=[Job(**row) for row in result.rows],
            count=result.count,
            page=page,
            page_size=page_size,
        )

    async def all_jobs(self) -> list[Job]:
        result = await self.backend.fetch_page(JOBS, order=[Sort("order")])
        return [Job(**row) for row in result.rows]

    async def get_job(self, job_id: str) -> Job | None:
        row = await self.backend.fetch_one(JOBS, [Eq("id", job_id)])
        return Job(**row) if row else None

    async def next_order(self) -> int:
        """Order value that places a new job after every existing one."""
        result = await self.backend.fetch_page(JOBS, order=[Sort("order", ascending=False)], limit=1)
        if not result.rows:
            return 0
        return int(result.rows[0]["order"]) + 1

    async def create_job(self, draft: JobDraft) -> Job:
        draft = draft.with_slug()
        rows = await self.backend.insert(JOBS, [draft.to_row()])
        job = Job(**rows[0])
        logger.info("job_created", job_id=job.id, title=job.title, order=job.order)
        return job

    async def update_job(self, job_id: str, **updates: Any) -> Job:
        fields = JobUpdate(**updates).to_row(exclude_unset=True)
        fields["updated_at"] = utc_timestamp()

        row = await self.backend.update(JOBS, job_id, fields)
        if row is None:
            raise RecordNotFoundError(JOBS, job_id)
        logger.info("job_updated", job_id=job_id, fields=sorted(updates))
        return Job(**row)

    async def toggle_archive(self, job: Job) -> Job:
        status = JobStatus.ARCHIVED if job.is_active else JobStatus.ACTIVE
        return await self.update_job(job.id, status=status)

    async def reorder_job(self, job_id: str, from_order: int, to_order: int) -> list[OrderUpdate]:
        """Move a job to ``to_order``, shifting the jobs in between by one.

        Returns:
            The order writes applied, one per changed job

        Raises:
            RecordNotFoundError: If no job has ``job_id``
            BackendError: If a read or write fails
        """
        jobs = await self.all_jobs()
        if not any(job.id == job_id for job in jobs):
            raise RecordNotFoundError(JOBS, job_id)

        updates = plan_reorder(jobs, job_id, from_order, to_order)
        for update in updates:
            await self.backend.update(JOBS, update.id, {"order": update.order})

        logger.info(
            "job_reordered",
            job_id=job_id,
            from_order=from_order,
            to_order=to_order,
            writes=len(updates),
        )
        return updates
