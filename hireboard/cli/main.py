"""CLI interface for Hireboard using Typer."""

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from ..core.config.loader import load_config
from ..core.errors import HireboardError
from ..core.models.candidate import Candidate
from ..core.models.enums import JobStatus, Stage
from ..core.models.job import Job
from ..core.storage.base import Backend, Eq
from ..core.storage.factory import create_backend
from ..core.storage.simulated import SimulatedNetworkBackend
from ..observability.logger import get_logger, setup_logging
from ..seed import seed_database
from ..services import AssessmentsService, CandidatesService, JobsService, NotesService
from ..services.collections import CANDIDATES
from ..ui.assessment_builder import AssessmentBuilder
from ..ui.candidate_profile import CandidateProfileView
from ..ui.candidates_list import CandidatesList
from ..ui.jobs_board import JobsBoard
from ..ui.kanban import STAGE_LABELS, KanbanBoard

logger = get_logger(__name__)
console = Console()

T = TypeVar("T")

app = typer.Typer(
    name="hireboard",
    help="Hireboard - jobs, candidate pipeline and assessments",
    add_completion=False,
)


def _run(
    action: Callable[[Backend, dict[str, Any]], Awaitable[T]],
    seed_memory: bool = True,
) -> T:
    """Build the configured backend, run ``action`` against it, close it.

    An in-memory backend is seeded first so every command has data.
    """
    config = load_config()
    log_cfg = config.get("logging", {}) or {}
    setup_logging(
        log_level=log_cfg.get("level", "WARNING"),
        log_format=log_cfg.get("format", "console"),
        log_file=log_cfg.get("file"),
    )

    async def run() -> T:
        backend = create_backend(config)
        try:
            backend_cfg = config.get("backend", {}) or {}
            if seed_memory and backend_cfg.get("kind", "memory") == "memory":
                # Seed past the simulator so demo data never hits injected failures
                store = backend.inner if isinstance(backend, SimulatedNetworkBackend) else backend
                await seed_database(store, random.Random(backend_cfg.get("seed", 42)))
            return await action(backend, config)
        finally:
            await backend.aclose()

    try:
        return asyncio.run(run())
    except HireboardError as e:
        console.print(f"[red]! Error:[/red] {e}")
        raise typer.Exit(code=1)


async def _find_job(service: JobsService, slug: str) -> Job:
    for job in await service.all_jobs():
        if job.slug == slug or job.id == slug:
            return job
    console.print(f"[yellow]Job not found:[/yellow] {slug}")
    raise typer.Exit(code=1)


async def _find_candidate(backend: Backend, ref: str) -> Candidate:
    """Look a candidate up by id or by email."""
    field = "email" if "@" in ref else "id"
    row = await backend.fetch_one(CANDIDATES, [Eq(field, ref)])
    if row is None:
        console.print(f"[yellow]Candidate not found:[/yellow] {ref}")
        raise typer.Exit(code=1)
    return Candidate(**row)


def _jobs_table(jobs: list[Job]) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Order", style="dim", justify="right")
    table.add_column("Title")
    table.add_column("Slug")
    table.add_column("Status")
    table.add_column("Tags")
    for job in jobs:
        status_style = "green" if job.is_active else "dim"
        table.add_row(
            str(job.order),
            job.title,
            job.slug,
            f"[{status_style}]{job.status}[/]",
            ", ".join(job.tags),
        )
    return table


@app.command()
def seed():
    """Seed the configured backend with demo jobs, candidates and assessments."""

    async def action(backend: Backend, config: dict[str, Any]) -> dict[str, int]:
        return await seed_database(backend)

    written = _run(action, seed_memory=False)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Collection")
    table.add_column("Rows written", justify="right")
    for collection, count in written.items():
        table.add_row(collection, str(count))
    console.print(table)


@app.command()
def jobs(
    search: Annotated[str, typer.Option("--search", "-s", help="Title substring")] = "",
    status: Annotated[JobStatus | None, typer.Option("--status", help="Status filter")] = None,
    page: Annotated[int, typer.Option("--page", "-p", help="Page number")] = 1,
):
    """List jobs, one page at a time, in board order."""
    if page <= 0:
        console.print("[red]! Error:[/red] --page must be greater than 0")
        raise typer.Exit(code=1)

    async def action(backend: Backend, config: dict[str, Any]) -> JobsBoard:
        page_size = config.get("ui", {}).get("jobs", {}).get("pagesize", 10)
        board = JobsBoard(JobsService(backend), page_size=page_size)
        board.search = search
        board.status_filter = status
        board.page = page
        await board.load()
        return board

    board = _run(action)
    if board.error:
        console.print(f"[red]! Failed to load jobs:[/red] {board.error}")
        raise typer.Exit(code=1)
    if not board.jobs:
        console.print("[yellow]No jobs found.[/yellow]")
        return
    console.print(_jobs_table(board.jobs))
    console.print(f"[dim]Page {board.page} of {board.total_pages} ({board.count} jobs)[/dim]")


@app.command("reorder-job")
def reorder_job(
    job: Annotated[str, typer.Argument(help="Slug or id of the job to move")],
    target: Annotated[str, typer.Argument(help="Slug or id of the job whose place it takes")],
):
    """Move a job to another job's position on the board."""

    async def action(backend: Backend, config: dict[str, Any]) -> JobsBoard:
        service = JobsService(backend)
        dragged, dropped_on = await _find_job(service, job), await _find_job(service, target)
        board = JobsBoard(service, page_size=max(1, len(await service.all_jobs())))
        await board.load()
        await board.reorder(dragged.id, dropped_on.id)
        return board

    board = _run(action)
    if board.error:
        console.print(f"[red]! Reorder failed, order restored:[/red] {board.error}")
        raise typer.Exit(code=1)
    console.print(_jobs_table(board.jobs))


@app.command("archive-job")
def archive_job(job: Annotated[str, typer.Argument(help="Slug or id of the job")]):
    """Toggle a job between active and archived."""

    async def action(backend: Backend, config: dict[str, Any]) -> Job:
        service = JobsService(backend)
        return await service.toggle_archive(await _find_job(service, job))

    updated = _run(action)
    console.print(f"[green]>[/green] {updated.title} is now [bold]{updated.status}[/bold]")


@app.command()
def candidates(
    search: Annotated[str, typer.Option("--search", "-s", help="Name or email substring")] = "",
    stage: Annotated[Stage | None, typer.Option("--stage", help="Stage filter")] = None,
    scroll: Annotated[float, typer.Option("--scroll", help="Scroll offset in pixels")] = 0.0,
):
    """Show the rendered window of the filtered candidate list."""

    async def action(backend: Backend, config: dict[str, Any]) -> CandidatesList:
        ui_cfg = config.get("ui", {})
        window_cfg = ui_cfg.get("window", {})
        view = CandidatesList(
            CandidatesService(backend),
            fetch_page_size=ui_cfg.get("candidates", {}).get("fetchsize", 100),
            item_height=window_cfg.get("itemheight", 80),
            viewport_height=window_cfg.get("viewportheight", 600),
            buffer=window_cfg.get("buffer", 5),
        )
        await view.load()
        view.set_search(search)
        view.set_stage_filter(stage)
        view.on_scroll(scroll)
        return view

    view = _run(action)
    if view.error:
        console.print(f"[red]! Failed to load candidates:[/red] {view.error}")
        raise typer.Exit(code=1)
    if not view.candidates:
        console.print("[yellow]No candidates found.[/yellow]")
        return

    window = view.window
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Stage")
    for index, candidate in view.visible_rows():
        table.add_row(str(index), candidate.name, candidate.email, candidate.stage)
    console.print(table)
    console.print(
        f"[dim]{len(view.candidates)} candidates; rows {window.start}-{window.end - 1} "
        f"rendered at offset {window.offset:.0f}px of {window.total_height:.0f}px[/dim]"
    )


@app.command()
def board(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Cards shown per column")] = 5,
):
    """Kanban summary: candidates per stage."""

    async def action(backend: Backend, config: dict[str, Any]) -> KanbanBoard:
        kanban = KanbanBoard(CandidatesService(backend))
        await kanban.load()
        return kanban

    kanban = _run(action)
    if kanban.error:
        console.print(f"[red]! Failed to load board:[/red] {kanban.error}")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    columns = kanban.columns()
    for stage, cards in columns.items():
        table.add_column(f"{STAGE_LABELS[stage]} ({len(cards)})")
    for row in range(limit):
        table.add_row(*[cards[row].name if row < len(cards) else "" for cards in columns.values()])
    console.print(table)


@app.command()
def move(
    candidate: Annotated[str, typer.Argument(help="Candidate id or email")],
    stage: Annotated[Stage, typer.Argument(help="Target stage")],
):
    """Drag a candidate to another stage column."""

    async def action(backend: Backend, config: dict[str, Any]) -> tuple[KanbanBoard, bool]:
        target = await _find_candidate(backend, candidate)
        kanban = KanbanBoard(CandidatesService(backend))
        await kanban.load()
        return kanban, await kanban.move(target.id, stage)

    kanban, moved = _run(action)
    if kanban.error:
        console.print(f"[red]! Move failed, card restored:[/red] {kanban.error}")
        raise typer.Exit(code=1)
    if not moved:
        console.print(f"[yellow]Candidate already in {stage.value}.[/yellow]")
        return
    console.print(f"[green]>[/green] Moved {candidate} to [bold]{stage.value}[/bold]")


@app.command("candidate")
def candidate_profile(
    candidate: Annotated[str, typer.Argument(help="Candidate id or email")],
):
    """Show a candidate with their stage timeline and notes."""

    async def action(backend: Backend, config: dict[str, Any]) -> CandidateProfileView:
        found = await _find_candidate(backend, candidate)
        view = CandidateProfileView(CandidatesService(backend), NotesService(backend), found.id)
        await view.load()
        return view

    view = _run(action)
    if view.error:
        console.print(f"[red]! Failed to load candidate:[/red] {view.error}")
        raise typer.Exit(code=1)
    if view.not_found:
        console.print("[yellow]Candidate not found.[/yellow]")
        raise typer.Exit(code=1)

    found = view.candidate
    console.print(f"\n[bold]{found.name}[/bold] <{found.email}>  stage: [bold]{found.stage}[/bold]")

    console.print("\n[bold]Timeline:[/bold]")
    for event in view.timeline:
        transition = f"{event.from_stage} -> {event.to_stage}" if event.from_stage else event.to_stage
        note = f"  [dim]{event.notes}[/dim]" if event.notes else ""
        console.print(f"  {event.created_at:%Y-%m-%d %H:%M}  {transition}{note}")

    console.print("\n[bold]Notes:[/bold]")
    if not view.notes:
        console.print("  [dim]No notes yet.[/dim]")
    for note in view.notes:
        console.print(f"  {note.created_at:%Y-%m-%d %H:%M}  {note.content}")


@app.command()
def note(
    candidate: Annotated[str, typer.Argument(help="Candidate id or email")],
    content: Annotated[str, typer.Argument(help="Note text; @handles are recorded as mentions")],
):
    """Add a note to a candidate."""
    if not content.strip():
        console.print("[red]! Error:[/red] note must not be empty")
        raise typer.Exit(code=1)

    async def action(backend: Backend, config: dict[str, Any]) -> CandidateProfileView:
        found = await _find_candidate(backend, candidate)
        view = CandidateProfileView(CandidatesService(backend), NotesService(backend), found.id)
        await view.load()
        await view.add_note(content)
        return view

    view = _run(action)
    if view.error:
        console.print(f"[red]! Failed to add note:[/red] {view.error}")
        raise typer.Exit(code=1)
    mentions = view.notes[0].mentions if view.notes else []
    console.print(f"[green]>[/green] Note added ({len(view.notes)} total)")
    if mentions:
        console.print(f"[dim]Mentioned: {', '.join(mentions)}[/dim]")


@app.command()
def assessment(
    job: Annotated[str, typer.Argument(help="Slug or id of the job")],
):
    """Preview a job's assessment."""

    async def action(backend: Backend, config: dict[str, Any]) -> AssessmentBuilder:
        service = JobsService(backend)
        builder = AssessmentBuilder(service, AssessmentsService(backend), (await _find_job(service, job)).id)
        await builder.load()
        return builder

    builder = _run(action)
    if builder.error:
        console.print(f"[red]! Failed to load assessment:[/red] {builder.error}")
        raise typer.Exit(code=1)
    if builder.not_found:
        console.print("[yellow]Job not found.[/yellow]")
        raise typer.Exit(code=1)

    preview = builder.preview()
    console.print(f"\n[bold blue]{preview.assessment.title}[/bold blue]")
    current_section = None
    for entry in preview.visible_questions():
        if entry.section.id != current_section:
            current_section = entry.section.id
            console.print(f"\n[bold]{entry.section.title}[/bold]")
        marker = " [red]*[/red]" if entry.question.required else ""
        console.print(f"  {entry.number} {entry.question.question}{marker} [dim]({entry.question.type})[/dim]")
        for option in getattr(entry.question, "options", []):
            console.print(f"      - {option}")


if __name__ == "__main__":
    app()
