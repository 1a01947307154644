"""Backend-facing services used by the view models and the CLI."""

from .assessments import AssessmentsService
from .candidates import CandidatesService
from .jobs import JobsService
from .notes import NotesService

__all__ = ["AssessmentsService", "CandidatesService", "JobsService", "NotesService"]
