"""Hireboard data models for jobs, candidates, timelines, notes and assessments."""

from .assessment import (
    Assessment,
    AssessmentResponse,
    AssessmentSection,
    FileUploadQuestion,
    LongTextQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    Question,
    QuestionBase,
    ShortTextQuestion,
    SingleChoiceQuestion,
    VisibilityRule,
    convert_question,
)
from .base import (
    HireboardBaseModel,
    IdentifiedSchema,
    PagedResult,
    TimestampSchema,
    generate_id,
    utc_now,
    utc_timestamp,
)
from .candidate import (
    Candidate,
    CandidateDraft,
    CandidateUpdate,
    CandidateNote,
    TimelineEvent,
    extract_mentions,
)
from .enums import JobStatus, QuestionType, Stage
from .job import Job, JobDraft, JobUpdate, slugify

__all__ = [
    # Base
    "HireboardBaseModel",
    "IdentifiedSchema",
    "TimestampSchema",
    "PagedResult",
    "generate_id",
    "utc_now",
    "utc_timestamp",
    # Enums
    "JobStatus",
    "Stage",
    "QuestionType",
    # Jobs
    "Job",
    "JobDraft",
    "JobUpdate",
    "slugify",
    # Candidates
    "Candidate",
    "CandidateDraft",
    "CandidateUpdate",
    "CandidateNote",
    "TimelineEvent",
    "extract_mentions",
    # Assessments
    "Assessment",
    "AssessmentSection",
    "AssessmentResponse",
    "Question",
    "QuestionBase",
    "SingleChoiceQuestion",
    "MultiChoiceQuestion",
    "ShortTextQuestion",
    "LongTextQuestion",
    "NumericQuestion",
    "FileUploadQuestion",
    "VisibilityRule",
    "convert_question",
]
