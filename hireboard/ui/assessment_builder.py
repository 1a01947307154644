"""Assessment builder: edit a job's sections and questions, preview, save."""

from __future__ import annotations

import asyncio
from typing import Any

from ..core.errors import HireboardError
from ..core.models.assessment import (
    Assessment,
    AssessmentSection,
    QuestionBase,
    ShortTextQuestion,
    convert_question,
)
from ..core.models.enums import QuestionType
from ..core.models.job import Job
from ..observability.logger import get_logger
from ..services.assessments import AssessmentsService
from ..services.jobs import JobsService
from .assessment_preview import AssessmentPreview, SubmitHandler

logger = get_logger(__name__)


class AssessmentBuilder:
    """Editable copy of a job's assessment."""

    def __init__(self, jobs: JobsService, assessments: AssessmentsService, job_id: str):
        self.jobs = jobs
        self.assessments = assessments
        self.job_id = job_id
        self.job: Job | None = None
        self.assessment_id: str | None = None
        self.title = ""
        self.sections: list[AssessmentSection] = []
        self.loading = False
        self.saving = False
        self.loaded = False
        self.error: str | None = None

    @property
    def not_found(self) -> bool:
        """True once a completed fetch found no job."""
        return self.loaded and self.error is None and self.job is None

    async def load(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.job, assessment = await asyncio.gather(
                self.jobs.get_job(self.job_id),
                self.assessments.get_assessment(self.job_id),
            )
            self.loaded = True
        except HireboardError as e:
            self.error = str(e)
            logger.warning("assessment_load_failed", job_id=self.job_id, error=str(e))
            return
        finally:
            self.loading = False

        if assessment is not None:
            self.assessment_id = assessment.id
            self.title = assessment.title
            self.sections = list(assessment.sections)
        else:
            self.title = f"{self.job.title} Assessment" if self.job else "New Assessment"
            self.sections = [AssessmentSection(title="Section 1")]

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def add_section(self, title: str | None = None) -> AssessmentSection:
        section = AssessmentSection(title=title or f"Section {len(self.sections) + 1}")
        self.sections.append(section)
        return section

    def rename_section(self, section_id: str, title: str) -> None:
        self.sections = [
            s.model_copy(update={"title": title}) if s.id == section_id else s
            for s in self.sections
        ]

    def remove_section(self, section_id: str) -> None:
        self.sections = [s for s in self.sections if s.id != section_id]

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    def _section(self, section_id: str) -> AssessmentSection:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise KeyError(section_id)

    def _replace_questions(self, section_id: str, questions: list[QuestionBase]) -> None:
        self.sections = [
            s.model_copy(update={"questions": questions}) if s.id == section_id else s
            for s in self.sections
        ]

    def add_question(self, section_id: str, question: QuestionBase | None = None) -> QuestionBase:
        """Append a question (an empty optional short-text one by default)."""
        section = self._section(section_id)
        question = question or ShortTextQuestion()
        self._replace_questions(section_id, [*section.questions, question])
        return question

    def remove_question(self, section_id: str, question_id: str) -> None:
        section = self._section(section_id)
        self._replace_questions(section_id, [q for q in section.questions if q.id != question_id])

    def update_question(self, section_id: str, question_id: str, **updates: Any) -> QuestionBase:
        """Edit a question's attributes; a new ``type`` converts the question.

        Attributes the target kind does not have are rejected.
        """
        section = self._section(section_id)
        questions = list(section.questions)
        for index, question in enumerate(questions):
            if question.id != question_id:
                continue
            new_type = updates.pop("type", None)
            if new_type is not None and QuestionType(new_type).value != question.type:
                question = convert_question(question, new_type)
            data = {**question.model_dump(), **updates}
            unknown = set(updates) - set(type(question).model_fields)
            if unknown:
                raise ValueError(f"{question.type} questions have no {', '.join(sorted(unknown))}")
            questions[index] = type(question).model_validate(data)
            self._replace_questions(section_id, questions)
            return questions[index]
        raise KeyError(question_id)

    # ------------------------------------------------------------------
    # Preview and save
    # ------------------------------------------------------------------
    def draft(self) -> Assessment:
        return Assessment(
            id=self.assessment_id or "",
            job_id=self.job_id,
            title=self.title,
            sections=self.sections,
        )

    def preview(self, on_submit: SubmitHandler | None = None) -> AssessmentPreview:
        """Read-only preview, or a fillable form when ``on_submit`` is given."""
        return AssessmentPreview(self.draft(), on_submit=on_submit, read_only=on_submit is None)

    async def save(self) -> bool:
        self.saving = True
        self.error = None
        try:
            saved = await self.assessments.save_assessment(self.job_id, self.title, self.sections)
        except HireboardError as e:
            self.error = str(e)
            logger.warning("assessment_save_failed", job_id=self.job_id, error=str(e))
            return False
        finally:
            self.saving = False
        self.assessment_id = saved.id
        return True
