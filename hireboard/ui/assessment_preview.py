"""Assessment preview/fill-in with conditional questions and validation."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..core.errors import HireboardError
from ..core.models.assessment import (
    REQUIRED_MESSAGE,
    Assessment,
    AssessmentSection,
    MultiChoiceQuestion,
    QuestionBase,
    is_blank,
)
from ..observability.logger import get_logger

logger = get_logger(__name__)

SubmitHandler = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class NumberedQuestion:
    number: str
    section: AssessmentSection
    question: QuestionBase


class AssessmentPreview:
    """Answers for one assessment, plus visibility and validation rules.

    A read-only preview (the builder's) accepts no answers and cannot be
    submitted; hidden questions are neither shown nor validated.
    """

    def __init__(
        self,
        assessment: Assessment,
        on_submit: SubmitHandler | None = None,
        read_only: bool = True,
    ):
        self.assessment = assessment
        self.on_submit = on_submit
        self.read_only = read_only
        self.responses: dict[str, Any] = {}
        self.errors: dict[str, str] = {}
        self.submitting = False
        self.submit_error: str | None = None

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------
    def set_answer(self, question_id: str, answer: Any) -> None:
        if self.read_only:
            raise PermissionError("Preview is read-only")
        if self.assessment.find_question(question_id) is None:
            raise KeyError(question_id)
        self.responses[question_id] = answer

    def toggle_option(self, question_id: str, option: str, checked: bool) -> None:
        """Check or uncheck one option of a multi-choice question."""
        question = self.assessment.find_question(question_id)
        if not isinstance(question, MultiChoiceQuestion):
            raise TypeError(f"{question_id} is not a multi-choice question")
        current = list(self.responses.get(question_id) or [])
        if checked and option not in current:
            current.append(option)
        elif not checked:
            current = [o for o in current if o != option]
        self.set_answer(question_id, current)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------
    def is_visible(self, question: QuestionBase) -> bool:
        rule = question.conditional_on
        if rule is None:
            return True
        return rule.is_satisfied_by(self.responses.get(rule.question_id))

    def visible_questions(self) -> list[NumberedQuestion]:
        """Visible questions numbered ``section.question`` from 1.

        Numbers follow the position in the section, so a hidden question
        leaves a gap.
        """
        visible: list[NumberedQuestion] = []
        for s_index, section in enumerate(self.assessment.sections, start=1):
            for q_index, question in enumerate(section.questions, start=1):
                if self.is_visible(question):
                    visible.append(NumberedQuestion(f"{s_index}.{q_index}", section, question))
        return visible

    # ------------------------------------------------------------------
    # Validation and submit
    # ------------------------------------------------------------------
    def validate(self) -> bool:
        errors: dict[str, str] = {}
        for entry in self.visible_questions():
            question = entry.question
            answer = self.responses.get(question.id)
            if is_blank(answer):
                if question.required:
                    errors[question.id] = REQUIRED_MESSAGE
                continue
            message = question.validate_answer(answer)
            if message:
                errors[question.id] = message
        self.errors = errors
        return not errors

    async def submit(self) -> bool:
        """Validate and hand the answers to the submit handler.

        Returns:
            True when the handler accepted the answers
        """
        if self.read_only or self.on_submit is None:
            return False
        if not self.validate():
            return False

        self.submitting = True
        self.submit_error = None
        try:
            await self.on_submit(dict(self.responses))
        except HireboardError as e:
            self.submit_error = str(e)
            logger.warning("assessment_submit_failed", assessment_id=self.assessment.id, error=str(e))
            return False
        finally:
            self.submitting = False
        return True
