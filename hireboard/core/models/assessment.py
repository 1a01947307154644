"""Assessment (per-job form) models.

Questions are a tagged union discriminated by ``type``; each kind carries
only the attributes that apply to it. Wire rows keep the camelCase keys the
backend stores (``maxLength``, ``conditionalOn`` ...).
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from .base import HireboardBaseModel, IdentifiedSchema, TimestampSchema, generate_id, utc_now
from .enums import QuestionType

REQUIRED_MESSAGE = "This field is required"


def is_blank(answer: Any) -> bool:
    """True when an answer counts as missing for a required question."""
    if answer is None:
        return True
    if isinstance(answer, str):
        return not answer.strip()
    if isinstance(answer, (list, tuple, set, dict)):
        return len(answer) == 0
    return False


class VisibilityRule(HireboardBaseModel):
    """Show a question only when another question's answer matches."""

    question_id: str = Field(..., alias="questionId", description="Controlling question")
    value: str | list[str] = Field(..., description="Answer (or any of answers) that reveals")

    def is_satisfied_by(self, answer: Any) -> bool:
        if isinstance(self.value, list):
            return isinstance(answer, list) and any(v in answer for v in self.value)
        return answer == self.value


class QuestionBase(HireboardBaseModel):
    """Fields shared by every question kind."""

    id: str = Field(default_factory=generate_id, description="Question identifier")
    question: str = Field("", description="Prompt text")
    required: bool = Field(False, description="Answer required on submit")
    conditional_on: VisibilityRule | None = Field(None, alias="conditionalOn")

    def validate_answer(self, answer: Any) -> str | None:
        """Kind-specific check of a non-blank answer; returns an error message."""
        return None


class SingleChoiceQuestion(QuestionBase):
    type: Literal["single-choice"] = "single-choice"
    options: list[str] = Field(default_factory=list)


class MultiChoiceQuestion(QuestionBase):
    type: Literal["multi-choice"] = "multi-choice"
    options: list[str] = Field(default_factory=list)


class _TextQuestion(QuestionBase):
    max_length: int | None = Field(None, alias="maxLength", ge=1)

    def validate_answer(self, answer: Any) -> str | None:
        if self.max_length and isinstance(answer, str) and len(answer) > self.max_length:
            return f"Maximum {self.max_length} characters allowed"
        return None


class ShortTextQuestion(_TextQuestion):
    type: Literal["short-text"] = "short-text"


class LongTextQuestion(_TextQuestion):
    type: Literal["long-text"] = "long-text"


class NumericQuestion(QuestionBase):
    type: Literal["numeric"] = "numeric"
    min_value: float | None = Field(None, alias="minValue")
    max_value: float | None = Field(None, alias="maxValue")

    def validate_answer(self, answer: Any) -> str | None:
        try:
            number = float(answer)
        except (TypeError, ValueError):
            return "Value must be a number"
        if self.min_value is not None and number < self.min_value:
            return f"Value must be at least {_format_number(self.min_value)}"
        if self.max_value is not None and number > self.max_value:
            return f"Value must be at most {_format_number(self.max_value)}"
        return None


class FileUploadQuestion(QuestionBase):
    type: Literal["file-upload"] = "file-upload"


Question = Annotated[
    Union[
        SingleChoiceQuestion,
        MultiChoiceQuestion,
        ShortTextQuestion,
        LongTextQuestion,
        NumericQuestion,
        FileUploadQuestion,
    ],
    Field(discriminator="type"),
]

QUESTION_MODELS: dict[str, type[QuestionBase]] = {
    QuestionType.SINGLE_CHOICE.value: SingleChoiceQuestion,
    QuestionType.MULTI_CHOICE.value: MultiChoiceQuestion,
    QuestionType.SHORT_TEXT.value: ShortTextQuestion,
    QuestionType.LONG_TEXT.value: LongTextQuestion,
    QuestionType.NUMERIC.value: NumericQuestion,
    QuestionType.FILE_UPLOAD.value: FileUploadQuestion,
}

CHOICE_TYPES = {QuestionType.SINGLE_CHOICE.value, QuestionType.MULTI_CHOICE.value}
TEXT_TYPES = {QuestionType.SHORT_TEXT.value, QuestionType.LONG_TEXT.value}


def convert_question(question: QuestionBase, new_type: QuestionType | str) -> QuestionBase:
    """Rebuild ``question`` as another kind, keeping the attributes both share."""
    new_type = QuestionType(new_type).value
    data = question.model_dump(exclude={"type"})
    model = QUESTION_MODELS[new_type]
    kept = {name: value for name, value in data.items() if name in model.model_fields}
    return model(**kept)


class AssessmentSection(HireboardBaseModel):
    """Ordered group of questions."""

    id: str = Field(default_factory=generate_id)
    title: str = Field("", description="Section heading")
    questions: list[Question] = Field(default_factory=list)


class Assessment(IdentifiedSchema, TimestampSchema):
    """One assessment per job."""

    job_id: str = Field(..., description="Owning job")
    title: str = Field("", description="Assessment title")
    sections: list[AssessmentSection] = Field(default_factory=list)

    def iter_questions(self):
        for section in self.sections:
            yield from section.questions

    def find_question(self, question_id: str) -> QuestionBase | None:
        return next((q for q in self.iter_questions() if q.id == question_id), None)


class AssessmentResponse(IdentifiedSchema):
    """A candidate's answers; one per (assessment, candidate)."""

    assessment_id: str = Field(..., description="Assessment identifier")
    candidate_id: str = Field(..., description="Candidate identifier")
    responses: dict[str, Any] = Field(default_factory=dict, description="Question id -> answer")
    submitted_at: datetime = Field(default_factory=utc_now)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
