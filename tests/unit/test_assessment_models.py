"""Assessment question union, type conversion and preview validation."""

import asyncio

import pytest

from hireboard.core.errors import BackendError
from hireboard.core.models.assessment import (
    REQUIRED_MESSAGE,
    Assessment,
    LongTextQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    ShortTextQuestion,
    SingleChoiceQuestion,
    convert_question,
    is_blank,
)
from hireboard.ui.assessment_preview import AssessmentPreview


def _assessment_row() -> dict:
    return {
        "id": "a1",
        "job_id": "j1",
        "title": "Backend Engineer Assessment",
        "sections": [
            {
                "id": "s1",
                "title": "Basics",
                "questions": [
                    {
                        "id": "remote",
                        "type": "single-choice",
                        "question": "Open to remote work?",
                        "required": True,
                        "options": ["Yes", "No"],
                    },
                    {
                        "id": "tz",
                        "type": "short-text",
                        "question": "Preferred time zone",
                        "required": True,
                        "maxLength": 10,
                        "conditionalOn": {"questionId": "remote", "value": "Yes"},
                    },
                    {
                        "id": "years",
                        "type": "numeric",
                        "question": "Years of experience",
                        "required": True,
                        "minValue": 0,
                        "maxValue": 50,
                    },
                ],
            },
            {
                "id": "s2",
                "title": "Skills",
                "questions": [
                    {
                        "id": "langs",
                        "type": "multi-choice",
                        "question": "Languages",
                        "options": ["Python", "Go", "Rust"],
                    },
                    {
                        "id": "cv",
                        "type": "file-upload",
                        "question": "Resume",
                    },
                ],
            },
        ],
    }


def _preview(on_submit=None) -> AssessmentPreview:
    return AssessmentPreview(Assessment(**_assessment_row()), on_submit=on_submit, read_only=False)


def test_rows_parse_into_question_kinds():
    assessment = Assessment(**_assessment_row())
    questions = {q.id: q for q in assessment.iter_questions()}

    assert isinstance(questions["remote"], SingleChoiceQuestion)
    assert isinstance(questions["tz"], ShortTextQuestion)
    assert questions["tz"].max_length == 10
    assert questions["tz"].conditional_on.question_id == "remote"
    assert questions["years"].min_value == 0
    assert isinstance(questions["langs"], MultiChoiceQuestion)
    assert questions["cv"].type == "file-upload"


def test_rows_round_trip_with_wire_keys():
    row = Assessment(**_assessment_row()).to_row(exclude_none=True)
    tz = row["sections"][0]["questions"][1]

    assert tz["maxLength"] == 10
    assert tz["conditionalOn"] == {"questionId": "remote", "value": "Yes"}
    assert "max_length" not in tz


def test_unknown_question_type_is_rejected():
    row = _assessment_row()
    row["sections"][0]["questions"][0]["type"] = "essay"

    with pytest.raises(ValueError):
        Assessment(**row)


def test_convert_question_keeps_shared_attributes():
    short = ShortTextQuestion(id="q1", question="Why us?", required=True, max_length=200)

    long = convert_question(short, "long-text")
    assert isinstance(long, LongTextQuestion)
    assert (long.id, long.question, long.required, long.max_length) == ("q1", "Why us?", True, 200)

    choice = convert_question(long, "single-choice")
    assert isinstance(choice, SingleChoiceQuestion)
    assert choice.options == []
    assert not hasattr(choice, "max_length")


@pytest.mark.parametrize(
    "answer,blank",
    [(None, True), ("", True), ("   ", True), ([], True), (0, False), ("x", False), (["a"], False)],
)
def test_is_blank(answer, blank):
    assert is_blank(answer) is blank


def test_conditional_question_hidden_until_revealed():
    preview = _preview()

    assert [q.number for q in preview.visible_questions()] == ["1.1", "1.3", "2.1", "2.2"]

    preview.set_answer("remote", "Yes")
    assert [q.number for q in preview.visible_questions()] == ["1.1", "1.2", "1.3", "2.1", "2.2"]


def test_multi_value_rule_matches_any_selected_option():
    row = _assessment_row()
    row["sections"][1]["questions"][1]["conditionalOn"] = {
        "questionId": "langs",
        "value": ["Go", "Rust"],
    }
    preview = AssessmentPreview(Assessment(**row), read_only=False)
    cv = preview.assessment.find_question("cv")

    assert not preview.is_visible(cv)
    preview.toggle_option("langs", "Rust", True)
    assert preview.is_visible(cv)
    preview.toggle_option("langs", "Rust", False)
    assert preview.responses["langs"] == []
    assert not preview.is_visible(cv)


def test_required_messages_skip_hidden_questions():
    preview = _preview()

    assert preview.validate() is False
    assert preview.errors == {"remote": REQUIRED_MESSAGE, "years": REQUIRED_MESSAGE}


def test_kind_specific_validation_messages():
    preview = _preview()
    preview.set_answer("remote", "Yes")
    preview.set_answer("tz", "Europe/Amsterdam")
    preview.set_answer("years", "51")

    assert preview.validate() is False
    assert preview.errors == {
        "tz": "Maximum 10 characters allowed",
        "years": "Value must be at most 50",
    }

    preview.set_answer("years", "-1")
    preview.validate()
    assert preview.errors["years"] == "Value must be at least 0"

    preview.set_answer("years", "ten")
    preview.validate()
    assert preview.errors["years"] == "Value must be a number"


def test_zero_is_a_valid_numeric_answer():
    preview = _preview()
    preview.set_answer("remote", "No")
    preview.set_answer("years", 0)

    assert preview.validate() is True


def test_read_only_preview_rejects_answers_and_submit():
    preview = AssessmentPreview(Assessment(**_assessment_row()))

    with pytest.raises(PermissionError):
        preview.set_answer("remote", "Yes")
    assert asyncio.run(preview.submit()) is False


def test_unknown_question_is_rejected():
    with pytest.raises(KeyError):
        _preview().set_answer("nope", "x")


def test_submit_hands_over_answers():
    received = []

    async def on_submit(responses):
        received.append(responses)

    preview = _preview(on_submit)
    preview.set_answer("remote", "No")
    preview.set_answer("years", 4)

    assert asyncio.run(preview.submit()) is True
    assert received == [{"remote": "No", "years": 4}]
    assert preview.submitting is False


def test_invalid_form_is_not_submitted():
    received = []

    async def on_submit(responses):
        received.append(responses)

    preview = _preview(on_submit)

    assert asyncio.run(preview.submit()) is False
    assert received == []


def test_submit_failure_is_reported():
    async def on_submit(responses):
        raise BackendError("Network error: Failed to upsert into assessment_responses")

    preview = _preview(on_submit)
    preview.set_answer("remote", "No")
    preview.set_answer("years", 4)

    assert asyncio.run(preview.submit()) is False
    assert "Failed to upsert" in preview.submit_error
