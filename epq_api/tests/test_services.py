"""
Tests for GradingService and QuestionImportService.

Unit tests for service business logic.
"""

import pytest

from epq.answer import ValidationPolicy
from epq_api.core.config import Settings
from epq_api.core.errors import BlankConfigurationError, GradingError, InvalidRequestError
from epq_api.models import AnswerSubmission, AttemptResult, QuestionImport
from epq_api.services import (
    GradingService,
    QuestionImportService,
    get_grading_service,
    get_import_service,
)


@pytest.mark.asyncio
async def test_grade_answer(grading_service):
    """Test grading one correct answer"""
    submission = AnswerSubmission(question_type="either_or", user_answer="yes", correct_answer="Yes")

    check = await grading_service.grade_answer(submission)

    assert check.correct is True
    assert check.reason == "exact_match"
    assert check.diagnostics[0].event == "validating_answer"


@pytest.mark.asyncio
async def test_grade_answer_keeps_question_id(grading_service):
    """Test that the caller's identifier is carried through"""
    submission = AnswerSubmission(
        question_id="q-7", question_type="short_answer", user_answer="", correct_answer="x"
    )

    check = await grading_service.grade_answer(submission)

    assert check.question_id == "q-7"
    assert check.correct is False
    assert check.reason == "empty_answer"


@pytest.mark.asyncio
async def test_grade_attempt(grading_service, sample_submissions):
    """Test grading a whole attempt"""
    result = await grading_service.grade_attempt(sample_submissions)

    assert isinstance(result, AttemptResult)
    assert result.total == 4
    assert result.correct_count == 3
    assert result.score == 0.75
    assert [c.correct for c in result.results] == [True, False, True, True]


@pytest.mark.asyncio
async def test_grade_empty_attempt(grading_service):
    """Test that an empty attempt scores zero"""
    result = await grading_service.grade_attempt([])

    assert result.total == 0
    assert result.score == 0.0


@pytest.mark.asyncio
async def test_policy_applied():
    """Test that the service policy reaches the engine"""
    service = GradingService(ValidationPolicy(numeric_tolerance=0.01))
    submission = AnswerSubmission(question_type="numerical_entry", user_answer="3.14", correct_answer="3.14159")

    check = await service.grade_answer(submission)

    assert check.correct is True


@pytest.mark.asyncio
async def test_engine_failure_raises_grading_error(grading_service, monkeypatch):
    """Test that failures outside the engine's containment become GradingError"""
    def broken_check_answer(*args, **kwargs):
        raise RuntimeError("engine unavailable")

    monkeypatch.setattr("epq_api.services.grading_service.check_answer", broken_check_answer)
    submission = AnswerSubmission(question_type="multiple_choice", user_answer="a", correct_answer="a")

    with pytest.raises(GradingError) as exc_info:
        await grading_service.grade_answer(submission)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details["question_type"] == "multiple_choice"


def test_grading_service_factory():
    """Test that the factory builds the policy from settings"""
    settings = Settings(NUMERIC_TOLERANCE=0.5, STRICT_UNKNOWN_TYPES=True, DIAGNOSTIC_SNIPPET_LENGTH=20)

    service = get_grading_service(settings)

    assert service.policy == ValidationPolicy(
        numeric_tolerance=0.5, strict_unknown_types=True, snippet_length=20
    )


@pytest.mark.asyncio
async def test_normalize_text(import_service):
    """Test normalizing one text"""
    result = await import_service.normalize_text("Pick [] and ___")

    assert result.normalized_text == "Pick ___ and ___"
    assert result.blank_positions == [1, 2]


@pytest.mark.asyncio
async def test_check_configuration(import_service):
    """Test checking blank configuration"""
    report = await import_service.check_configuration("A ___", [{"blank_id": 1}, {"blank_id": 2}])

    assert report.is_valid is False
    assert report.message == "Question has 1 blanks but 2 are configured"


@pytest.mark.asyncio
async def test_prepare_questions(import_service, sample_questions):
    """Test preparing a batch for import"""
    prepared = await import_service.prepare_questions(sample_questions)

    assert len(prepared) == 3

    first, second, third = prepared
    assert first.question["question_text"] == "The sky is ___ and grass is ___."
    assert first.question["question_number"] == 1
    assert first.blank_report.is_valid is True
    assert first.duplicate_of is None

    assert second.question["question_text"] == "Name the ___ and the ___."
    assert second.blank_report.is_valid is False
    assert "blank_configuration_mismatch" in [d.event for d in second.diagnostics]

    assert third.blank_report is None
    assert third.duplicate_of == 0
    assert third.text_hash == first.text_hash


@pytest.mark.asyncio
async def test_strict_import_rejects_mismatch(sample_questions):
    """Test that strict mode rejects a batch with mismatched blanks"""
    service = QuestionImportService(strict=True)

    with pytest.raises(BlankConfigurationError) as exc_info:
        await service.prepare_questions(sample_questions)

    assert exc_info.value.status_code == 422
    assert [q["index"] for q in exc_info.value.details["questions"]] == [1]


@pytest.mark.asyncio
async def test_strict_import_accepts_clean_batch(sample_questions):
    """Test that strict mode passes a batch without mismatches"""
    service = QuestionImportService(strict=True)

    prepared = await service.prepare_questions([sample_questions[0]])

    assert len(prepared) == 1


def test_import_service_factory():
    """Test that the factory reads STRICT_IMPORTS"""
    assert get_import_service(Settings(STRICT_IMPORTS=True)).strict is True
    assert get_import_service(Settings(STRICT_IMPORTS=False)).strict is False


@pytest.mark.asyncio
async def test_questions_without_text_are_not_duplicates(import_service):
    """Test that empty or missing text never marks a question as a repeat"""
    prepared = await import_service.prepare_questions([
        QuestionImport(question_type="drag_and_drop"),
        QuestionImport(question_type="multiple_choice"),
        QuestionImport(question_text="   ", question_type="short_answer"),
        QuestionImport(question_text="<p></p>", question_type="short_answer"),
    ])

    assert [p.duplicate_of for p in prepared] == [None, None, None, None]


@pytest.mark.asyncio
async def test_grade_answer_rejects_malformed_options(grading_service):
    """Test that an option bag the question type cannot read is a request error"""
    submission = AnswerSubmission(
        question_type="select_from_list",
        user_answer="red",
        correct_answer="red",
        options={"blanks": "nope"},
    )

    with pytest.raises(InvalidRequestError) as exc_info:
        await grading_service.grade_answer(submission)

    assert exc_info.value.status_code == 422
    assert exc_info.value.details == {"field": "options"}


@pytest.mark.asyncio
async def test_grade_answer_ignores_unread_options(grading_service):
    """Test that broken fields another question type would read are ignored"""
    submission = AnswerSubmission(
        question_type="multiple_choice",
        user_answer="A",
        correct_answer="A",
        options={"blanks": "nope", "acceptableAnswers": ["x", None]},
    )

    check = await grading_service.grade_answer(submission)

    assert check.correct is True
