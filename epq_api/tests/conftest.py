"""
Pytest configuration and fixtures.

Provides shared fixtures for testing.
"""

import pytest

from fastapi.testclient import TestClient

from epq.answer import ValidationPolicy
from epq_api.main import app
from epq_api.models import AnswerSubmission, QuestionImport
from epq_api.services import GradingService, QuestionImportService


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def grading_service() -> GradingService:
    """Grading service with default policy"""
    return GradingService(ValidationPolicy())


@pytest.fixture
def import_service() -> QuestionImportService:
    """Lenient import service"""
    return QuestionImportService(strict=False)


@pytest.fixture
def sample_submissions() -> list[AnswerSubmission]:
    """A practice attempt with one wrong answer out of four"""
    return [
        AnswerSubmission(question_id="q1", question_type="multiple_choice", user_answer="b", correct_answer="B"),
        AnswerSubmission(question_id="q2", question_type="numerical_entry", user_answer="3.14", correct_answer="3.14159"),
        AnswerSubmission(
            question_id="q3",
            question_type="multiple_response",
            user_answer='["Option C","Option A"]',
            correct_answer=["Option A", "Option C"],
        ),
        AnswerSubmission(
            question_id="q4",
            question_type="select_from_list",
            user_answer='{"1":"red","2":"blue"}',
            correct_answer="",
            options={
                "blanks": [
                    {"blank_id": 1, "answer_choices": ["red", "green"], "correct_answer": "red"},
                    {"blank_id": 2, "answer_choices": ["blue", "yellow"], "correct_answer": "blue"},
                ]
            },
        ),
    ]


@pytest.fixture
def sample_questions() -> list[QuestionImport]:
    """Question versions as found in an import file"""
    return [
        QuestionImport(
            question_text="The sky is blank_1 and grass is blank_2.",
            question_type="select_from_list",
            blanks=[{"blank_id": 1}, {"blank_id": 2}],
            question_number=1,
        ),
        QuestionImport(
            question_text="Name the [ ] and the [ ].",
            question_type="short_answer",
            blanks=[{"blank_id": 1}],
        ),
        QuestionImport(
            question_text="<p>The sky is blank_1 and grass is blank_2.</p>",
            question_type="select_from_list",
        ),
    ]
