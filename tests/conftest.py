"""
Shared pytest fixtures and utilities for testing the epq engine.

This module provides:
- A diagnostic collector to observe what the engine reports
- Utilities for testing Pydantic validation
- Sample option bags as stored with question versions
"""

import pytest
from typing import Any, Type
from pydantic import BaseModel, ValidationError

from epq.answer import DiagnosticCollector


@pytest.fixture
def collector() -> DiagnosticCollector:
    """Observer that records every diagnostic emitted during a test."""
    return DiagnosticCollector()


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that validating data against a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to pass to model
            expected_field: Expected field name in error (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class.model_validate(data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation


@pytest.fixture
def two_dropdown_options() -> dict[str, Any]:
    """Select-from-list options with two configured blanks."""
    return {
        "blanks": [
            {"blank_id": 1, "answer_choices": ["choice 1", "choice 2"], "correct_answer": "choice 1"},
            {"blank_id": 2, "answer_choices": ["choice 3", "choice 4"], "correct_answer": "choice 3"},
        ]
    }


@pytest.fixture
def zone_answer() -> str:
    """Drag-and-drop correct answer with two zones."""
    return '{"zone_1":["Item 1","Item 2"],"zone_2":["Item 3","Item 4"]}'
