"""
Shared pytest fixtures and utilities for the grading engine tests.

This module provides:
- Sample question definitions in their stored (legacy) shapes
- A checker for the invariants every graded record must satisfy
- Helpers for testing Pydantic validation
"""

import json
from numbers import Real
from typing import Any

import pytest
from pydantic import BaseModel, ValidationError

from examgrade.answer.record import GradedAnswer

COMMON_FIELDS = ("question_type", "is_correct", "question_marks", "marks_earned", "time_taken_to_answer")


@pytest.fixture
def single_choice_data() -> dict[str, Any]:
    """Single-choice definition with the answer key stored as an option index."""
    return {
        "options": ["Paris", "London", "Berlin", "Madrid"],
        "correctAnswer": 0,
    }


@pytest.fixture
def multiple_choice_data() -> dict[str, Any]:
    """Multiple-choice definition with two correct options."""
    return {
        "options": ["2", "3", "4", "5"],
        "correctAnswers": [0, 2],
    }


@pytest.fixture
def matching_data() -> dict[str, Any]:
    """Matching drag-drop definition."""
    return {
        "type": "matching",
        "leftItems": ["Dog", "Cat", "Cow"],
        "rightItems": ["Bark", "Meow", "Moo"],
        "correctPairs": [
            {"drag_item": "Dog", "drop_target": "Bark"},
            {"dragItem": "Cat", "dropTarget": "Meow"},
            {"drag_item": "Cow", "drop_target": "Moo"},
        ],
    }


@pytest.fixture
def case_study_data() -> dict[str, Any]:
    """Case study with a single-choice, a multiple-choice and a text sub-question."""
    return {
        "caseTitle": "Retail expansion",
        "caseDescription": "A retailer considers opening a second store.",
        "subQuestions": [
            {
                "id": "sq1",
                "type": "single-choice",
                "question": "Which market is larger?",
                "marks": 5,
                "correctAnswer": "north",
            },
            {
                "id": "sq2",
                "type": "multiple-choice",
                "question": "Which risks apply?",
                "marks": 5,
                "correctAnswers": ["rent", "staff"],
            },
            {
                "id": "sq3",
                "type": "text",
                "question": "Justify your recommendation.",
                "marks": 10,
                "sampleAnswer": "Open in the north.",
            },
        ],
    }


@pytest.fixture
def assert_well_formed():
    """Assert the invariants every graded record satisfies."""
    def _assert(record: GradedAnswer, total_marks: Real) -> GradedAnswer:
        assert isinstance(record, GradedAnswer)
        assert isinstance(record.is_correct, bool)
        assert 0 <= record.points_earned <= total_marks

        formatted = record.formatted_answer
        for field in COMMON_FIELDS:
            assert field in formatted, f"formatted answer lacks '{field}'"
        assert formatted["is_correct"] == record.is_correct
        assert formatted["marks_earned"] == record.points_earned

        # Persisted as JSON text by the submission route
        json.dumps(record.to_dict())
        return record

    return _assert


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e["loc"] and e["loc"][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation
