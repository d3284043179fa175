"""
Result formatting.

Builds the ``formattedAnswer`` payload that is persisted and later drives
the result-detail view. Display identifiers (``opt1``, ``drag2``,
``drop3`` ...) are derived from the current order of items and are only
ever generated here; evaluators decide correctness on raw values.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from .compare import index_of
from .question import QuestionType

QUESTION_TYPE_LABELS = {
    QuestionType.SINGLE_CHOICE: "single_choice",
    QuestionType.MULTIPLE_CHOICE: "multiple_choice",
    QuestionType.DRAG_DROP: "drag_and_drop",
    QuestionType.CASE_STUDY: "case_study",
    QuestionType.SHORT_ANSWER: "short_answer",
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_OPTION_ID = re.compile(r"opt\d+")


def parse_int(value: Any) -> Optional[int]:
    """
    Integer prefix of a value, or None when there is none.

    Mirrors how option indexes were read by the portal: ``"2"`` and
    ``"2abc"`` give 2, ``2.7`` gives 2, ``"opt1"`` and ``True`` give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def item_id(prefix: str, position: int) -> str:
    """1-based display id, e.g. ``item_id("opt", 1) == "opt1"``."""
    return f"{prefix}{position}"


def item_entries(prefix: str, items: list[Any]) -> list[dict[str, Any]]:
    """``[{id, text}]`` entries with ids generated from position."""
    return [{"id": item_id(prefix, index + 1), "text": item} for index, item in enumerate(items)]


def option_display_id(value: Any, options: list[str]) -> str:
    """Map a raw selected/correct value onto the generated option ids."""
    index = parse_int(value)
    if index is not None:
        return item_id("opt", index + 1)
    if isinstance(value, str):
        if _OPTION_ID.fullmatch(value):
            return value
        if value in options:
            return item_id("opt", options.index(value) + 1)
    return str(value)


def position_id(prefix: str, items: list[Any], value: Any) -> Optional[str]:
    """Display id of ``value`` by its position in ``items``; None when absent."""
    index = index_of(items, value)
    return None if index is None else item_id(prefix, index + 1)


def type_label(question_type: Any) -> Any:
    """Persisted label of a question type; unknown tags pass through."""
    parsed = QuestionType.parse(question_type)
    return QUESTION_TYPE_LABELS[parsed] if parsed else question_type


def outcome_fields(
    *,
    is_correct: bool,
    question_marks: Any,
    marks_earned: Any,
    time_spent: Any,
) -> dict[str, Any]:
    """Trailing fields shared by every formatted answer."""
    return {
        "is_correct": is_correct,
        "question_marks": question_marks,
        "marks_earned": marks_earned,
        "time_taken_to_answer": time_spent,
    }


def unsupported_answer(
    question_type: Any,
    question_text: Optional[str],
    raw_answer: Any,
    question_marks: Any,
    time_spent: Any,
) -> dict[str, Any]:
    """Formatted answer for a question type no evaluator handles."""
    return {
        "question_type": question_type,
        "question_content": question_text or "Unknown question type",
        "student_answer": raw_answer,
        "error": f"Unsupported question type: {question_type}",
        **outcome_fields(
            is_correct=False,
            question_marks=question_marks,
            marks_earned=0,
            time_spent=time_spent,
        ),
    }


def failed_answer(
    question_type: Any,
    error: str,
    raw_answer: Any,
    question_marks: Any,
    time_spent: Any,
) -> dict[str, Any]:
    """Formatted answer for an evaluation that raised."""
    return {
        "question_type": question_type,
        "error": error,
        "student_answer": raw_answer,
        **outcome_fields(
            is_correct=False,
            question_marks=question_marks,
            marks_earned=0,
            time_spent=time_spent,
        ),
    }
