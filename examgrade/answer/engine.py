"""
Grading entry point.

``grade_answer`` turns one (question, answer) pair into a GradedAnswer:

    caller -> normalize -> dispatch on QuestionType -> evaluator -> record

The function is total. Unknown question types produce a regular zero-credit
record, and any exception raised while normalizing, evaluating or
formatting is caught here, once, and converted into a zero-credit record
carrying the error message.
"""

from __future__ import annotations

from typing import Any, Optional

from ..core.errors import InvalidMarksError
from ..core.logging import get_logger
from . import evaluators  # noqa: F401  (registers the built-in evaluators)
from .evaluator import EvaluatorRegistry, global_registry
from .formatting import failed_answer, unsupported_answer
from .normalize import (
    build_question,
    coerce_marks,
    parse_question_data,
    time_spent_of,
    unwrap_answer,
)
from .question import QuestionType
from .record import GradedAnswer

logger = get_logger(__name__)


def _shown_marks(total_marks: Any) -> Any:
    # Unknown types are terminal, so bad marks are echoed rather than raised
    try:
        return coerce_marks(total_marks)
    except InvalidMarksError:
        return total_marks


def grade_answer(
    question_type: Any,
    question_data: Any,
    student_answer: Any,
    total_marks: Any,
    question_text: Optional[str] = None,
    registry: Optional[EvaluatorRegistry] = None,
) -> GradedAnswer:
    """
    Grade one answer.

    Args:
        question_type: Wire tag such as ``"single-choice"``
        question_data: Question definition (mapping or JSON text)
        student_answer: Raw answer, bare or wrapped as ``{rawAnswer, timeSpent}``
        total_marks: Maximum obtainable marks
        question_text: Display text used for ``question_content``
        registry: Evaluator registry (defaults to the global one)

    Returns:
        GradedAnswer; never raises
    """
    time_spent = time_spent_of(student_answer)

    try:
        parsed_type = QuestionType.parse(question_type)

        if parsed_type is None:
            logger.info(
                "Unsupported question type",
                extra_data={"question_type": repr(question_type)},
            )
            return GradedAnswer(
                is_correct=False,
                points_earned=0,
                formatted_answer=unsupported_answer(
                    question_type,
                    question_text,
                    student_answer,
                    _shown_marks(total_marks),
                    time_spent,
                ),
            )

        marks = coerce_marks(total_marks)

        question = build_question(parsed_type, parse_question_data(question_data, parsed_type.value))
        evaluator = (registry or global_registry()).create_evaluator(
            parsed_type,
            question,
            total_marks=marks,
            question_text=question_text,
        )
        result = evaluator.evaluate(unwrap_answer(student_answer))

        logger.debug(
            "Answer graded",
            extra_data={
                "question_type": parsed_type.value,
                "is_correct": result.is_correct,
                "points_earned": result.points_earned,
                "question_marks": marks,
            },
        )
        return result

    except Exception as exc:
        logger.warning(
            "Answer evaluation failed",
            extra_data={"question_type": repr(question_type), "error": str(exc)},
            exc_info=True,
        )
        # Built without validation so that containment itself cannot fail
        return GradedAnswer.model_construct(
            is_correct=False,
            points_earned=0,
            formatted_answer=failed_answer(
                question_type,
                f"Error evaluating answer: {exc}",
                student_answer,
                total_marks,
                time_spent,
            ),
        )


def calculate_score(
    question_type: Any,
    question_data: Any,
    student_answer: Any,
    total_marks: Any,
    question_text: Optional[str] = None,
) -> dict[str, Any]:
    """
    Grade one answer and return the persisted form.

    Returns:
        ``{"isCorrect": bool, "pointsEarned": number, "formattedAnswer": dict}``
    """
    return grade_answer(question_type, question_data, student_answer, total_marks, question_text).to_dict()
