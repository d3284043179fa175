"""
Choice answer evaluators.

Handles single-choice and multiple-choice questions. Both are scored
all-or-nothing: the selection has to match the answer key exactly.
"""

from __future__ import annotations

from typing import Any

from ..compare import contains
from ..evaluator import AnswerEvaluator
from ..formatting import item_entries, option_display_id
from ..normalize import as_sequence
from ..question import ChoiceQuestion, QuestionType, StudentResponse
from ..record import GradedAnswer


def same_selection(selected: list[Any], correct: list[Any]) -> bool:
    """
    Compare a selection with an answer key, ignoring order.

    Both sides must have the same length and contain each other, so a
    repeated pick such as ``[0, 0]`` never stands in for ``[0, 2]``.
    Values compare strictly: ``True`` is not option ``1``.
    An empty answer key matches nothing.
    """
    if not correct:
        return False
    return (
        len(selected) == len(correct)
        and all(contains(correct, value) for value in selected)
        and all(contains(selected, value) for value in correct)
    )


def selection_of(value: Any) -> list[Any]:
    """Student selection as a list; no answer is an empty selection."""
    return [] if value is None else as_sequence(value)


class ChoiceEvaluator(AnswerEvaluator):
    """
    Evaluator for option-based questions.

    Correctness is decided on the raw stored values (option indexes or
    ids). The formatted answer re-derives ``opt{n}`` ids from option order.
    """

    question: ChoiceQuestion

    def evaluate(self, response: StudentResponse) -> GradedAnswer:
        """Evaluate a selection against the answer key."""
        options = self.question.options
        selected = selection_of(response.value)
        correct = self.question.correct

        # Without options there is nothing that could have been selected
        is_correct = bool(options) and same_selection(selected, correct)

        return self.graded(
            response,
            is_correct,
            self.award(is_correct),
            options=item_entries("opt", options),
            selected_options=[option_display_id(value, options) for value in selected],
            correct_options=[option_display_id(value, options) for value in correct],
        )


class SingleChoiceEvaluator(ChoiceEvaluator):
    question_type = QuestionType.SINGLE_CHOICE
    default_content = "Single choice question"


class MultipleChoiceEvaluator(ChoiceEvaluator):
    question_type = QuestionType.MULTIPLE_CHOICE
    default_content = "Multiple choice question"
