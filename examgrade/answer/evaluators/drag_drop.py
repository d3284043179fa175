"""
Drag-and-drop answer evaluator.

Handles the three stored sub-formats:
- matching: left items dropped onto right items
- ordering: items arranged into a sequence
- mapping: item keys assigned to target values

All three are scored all-or-nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from ..compare import contains, same_value
from ..evaluator import AnswerEvaluator
from ..formatting import item_entries, position_id
from ..question import (
    MappingQuestion,
    MatchingQuestion,
    OrderingQuestion,
    QuestionType,
    StudentResponse,
)
from ..record import GradedAnswer


def _distinct(values: list[Any]) -> list[Any]:
    # Values may be unhashable, so no set()
    seen: list[Any] = []
    for value in values:
        if not contains(seen, value):
            seen.append(value)
    return seen


class DragDropEvaluator(AnswerEvaluator):
    """Evaluator for drag-and-drop questions."""

    question_type = QuestionType.DRAG_DROP

    question: Union[MatchingQuestion, OrderingQuestion, MappingQuestion]

    @property
    def content(self) -> str:
        if self.question_text:
            return self.question_text
        if isinstance(self.question, MatchingQuestion):
            return "Drag and drop matching question"
        if isinstance(self.question, OrderingQuestion):
            return "Drag and drop ordering question"
        return "Drag and drop question"

    def evaluate(self, response: StudentResponse) -> GradedAnswer:
        if isinstance(self.question, MatchingQuestion):
            return self.evaluate_matching(response)
        if isinstance(self.question, OrderingQuestion):
            return self.evaluate_ordering(response)
        return self.evaluate_mapping(response)

    def evaluate_matching(self, response: StudentResponse) -> GradedAnswer:
        """Compare the set of (drag, drop) pairs, order irrelevant."""
        left = self.question.left_items
        right = self.question.right_items
        correct = self.question.correct_pairs

        student: list[tuple[Any, Any]] = []
        if isinstance(response.value, Mapping):
            student = [
                (drag, drop)
                for drag, drop in response.value.items()
                if contains(left, drag) and contains(right, drop)
            ]

        is_correct = (
            bool(correct)
            and len(correct) == len(student)
            and all(contains(student, pair) for pair in correct)
            and all(contains(correct, pair) for pair in student)
        )

        def as_ids(pairs: list[tuple[Any, Any]]) -> list[dict[str, Any]]:
            return [
                {"drag_id": position_id("drag", left, drag), "drop_id": position_id("drop", right, drop)}
                for drag, drop in pairs
            ]

        return self.graded(
            response,
            is_correct,
            self.award(is_correct),
            drag_items=item_entries("drag", left),
            drop_targets=item_entries("drop", right),
            student_pairs=as_ids(student),
            correct_pairs=as_ids(correct),
        )

    def evaluate_ordering(self, response: StudentResponse) -> GradedAnswer:
        """Position-by-position comparison of the arranged sequence."""
        correct = self.question.correct_order
        value = response.value
        student = list(value) if isinstance(value, (list, tuple)) else []

        is_correct = bool(correct) and same_value(student, correct)

        return self.graded(
            response,
            is_correct,
            self.award(is_correct),
            drag_items=item_entries("drag", correct),
            student_order=student,
            correct_order=list(correct),
        )

    def evaluate_mapping(self, response: StudentResponse) -> GradedAnswer:
        """Every expected key must map to its expected target."""
        correct = self.question.correct_mappings
        value = response.value
        student = {str(key): target for key, target in value.items()} if isinstance(value, Mapping) else {}

        results: dict[str, dict[str, Any]] = {}
        for key, expected in correct.items():
            placed = key in student and same_value(student[key], expected)
            results[key] = {
                "assigned_target": student.get(key),
                "correct_target": expected,
                "is_correct": placed,
            }
        placements = sum(1 for result in results.values() if result["is_correct"])

        # No partial credit even though placements are counted
        is_correct = bool(correct) and placements == len(correct)

        items = list(correct) + [key for key in student if key not in correct]
        targets = _distinct(list(correct.values()) + list(student.values()))

        def as_ids(mapping: dict[str, Any]) -> list[dict[str, Any]]:
            return [
                {"drag_id": position_id("drag", items, key), "drop_id": position_id("drop", targets, target)}
                for key, target in mapping.items()
            ]

        return self.graded(
            response,
            is_correct,
            self.award(is_correct),
            drag_items=item_entries("drag", items),
            drop_targets=item_entries("drop", targets),
            student_pairs=as_ids(student),
            correct_pairs=as_ids(correct),
            drag_drop_results=results,
            correct_placements=placements,
            total_placements=len(correct),
        )
