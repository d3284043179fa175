"""
Case study evaluator.

A case study is a scenario followed by sub-questions, each carrying its own
marks. Sub-questions are scored independently and summed. Only choice
sub-questions are marked automatically; everything else is queued for
manual review with zero credit.

Each sub-question is graded inside its own error boundary, so a malformed
sub-question costs only its own marks.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ...core.logging import get_logger
from ..compare import contains
from ..evaluator import AnswerEvaluator
from ..question import CaseStudyQuestion, QuestionType, StudentResponse, SubQuestion
from ..record import GradedAnswer
from .choice import same_selection, selection_of

logger = get_logger(__name__)

SUB_ANSWER_CONTAINER_KEYS = ("responses", "subAnswers")
SUB_ANSWER_VALUE_KEYS = ("studentAnswer", "rawAnswer")


def sub_answer_container(value: Any) -> Any:
    """The collection holding per-sub-question answers."""
    if isinstance(value, Mapping):
        for key in SUB_ANSWER_CONTAINER_KEYS:
            if value.get(key):
                return value[key]
    return value or {}


def lookup_sub_answer(container: Any, sub_id: str, index: int) -> Any:
    """Answer for a sub-question: by id first, then by position."""
    if isinstance(container, Mapping):
        for key in (sub_id, index, str(index)):
            if container.get(key) is not None:
                answer = container[key]
                break
        else:
            return None
    elif isinstance(container, (list, tuple)) and index < len(container):
        answer = container[index]
    else:
        return None

    # Some clients send [{studentAnswer: ...}, ...]
    if isinstance(answer, Mapping):
        for key in SUB_ANSWER_VALUE_KEYS:
            if key in answer:
                return answer[key]
    return answer


class CaseStudyEvaluator(AnswerEvaluator):
    """Evaluator for case-study questions."""

    question_type = QuestionType.CASE_STUDY
    default_content = "Case study scenario"

    question: CaseStudyQuestion

    def evaluate(self, response: StudentResponse) -> GradedAnswer:
        container = sub_answer_container(response.value)
        subs = self.question.sub_questions
        graded_subs = [self.grade_sub_question(sub, index, container) for index, sub in enumerate(subs)]

        total = sum(sub.marks for sub in subs)
        earned = sum(item["marks_earned"] for item in graded_subs)
        is_correct = bool(subs) and earned == total

        points = earned
        if earned > self.total_marks:
            logger.warning(
                "Sub-question marks exceed question marks; clamping",
                extra_data={"earned": earned, "question_marks": self.total_marks},
            )
            points = self.total_marks

        return self.graded(
            response,
            is_correct,
            points,
            case_title=self.question.title,
            case_description=self.question.description or self.content,
            sub_questions=graded_subs,
            total_marks=total,
        )

    def grade_sub_question(self, sub: SubQuestion, index: int, container: Any) -> dict[str, Any]:
        """Grade one sub-question; failures score zero for this sub-question only."""
        if sub.error:
            return self._failed(sub, None, sub.error)

        answer = None
        try:
            answer = lookup_sub_answer(container, sub.id, index)

            requires_review = False
            if sub.kind == QuestionType.SINGLE_CHOICE.value:
                is_correct = contains(sub.correct, answer)
                correct_answer = sub.reference_answer if sub.reference_answer is not None else "Option not specified"
            elif sub.kind == QuestionType.MULTIPLE_CHOICE.value:
                is_correct = same_selection(selection_of(answer), sub.correct)
                correct_answer = ", ".join(str(value) for value in sub.correct)
            else:
                is_correct = False
                requires_review = True
                correct_answer = sub.reference_answer or "Manual review required"

            return {
                "sub_question_id": sub.id,
                "question_type": sub.kind,
                "question": sub.prompt,
                "student_answer": "" if answer is None else answer,
                "correct_answer": correct_answer,
                "is_correct": is_correct,
                "question_marks": sub.marks,
                "marks_earned": sub.marks if is_correct else 0,
                "requires_manual_review": requires_review,
            }
        except Exception as exc:
            logger.warning(
                "Sub-question evaluation failed",
                extra_data={"sub_question_id": sub.id, "error": str(exc)},
                exc_info=True,
            )
            return self._failed(sub, answer, f"Error evaluating sub-question: {exc}")

    @staticmethod
    def _failed(sub: SubQuestion, answer: Any, error: str) -> dict[str, Any]:
        return {
            "sub_question_id": sub.id,
            "question_type": sub.kind,
            "question": sub.prompt,
            "student_answer": "" if answer is None else answer,
            "correct_answer": None,
            "is_correct": False,
            "question_marks": sub.marks,
            "marks_earned": 0,
            "requires_manual_review": False,
            "error": error,
        }
