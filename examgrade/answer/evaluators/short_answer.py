"""
Short answer evaluator.

Scores free text by keyword coverage with three partial-credit bands.
Answers to questions without keywords are left for manual review.
"""

from __future__ import annotations

from typing import Any

from ..evaluator import AnswerEvaluator
from ..question import QuestionType, ShortAnswerQuestion, StudentResponse
from ..record import GradedAnswer

# Partial-credit bands on the keyword ratio
FULL_CREDIT_RATIO = 0.8
HALF_CREDIT_RATIO = 0.5
HALF_CREDIT_FRACTION = 0.5


def answer_text(value: Any) -> str:
    """Student answer as text; empty answers become ``""``."""
    if isinstance(value, str):
        return value
    if not value:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(answer_text(item) for item in value)
    return str(value)


def matched_keywords(keywords: list[str], text: str) -> list[str]:
    """Keywords contained in ``text``, compared case-insensitively."""
    lowered = text.lower()
    return [keyword for keyword in keywords if keyword.lower() in lowered]


def credit_band(ratio: float) -> tuple[bool, float]:
    """
    Map a keyword ratio onto (is_correct, fraction of marks).

    >>> credit_band(0.8)
    (True, 1.0)
    >>> credit_band(0.5)
    (False, 0.5)
    >>> credit_band(0.49)
    (False, 0.0)
    """
    if ratio >= FULL_CREDIT_RATIO:
        return True, 1.0
    if ratio >= HALF_CREDIT_RATIO:
        return False, HALF_CREDIT_FRACTION
    return False, 0.0


class ShortAnswerEvaluator(AnswerEvaluator):
    """Evaluator for short free-text answers."""

    question_type = QuestionType.SHORT_ANSWER
    default_content = "Short answer question"

    question: ShortAnswerQuestion

    def evaluate(self, response: StudentResponse) -> GradedAnswer:
        keywords = self.question.keywords
        text = answer_text(response.value)
        matched = matched_keywords(keywords, text)

        if keywords:
            ratio = len(matched) / len(keywords)
            is_correct, fraction = credit_band(ratio)
            if fraction == 1.0:
                points = self.total_marks
            elif fraction:
                points = self.total_marks * fraction
            else:
                points = 0
        else:
            ratio = 0.0
            is_correct, points = False, 0

        return self.graded(
            response,
            is_correct,
            points,
            student_answer=text,
            correct_answer=self.question.reference_answer,
            keywords_matched=len(matched),
            total_keywords=len(keywords),
            matched_keywords=matched,
            keyword_ratio=ratio,
            requires_manual_review=not keywords,
        )
