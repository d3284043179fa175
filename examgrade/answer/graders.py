"""
Attempt graders.

Grade every question of an exam attempt and combine the individual
GradedAnswers into the attempt result: obtained marks, percentage and a
PASS/FAIL grade.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import settings
from ..core.errors import InvalidMarksError
from ..core.logging import get_logger
from .engine import grade_answer
from .normalize import coerce_marks
from .record import GradedAnswer

logger = get_logger(__name__)

PASS = "PASS"
FAIL = "FAIL"


class QuestionSubmission(BaseModel):
    """
    One question of an attempt together with the student's answer.

    Accepts the camelCase keys used by the submission payloads as well as
    the field names. ``student_answer=None`` means the question was not
    answered.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    question_id: Any = Field(default=None, alias="questionId")
    question_type: Any = Field(default=None, alias="questionType")
    question_data: Any = Field(default=None, alias="questionData")
    marks: Any = 0
    question_text: Optional[str] = Field(default=None, alias="questionText")
    student_answer: Any = Field(default=None, alias="studentAnswer")

    @property
    def answered(self) -> bool:
        return self.student_answer is not None


class QuestionOutcome(BaseModel):
    """Grading outcome of one submission; ``graded`` is None when unanswered."""

    model_config = ConfigDict(frozen=True)

    question_id: Any = None
    graded: Optional[GradedAnswer] = None


class AttemptSummary(BaseModel):
    """Totals of an attempt, as stored in the results table."""

    model_config = ConfigDict(frozen=True)

    total_questions: int = 0
    answered: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    unanswered: int = 0
    total_marks: Union[int, float] = 0
    obtained_marks: Union[int, float] = 0
    percentage: float = 0.0
    grade: str = FAIL
    passed: bool = False


class AttemptResult(BaseModel):
    """Per-question outcomes plus the attempt summary."""

    model_config = ConfigDict(frozen=True)

    outcomes: list[QuestionOutcome] = Field(default_factory=list)
    summary: AttemptSummary = Field(default_factory=AttemptSummary)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [
                {
                    "questionId": outcome.question_id,
                    **(outcome.graded.to_dict() if outcome.graded else {"answered": False}),
                }
                for outcome in self.outcomes
            ],
            "summary": self.summary.model_dump(),
        }


def _possible_marks(submission: QuestionSubmission) -> Union[int, float]:
    try:
        return coerce_marks(submission.marks)
    except InvalidMarksError as exc:
        logger.warning(
            "Ignoring invalid marks in attempt total",
            extra_data={"question_id": submission.question_id, "error": exc.message},
        )
        return 0


class AttemptGrader(BaseModel):
    """
    Grades a whole attempt.

    Unanswered questions are not graded but still count towards the
    attempt's total marks.
    """

    model_config = ConfigDict(frozen=True)

    passing_percentage: float = Field(
        default_factory=lambda: settings.PASSING_PERCENTAGE,
        ge=0.0,
        le=100.0,
        description="Minimum percentage for a PASS grade",
    )

    def grade(
        self, submissions: Iterable[Union[QuestionSubmission, Mapping[str, Any]]]
    ) -> AttemptResult:
        """
        Grade every submission and summarize the attempt.

        Args:
            submissions: QuestionSubmission objects or plain dicts

        Returns:
            AttemptResult with one outcome per submission, in input order
        """
        items = [
            item if isinstance(item, QuestionSubmission) else QuestionSubmission.model_validate(item)
            for item in submissions
        ]

        outcomes = [
            QuestionOutcome(
                question_id=item.question_id,
                graded=grade_answer(
                    item.question_type,
                    item.question_data,
                    item.student_answer,
                    item.marks,
                    item.question_text,
                ) if item.answered else None,
            )
            for item in items
        ]

        summary = self.summarize(outcomes, sum(_possible_marks(item) for item in items))
        logger.info(
            "Attempt graded",
            extra_data={
                "total_questions": summary.total_questions,
                "obtained_marks": summary.obtained_marks,
                "percentage": summary.percentage,
                "grade": summary.grade,
            },
        )
        return AttemptResult(outcomes=outcomes, summary=summary)

    def summarize(
        self, outcomes: list[QuestionOutcome], total_marks: Union[int, float]
    ) -> AttemptSummary:
        """
        Combine question outcomes into attempt totals.

        Args:
            outcomes: One outcome per question of the attempt
            total_marks: Marks obtainable across all questions

        Returns:
            AttemptSummary; percentage is 0 when nothing can be scored
        """
        graded = [outcome.graded for outcome in outcomes if outcome.graded is not None]
        correct = sum(1 for answer in graded if answer.is_correct)
        obtained = round(sum(answer.points_earned for answer in graded), 2)
        percentage = round(obtained / total_marks * 100, 2) if total_marks > 0 else 0.0
        passed = percentage >= self.passing_percentage

        return AttemptSummary(
            total_questions=len(outcomes),
            answered=len(graded),
            correct_answers=correct,
            wrong_answers=len(graded) - correct,
            unanswered=len(outcomes) - len(graded),
            total_marks=total_marks,
            obtained_marks=obtained,
            percentage=percentage,
            grade=PASS if passed else FAIL,
            passed=passed,
        )
