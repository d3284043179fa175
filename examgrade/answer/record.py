"""
Graded answer record.

This module provides the GradedAnswer class, the immutable outcome of
grading one question of one attempt:
- Correctness flag
- Points earned (partial credit only for short answers)
- The formatted answer persisted for display and audit
"""

from __future__ import annotations

import copy
import math
from numbers import Real
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator


class GradedAnswer(BaseModel):
    """
    Result of grading one answer.

    Serialized with the camelCase keys the submission route persists:
    ``{isCorrect, pointsEarned, formattedAnswer}``.

    Attributes:
        is_correct: Whether the answer earned full marks as a correct answer
        points_earned: Marks awarded, between 0 and the question's marks
        formatted_answer: Self-contained, display-ready answer payload
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_correct: StrictBool = Field(default=False, alias="isCorrect")
    points_earned: Union[int, float] = Field(default=0, alias="pointsEarned")
    formatted_answer: dict[str, Any] = Field(default_factory=dict, alias="formattedAnswer")

    @field_validator("points_earned")
    @classmethod
    def validate_points(cls, v: Union[int, float]) -> Union[int, float]:
        """Points must be a finite, non-negative number."""
        if not math.isfinite(v) or v < 0:
            raise ValueError("points_earned must be a non-negative number")
        return v

    @model_validator(mode="after")
    def validate_within_marks(self) -> GradedAnswer:
        """Points may never exceed the question's marks."""
        marks = self.formatted_answer.get("question_marks")
        if (
            isinstance(marks, Real)
            and not isinstance(marks, bool)
            and marks >= 0
            and self.points_earned > marks
        ):
            raise ValueError(f"points_earned {self.points_earned} exceeds question marks {marks}")
        return self

    @property
    def error(self) -> str | None:
        """Error message recorded for unsupported or failed evaluations."""
        return self.formatted_answer.get("error")

    @property
    def requires_manual_review(self) -> bool:
        """Whether a human still has to mark (part of) this answer."""
        if self.formatted_answer.get("requires_manual_review"):
            return True
        return any(
            sub.get("requires_manual_review")
            for sub in self.formatted_answer.get("sub_questions", [])
        )

    def is_partial_credit(self) -> bool:
        """Check if answer received some but not full credit."""
        return not self.is_correct and self.points_earned > 0

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for persistence.

        Returns:
            Fresh ``{isCorrect, pointsEarned, formattedAnswer}`` dict; the
            record itself is never shared with the caller.
        """
        return {
            "isCorrect": self.is_correct,
            "pointsEarned": self.points_earned,
            "formattedAnswer": copy.deepcopy(self.formatted_answer),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GradedAnswer:
        """
        Create GradedAnswer from a persisted dictionary.

        Accepts both the camelCase keys written by :meth:`to_dict` and
        snake_case field names.
        """
        return cls(
            is_correct=data.get("isCorrect", data.get("is_correct", False)),
            points_earned=data.get("pointsEarned", data.get("points_earned", 0)),
            formatted_answer=data.get("formattedAnswer", data.get("formatted_answer", {})),
        )
