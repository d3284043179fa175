"""
Canonical question and response models.

Question definitions arrive with many legacy spellings of the same field.
The normalizer resolves them once into the frozen models below; evaluators
only ever see these canonical shapes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    """Known question variants, keyed by their wire tag."""

    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    DRAG_DROP = "drag-drop"
    CASE_STUDY = "case-study"
    SHORT_ANSWER = "short-answer"

    @classmethod
    def parse(cls, tag: Any) -> Optional[QuestionType]:
        """Return the variant for a wire tag, or None for unknown tags."""
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            return None
        tag = _TAG_ALIASES.get(tag, tag)
        try:
            return cls(tag)
        except ValueError:
            return None


_TAG_ALIASES = {"drag-and-drop": "drag-drop"}


class DragDropFormat(str, Enum):
    """Drag-drop sub-formats, selected by the ``type`` field of the payload."""

    MATCHING = "matching"
    ORDERING = "ordering"
    MAPPING = "mapping"


class CanonicalModel(BaseModel):
    """Frozen base for canonical shapes."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ChoiceQuestion(CanonicalModel):
    """Single- or multiple-choice question."""

    question_type: QuestionType
    options: list[str] = Field(default_factory=list, description="Option texts in display order")
    correct: list[Any] = Field(default_factory=list, description="Raw correct values (indexes or ids)")


class MatchingQuestion(CanonicalModel):
    """Drag-drop question pairing left items with right items."""

    left_items: list[Any] = Field(default_factory=list)
    right_items: list[Any] = Field(default_factory=list)
    correct_pairs: list[tuple[Any, Any]] = Field(
        default_factory=list, description="(drag text, drop text) pairs"
    )


class OrderingQuestion(CanonicalModel):
    """Drag-drop question asking for an ordering of items."""

    correct_order: list[Any] = Field(default_factory=list)


class MappingQuestion(CanonicalModel):
    """Generic drag-drop question mapping item keys to target values."""

    correct_mappings: dict[str, Any] = Field(default_factory=dict)


class SubQuestion(CanonicalModel):
    """One sub-question of a case study."""

    id: str
    kind: str = ""
    prompt: str = ""
    marks: Union[int, float] = 1
    correct: list[Any] = Field(default_factory=list)
    reference_answer: Any = None
    error: Optional[str] = Field(default=None, description="Set when the definition is malformed")


class CaseStudyQuestion(CanonicalModel):
    """Case study: a scenario with independently scored sub-questions."""

    title: str = "Case Study"
    description: Optional[str] = None
    sub_questions: list[SubQuestion] = Field(default_factory=list)


class ShortAnswerQuestion(CanonicalModel):
    """Free-text question scored by keyword coverage."""

    keywords: list[str] = Field(default_factory=list)
    reference_answer: str = ""


DragDropQuestion = Union[MatchingQuestion, OrderingQuestion, MappingQuestion]

Question = Union[
    ChoiceQuestion,
    MatchingQuestion,
    OrderingQuestion,
    MappingQuestion,
    CaseStudyQuestion,
    ShortAnswerQuestion,
]


class StudentResponse(CanonicalModel):
    """Effective student value plus the time spent answering."""

    value: Any = None
    time_spent: Any = 0
