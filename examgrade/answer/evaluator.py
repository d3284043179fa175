"""
Base answer evaluator framework.

Provides the abstract base class for per-type evaluators and a registry
for dispatch on :class:`~examgrade.answer.question.QuestionType`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .formatting import outcome_fields, type_label
from .question import QuestionType, StudentResponse
from .record import GradedAnswer


class AnswerEvaluator(BaseModel, ABC):
    """
    Abstract base class for answer evaluators.

    Each evaluator grades one question type against a canonical question
    model produced by the normalizer.

    Subclasses must implement:
    - evaluate(): Core evaluation logic
    - question_type: Class variable for type identification
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    # Type identifier (must be set by subclasses)
    question_type: ClassVar[QuestionType]

    # Display fallback for question_content when no question text is given
    default_content: ClassVar[str] = "Question"

    question: Any = Field(description="Canonical question model")
    total_marks: Union[int, float] = Field(default=0, description="Maximum obtainable marks")
    question_text: Optional[str] = Field(default=None, description="Display text of the question")

    @abstractmethod
    def evaluate(self, response: StudentResponse) -> GradedAnswer:
        """
        Grade the student's response.

        Args:
            response: Unwrapped student value and time spent

        Returns:
            GradedAnswer with the formatted answer for this question type
        """

    def award(self, is_correct: bool) -> Union[int, float]:
        """All-or-nothing award."""
        return self.total_marks if is_correct else 0

    @property
    def label(self) -> str:
        """Persisted question type label, e.g. ``single_choice``."""
        return type_label(self.question_type)

    @property
    def content(self) -> str:
        return self.question_text or self.default_content

    def graded(
        self,
        response: StudentResponse,
        is_correct: bool,
        points: Union[int, float],
        **fields: Any,
    ) -> GradedAnswer:
        """Assemble the record: common head, type-specific fields, common tail."""
        formatted = {
            "question_type": self.label,
            "question_content": self.content,
            **fields,
            **outcome_fields(
                is_correct=is_correct,
                question_marks=self.total_marks,
                marks_earned=points,
                time_spent=response.time_spent,
            ),
        }
        return GradedAnswer(is_correct=is_correct, points_earned=points, formatted_answer=formatted)


class EvaluatorRegistry(BaseModel):
    """
    Registry for answer evaluators.

    Provides type-based dispatch to the appropriate evaluator.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _evaluators: dict[QuestionType, type[AnswerEvaluator]] = PrivateAttr(default_factory=dict)

    def register(
        self, question_type: QuestionType, evaluator_class: type[AnswerEvaluator]
    ) -> None:
        """
        Register an evaluator for a question type.

        Raises:
            TypeError: If evaluator_class is not an AnswerEvaluator subclass
        """
        if not (isinstance(evaluator_class, type) and issubclass(evaluator_class, AnswerEvaluator)):
            raise TypeError(f"evaluator_class must be a subclass of AnswerEvaluator, got {evaluator_class}")
        self._evaluators[QuestionType(question_type)] = evaluator_class

    def get_evaluator(self, question_type: QuestionType) -> type[AnswerEvaluator] | None:
        """Evaluator class for a question type, or None if not registered."""
        return self._evaluators.get(question_type)

    def create_evaluator(
        self,
        question_type: QuestionType,
        question: Any,
        **options: Any,
    ) -> AnswerEvaluator:
        """
        Create evaluator instance for a question type.

        Raises:
            ValueError: If question type not registered
        """
        evaluator_class = self.get_evaluator(question_type)
        if evaluator_class is None:
            raise ValueError(f"No evaluator registered for type: {question_type}")

        return evaluator_class(question=question, **options)

    def get_registered_types(self) -> list[QuestionType]:
        """List of all registered question types."""
        return list(self._evaluators.keys())

    def missing_types(self) -> list[QuestionType]:
        """Known question types that have no evaluator yet."""
        return [qt for qt in QuestionType if qt not in self._evaluators]


# Global registry instance
_global_registry = EvaluatorRegistry()


def register_evaluator(
    question_type: QuestionType, evaluator_class: type[AnswerEvaluator]
) -> None:
    """Register an evaluator in the global registry."""
    _global_registry.register(question_type, evaluator_class)


def get_evaluator(question_type: QuestionType) -> type[AnswerEvaluator] | None:
    """Get evaluator from global registry."""
    return _global_registry.get_evaluator(question_type)


def create_evaluator(
    question_type: QuestionType, question: Any, **options: Any
) -> AnswerEvaluator:
    """Create evaluator instance from global registry."""
    return _global_registry.create_evaluator(question_type, question, **options)


def global_registry() -> EvaluatorRegistry:
    return _global_registry
