"""
examgrade.answer - Answer grading engine for exam attempts

Provides:
- Normalization of legacy question definitions and wrapped answers
- Type-specific evaluators (choice, drag-drop, case study, short answer)
- Display-ready, auditable graded answer records
- Attempt-level aggregation with PASS/FAIL grading
"""

from .engine import calculate_score, grade_answer
from .evaluator import AnswerEvaluator, EvaluatorRegistry
from .graders import AttemptGrader, AttemptResult, AttemptSummary, QuestionSubmission
from .question import QuestionType, StudentResponse
from .record import GradedAnswer

__all__ = [
    "grade_answer",
    "calculate_score",
    "GradedAnswer",
    "QuestionType",
    "StudentResponse",
    "AnswerEvaluator",
    "EvaluatorRegistry",
    "AttemptGrader",
    "AttemptResult",
    "AttemptSummary",
    "QuestionSubmission",
]
