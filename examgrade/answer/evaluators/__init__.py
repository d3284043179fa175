"""
Type-specific answer evaluators.

Each module implements an evaluator for one question type; importing this
package registers all of them in the global registry.
"""

from ..evaluator import register_evaluator
from .case_study import CaseStudyEvaluator
from .choice import ChoiceEvaluator, MultipleChoiceEvaluator, SingleChoiceEvaluator
from .drag_drop import DragDropEvaluator
from .short_answer import ShortAnswerEvaluator

for _evaluator in (
    SingleChoiceEvaluator,
    MultipleChoiceEvaluator,
    DragDropEvaluator,
    CaseStudyEvaluator,
    ShortAnswerEvaluator,
):
    register_evaluator(_evaluator.question_type, _evaluator)
del _evaluator

__all__ = [
    "ChoiceEvaluator",
    "SingleChoiceEvaluator",
    "MultipleChoiceEvaluator",
    "DragDropEvaluator",
    "CaseStudyEvaluator",
    "ShortAnswerEvaluator",
]
