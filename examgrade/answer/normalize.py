"""
Input normalization.

Question definitions have been stored under several generations of field
names (``correctAnswer`` / ``correct_answer`` / ``correctOptions`` ...), and
student answers arrive either bare or wrapped as ``{rawAnswer, timeSpent}``.
This module resolves all of that exactly once, producing the canonical
models from :mod:`examgrade.answer.question`.

Missing collections default to empty ones. Values of the wrong shape raise
:class:`~examgrade.core.errors.QuestionDataError`, which the engine turns into
a zero-credit record.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from decimal import Decimal
from numbers import Real
from typing import Any, Callable, Iterable, Optional, Union

from ..core.errors import AmbiguousItemError, GradingError, InvalidMarksError, QuestionDataError
from ..core.logging import get_logger
from .compare import contains
from .question import (
    CaseStudyQuestion,
    ChoiceQuestion,
    DragDropFormat,
    MappingQuestion,
    MatchingQuestion,
    OrderingQuestion,
    Question,
    QuestionType,
    ShortAnswerQuestion,
    StudentResponse,
    SubQuestion,
)

logger = get_logger(__name__)

# Legacy key names, highest priority first
SINGLE_CHOICE_KEYS = ("correctAnswer", "correct_answer", "correctOptions", "correctAnswers")
MULTIPLE_CHOICE_KEYS = ("correctAnswers", "correct_answers", "correctOptions", "correctAnswer")
SUB_SINGLE_CHOICE_KEYS = ("correctAnswer", "correct_answer")
SUB_MULTIPLE_CHOICE_KEYS = ("correctAnswers", "correct_answers")
SUB_REFERENCE_KEYS = ("correctAnswer", "correct_answer", "sampleAnswer")
SUB_TYPE_KEYS = ("type", "question_type", "questionType")
SUB_PROMPT_KEYS = ("question", "questionText")
SHORT_ANSWER_REFERENCE_KEYS = ("correctAnswer", "sample_answer", "sampleAnswer")
DRAG_ITEM_KEYS = ("drag_item", "dragItem")
DROP_TARGET_KEYS = ("drop_target", "dropTarget")
ORDER_KEYS = ("correctOrder", "items")
CASE_TITLE_KEYS = ("caseTitle", "title")
CASE_DESCRIPTION_KEYS = ("caseDescription", "description")

Marks = Union[int, float]


def first_present(data: Mapping, keys: Iterable[str], default: Any = None) -> Any:
    """Return the value of the first key that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def first_filled(data: Mapping, keys: Iterable[str], default: Any = None) -> Any:
    """Return the first non-empty value (empty strings and zeros are skipped)."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def as_sequence(value: Any) -> list[Any]:
    """Coerce a scalar into a one-element list; lists and tuples are copied."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def list_field(data: Mapping, key: str) -> list[Any]:
    """Read a list-valued field; absent means empty."""
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    raise QuestionDataError(f"Field '{key}' must be a list, got {type(value).__name__}")


def coerce_marks(value: Any, default: Marks = 0) -> Marks:
    """
    Validate a marks value.

    Numeric text and other real number types (``Decimal`` from NUMERIC
    columns) are converted. Integral values become int so that serialized
    records show ``5`` rather than ``5.0``.

    Raises:
        InvalidMarksError: for negative, non-finite or non-numeric marks
    """
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidMarksError(value)

    number = value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidMarksError(value) from None
    elif isinstance(value, (Decimal, Real)) and not isinstance(value, (int, float)):
        try:
            number = float(value)
        except (ValueError, OverflowError):
            raise InvalidMarksError(value) from None

    if not isinstance(number, (int, float)) or not math.isfinite(number) or number < 0:
        raise InvalidMarksError(value)
    if isinstance(number, float) and number.is_integer() and not isinstance(value, float):
        return int(number)
    return number


def parse_question_data(raw: Any, question_type: Optional[str] = None) -> dict[str, Any]:
    """
    Decode a stored question definition into a plain dict.

    Args:
        raw: Mapping, JSON text, or None
        question_type: Tag used only for error details

    Raises:
        QuestionDataError: If the text is not JSON or does not encode an object
    """
    if raw is None:
        return {}
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            raise QuestionDataError(f"Question data is not valid JSON: {exc.msg}", question_type) from exc
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise QuestionDataError(
            f"Question data must be an object, got {type(raw).__name__}", question_type
        )
    return dict(raw)


def unwrap_answer(raw: Any) -> StudentResponse:
    """Split a possibly wrapped answer into its effective value and time spent."""
    if isinstance(raw, Mapping):
        value = raw["rawAnswer"] if "rawAnswer" in raw else raw
        return StudentResponse(value=value, time_spent=raw.get("timeSpent") or 0)
    return StudentResponse(value=raw, time_spent=0)


def time_spent_of(raw: Any) -> Any:
    """Time spent as carried on the raw answer; never raises."""
    if isinstance(raw, Mapping):
        return raw.get("timeSpent") or 0
    return 0


def option_text(option: Any, position: int) -> str:
    """Display text of an option given as a string or an object with ``text``."""
    if isinstance(option, str):
        return option
    if isinstance(option, Mapping) and option.get("text"):
        return str(option["text"])
    return f"Option {position}"


def _flagged_options(options: list[Any]) -> list[int]:
    return [
        index
        for index, option in enumerate(options)
        if isinstance(option, Mapping) and option.get("isCorrect")
    ]


def _require_unique(items: list[Any], side: str) -> None:
    seen: list[Any] = []
    for item in items:
        if contains(seen, item):
            raise AmbiguousItemError(side, item)
        seen.append(item)


def build_choice(question_type: QuestionType, data: Mapping) -> ChoiceQuestion:
    """Canonical single- or multiple-choice question."""
    raw_options = list_field(data, "options")
    keys = SINGLE_CHOICE_KEYS if question_type is QuestionType.SINGLE_CHOICE else MULTIPLE_CHOICE_KEYS

    correct = first_present(data, keys)
    if correct is None:
        correct = _flagged_options(raw_options)

    return ChoiceQuestion(
        question_type=question_type,
        options=[option_text(option, index + 1) for index, option in enumerate(raw_options)],
        correct=as_sequence(correct),
    )


def _pair(raw_pair: Any) -> tuple[Any, Any]:
    if isinstance(raw_pair, Mapping):
        return first_filled(raw_pair, DRAG_ITEM_KEYS), first_filled(raw_pair, DROP_TARGET_KEYS)
    if isinstance(raw_pair, (list, tuple)) and len(raw_pair) == 2:
        return raw_pair[0], raw_pair[1]
    raise QuestionDataError(f"Correct pair must be an object or a 2-item list, got {raw_pair!r}")


def build_matching(data: Mapping) -> MatchingQuestion:
    left_items = list_field(data, "leftItems")
    right_items = list_field(data, "rightItems")
    _require_unique(left_items, "left")
    _require_unique(right_items, "right")
    return MatchingQuestion(
        left_items=left_items,
        right_items=right_items,
        correct_pairs=[_pair(pair) for pair in list_field(data, "correctPairs")],
    )


def build_ordering(data: Mapping) -> OrderingQuestion:
    order = first_present(data, ORDER_KEYS, default=[])
    if not isinstance(order, (list, tuple)):
        raise QuestionDataError(f"Correct order must be a list, got {type(order).__name__}")
    return OrderingQuestion(correct_order=list(order))


def build_mapping(data: Mapping) -> MappingQuestion:
    mappings = data.get("correctMappings")
    if mappings is None:
        # Older definitions stored the answer key on the targets themselves
        mappings = {
            target["correctItemId"]: target.get("id")
            for target in list_field(data, "dragDropTargets")
            if isinstance(target, Mapping) and target.get("correctItemId")
        }
    if not isinstance(mappings, Mapping):
        raise QuestionDataError(f"Correct mappings must be an object, got {type(mappings).__name__}")
    return MappingQuestion(correct_mappings={str(key): value for key, value in mappings.items()})


def drag_drop_format(data: Mapping) -> DragDropFormat:
    kind = data.get("type")
    if kind == DragDropFormat.MATCHING.value:
        return DragDropFormat.MATCHING
    if kind == DragDropFormat.ORDERING.value:
        return DragDropFormat.ORDERING
    return DragDropFormat.MAPPING


def build_drag_drop(data: Mapping) -> Union[MatchingQuestion, OrderingQuestion, MappingQuestion]:
    """Canonical drag-drop question in one of its three sub-formats."""
    builders = {
        DragDropFormat.MATCHING: build_matching,
        DragDropFormat.ORDERING: build_ordering,
        DragDropFormat.MAPPING: build_mapping,
    }
    return builders[drag_drop_format(data)](data)


def build_sub_question(raw: Any, index: int) -> SubQuestion:
    """
    Canonical case-study sub-question.

    Never raises: a malformed sub-question comes back with ``error`` set so
    that only that sub-question loses credit.
    """
    data = raw if isinstance(raw, Mapping) else {}
    sub_id = str(data.get("id") or f"csq{index + 1}")
    kind = first_filled(data, SUB_TYPE_KEYS, default="")
    prompt = first_filled(data, SUB_PROMPT_KEYS, default=f"Sub-question {index + 1}")

    try:
        marks = coerce_marks(data.get("marks") or None, default=1)
        if kind == QuestionType.SINGLE_CHOICE.value:
            # Either spelling is accepted as the right answer
            correct = [data[key] for key in SUB_SINGLE_CHOICE_KEYS if data.get(key) is not None]
            reference = first_present(data, SUB_SINGLE_CHOICE_KEYS)
        elif kind == QuestionType.MULTIPLE_CHOICE.value:
            correct = as_sequence(first_present(data, SUB_MULTIPLE_CHOICE_KEYS, default=[]))
            reference = correct
        else:
            correct = []
            reference = first_filled(data, SUB_REFERENCE_KEYS)
    except GradingError as exc:
        logger.warning(
            "Malformed case-study sub-question",
            extra_data={"sub_question_id": sub_id, "error": exc.message},
        )
        return SubQuestion(id=sub_id, kind=str(kind), prompt=str(prompt), error=exc.message)

    return SubQuestion(
        id=sub_id,
        kind=str(kind),
        prompt=str(prompt),
        marks=marks,
        correct=correct,
        reference_answer=reference,
    )


def build_case_study(data: Mapping) -> CaseStudyQuestion:
    """Canonical case-study question."""
    return CaseStudyQuestion(
        title=str(first_filled(data, CASE_TITLE_KEYS, default="Case Study")),
        description=first_filled(data, CASE_DESCRIPTION_KEYS),
        sub_questions=[
            build_sub_question(sub, index)
            for index, sub in enumerate(list_field(data, "subQuestions"))
        ],
    )


def build_short_answer(data: Mapping) -> ShortAnswerQuestion:
    """Canonical short-answer question."""
    keywords = data.get("keywords")
    if keywords is None:
        keywords = []
    elif isinstance(keywords, str):
        keywords = [keywords]
    elif not isinstance(keywords, (list, tuple)):
        raise QuestionDataError(f"Keywords must be a list, got {type(keywords).__name__}")

    reference = first_filled(data, SHORT_ANSWER_REFERENCE_KEYS, default="")
    return ShortAnswerQuestion(
        keywords=[str(keyword) for keyword in keywords if keyword is not None],
        reference_answer=str(reference),
    )


_BUILDERS: dict[QuestionType, Callable[[Mapping], Question]] = {
    QuestionType.SINGLE_CHOICE: lambda data: build_choice(QuestionType.SINGLE_CHOICE, data),
    QuestionType.MULTIPLE_CHOICE: lambda data: build_choice(QuestionType.MULTIPLE_CHOICE, data),
    QuestionType.DRAG_DROP: build_drag_drop,
    QuestionType.CASE_STUDY: build_case_study,
    QuestionType.SHORT_ANSWER: build_short_answer,
}


def build_question(question_type: QuestionType, data: Mapping) -> Question:
    """Build the canonical model for a known question type."""
    return _BUILDERS[question_type](data)
