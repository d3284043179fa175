"""
Raw value comparison for answer keys.

Stored answer keys and student answers are compared as they were stored,
the way the portal compared them: a boolean is never an option index, so
``True`` does not match ``1`` and ``False`` does not match ``0``. Python's
``==`` and ``in`` treat those as equal, so evaluators use these helpers
instead.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def same_value(left: Any, right: Any) -> bool:
    """
    Strict equality of two raw values.

    Lists and tuples compare item by item, mappings key by key.

    >>> same_value(1, 1.0)
    True
    >>> same_value(True, 1)
    False
    >>> same_value([0, "a"], (0, "a"))
    True
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(same_value(a, b) for a, b in zip(left, right))
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(same_value(left[key], right[key]) for key in left)
    return left == right


def contains(values: Iterable[Any], value: Any) -> bool:
    """``value in values`` with :func:`same_value` semantics."""
    return any(same_value(candidate, value) for candidate in values)


def index_of(values: Iterable[Any], value: Any) -> int | None:
    """Position of the first strictly equal item, or None."""
    for index, candidate in enumerate(values):
        if same_value(candidate, value):
            return index
    return None
