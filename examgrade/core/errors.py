"""
Engine exceptions.

These are raised inside normalization and evaluation. ``grade_answer``
converts every one of them into a zero-credit record, so callers of the
engine never see them; they exist to give contained failures a precise
message and structured details for the logs.
"""

from typing import Any, Dict, Optional


class GradingError(Exception):
    """Base exception for grading errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class QuestionDataError(GradingError):
    """Raised when a question definition cannot be decoded"""

    def __init__(self, message: str, question_type: Optional[str] = None):
        details = {"question_type": question_type} if question_type else {}
        super().__init__(message=message, details=details)


class AmbiguousItemError(GradingError):
    """Raised when drag-drop item texts repeat and a lookup by text is ambiguous"""

    def __init__(self, side: str, text: Any):
        super().__init__(
            message=f"Duplicate {side} item {text!r}: matching items must have unique text",
            details={"side": side, "text": text},
        )


class InvalidMarksError(GradingError):
    """Raised when a marks value is negative or not a number"""

    def __init__(self, marks: Any):
        super().__init__(
            message=f"Marks must be a non-negative number, got {marks!r}",
            details={"marks": marks},
        )
