"""
Logging for the grading engine.

Loggers from :func:`get_logger` accept an ``extra_data`` keyword whose
mapping is attached to the record. The JSON formatter merges it into the
top level of each line, so a graded answer logs as one flat object.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .config import settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(getattr(record, "extra_data", None) or {})

        # Student answers can hold anything; repr keeps the line writable
        return json.dumps(entry, default=repr)


class TextFormatter(logging.Formatter):
    """Plain ``time - logger - LEVEL - message`` lines."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def build_formatter(log_format: str) -> logging.Formatter:
    """Formatter for a ``LOG_FORMAT`` value; anything but ``json`` is text."""
    return StructuredFormatter() if log_format == "json" else TextFormatter()


def _file_handler(path: str) -> logging.Handler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_path, encoding="utf-8")


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Route every logger to stderr, plus a file when one is configured.

    Arguments left as None come from settings. Unknown level names fall
    back to INFO.
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    formatter = build_formatter(log_format or settings.LOG_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    path = log_file or settings.LOG_FILE
    if path:
        handlers.append(_file_handler(path))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter that moves ``extra_data`` into the record, over any bound context."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.setdefault("extra", {})
        extra["extra_data"] = {**self.extra, **kwargs.pop("extra_data", {})}
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})


def get_context_logger(name: str, **context: Any) -> LoggerAdapter:
    """Logger whose records always carry ``context``, e.g. an attempt id."""
    return LoggerAdapter(logging.getLogger(name), context)
