"""Command line interface for grading exam submissions."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .answer.graders import AttemptGrader
from .core.config import settings
from .core.logging import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Grade the submissions of an exam attempt stored as JSON."
    )
    parser.add_argument(
        "source",
        type=Path,
        help="JSON file holding a list of submissions, or an object with a 'submissions' list.",
    )
    parser.add_argument(
        "--passing",
        type=float,
        default=None,
        help=f"Passing percentage (default: file value, else {settings.PASSING_PERCENTAGE:g}).",
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Print only the attempt summary.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation of the output (default: 2).",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Encoding to use when reading the source file (default: utf-8).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log errors.",
    )
    return parser


def _load_submissions(payload: Any) -> tuple[list[Any], float | None]:
    if isinstance(payload, list):
        return payload, None
    if isinstance(payload, dict) and isinstance(payload.get("submissions"), list):
        return payload["submissions"], payload.get("passingPercentage")
    raise ValueError("expected a list of submissions or an object with a 'submissions' list")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="ERROR" if args.quiet else None, log_format="text")

    try:
        payload = json.loads(args.source.read_text(encoding=args.encoding))
        submissions, file_passing = _load_submissions(payload)
        passing = args.passing if args.passing is not None else file_passing
        grader = AttemptGrader() if passing is None else AttemptGrader(passing_percentage=passing)
        result = grader.grade(submissions)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output = result.summary.model_dump() if args.summary_only else result.to_dict()
    print(json.dumps(output, indent=args.indent, default=str))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
