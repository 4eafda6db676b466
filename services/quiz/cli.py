"""Command line entry point for grading and validating quizzes.

Usage:
  quizgrade grade quiz.yaml answers.json
  quizgrade validate quiz.yaml

Exit codes:
  0 = success / every question valid
  1 = at least one invalid question (validate)
  2 = unreadable or malformed input file
"""
from __future__ import annotations

import argparse
import logging
import sys
import uuid
from typing import List, Optional

from pydantic import ValidationError

from packages.common.config import get_settings
from packages.common.logging import configure_logging, set_submission_id
from .loader import load_quiz, load_submission
from .scorer import score_quiz
from .validation import validate_quiz, validation_summary

log = logging.getLogger("quiz.cli")


def _grade(args: argparse.Namespace) -> int:
    questions = load_quiz(args.quiz)
    submission = load_submission(args.answers)
    set_submission_id(args.submission_id or str(uuid.uuid4()))
    result = score_quiz(questions, submission.answers)
    log.info(
        "Graded %d questions: %.2f/%.2f (%.1f%%)",
        result.total_questions, result.total_score, result.max_total_score, result.percentage,
    )
    print(result.model_dump_json(indent=2))
    return 0


def _validate(args: argparse.Namespace) -> int:
    report = validate_quiz(load_quiz(args.quiz))
    print(report.model_dump_json(indent=2))
    if not report.is_valid:
        for qid, question_report in report.questions.items():
            if not question_report.is_valid:
                log.warning("Question %s: %s", qid, validation_summary(question_report))
        log.warning("Quiz %s has configuration errors", args.quiz)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="quizgrade", description="Grade and validate quizzes")
    sub = ap.add_subparsers(dest="command", required=True)

    grade = sub.add_parser("grade", help="Score a submission against a quiz")
    grade.add_argument("quiz", help="Quiz file (JSON or YAML) with a `questions` list")
    grade.add_argument("answers", help="Submission file (JSON or YAML) with an `answers` mapping")
    grade.add_argument("--submission-id", default=None, help="Correlation id written to the logs")
    grade.set_defaults(handler=_grade)

    validate = sub.add_parser("validate", help="Check question configuration")
    validate.add_argument("quiz", help="Quiz file (JSON or YAML) with a `questions` list")
    validate.set_defaults(handler=_validate)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, configure logging from settings and run the selected command."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.JSON_LOGS, stream=sys.stderr)

    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except (OSError, ValueError, ValidationError) as e:
        log.error("Cannot read input: %s", e)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
