# services/quiz/errors.py
"""Errors raised while grading a question.

Both kinds are contained by `score_quiz`, which turns them into a zero-score
result; `score_question` lets them propagate to the caller.
"""

from __future__ import annotations
from typing import Any, Optional


class QuizScoringError(ValueError):
    """Base class for grading failures tied to a single question."""

    def __init__(self, question_id: Optional[str], message: str) -> None:
        self.question_id = question_id
        super().__init__(message)


class ConfigurationIntegrityError(QuizScoringError):
    """A question lacks the type-specific configuration it needs to be graded."""

    def __init__(self, question_id: Optional[str], question_type: str) -> None:
        self.question_type = question_type
        super().__init__(
            question_id,
            f"{question_type} question {question_id} missing configuration data",
        )


class AnswerShapeError(QuizScoringError):
    """The submitted answer's type does not fit the declared question type."""

    def __init__(self, question_id: Optional[str], question_type: str, expected: str, answer: Any) -> None:
        self.question_type = question_type
        self.expected = expected
        super().__init__(
            question_id,
            f"{question_type} question {question_id} expects {expected} answer, "
            f"received {type(answer).__name__}",
        )


class UnsupportedQuestionTypeError(QuizScoringError):
    """The question type has no scorer."""

    def __init__(self, question_id: Optional[str], question_type: Any) -> None:
        self.question_type = question_type
        super().__init__(question_id, f"Unsupported question type: {question_type}")
