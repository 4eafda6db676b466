# services/quiz/__init__.py
"""quiz grading package: scoring entry points and authoring-time validators."""

from .errors import (
    AnswerShapeError,
    ConfigurationIntegrityError,
    QuizScoringError,
    UnsupportedQuestionTypeError,
)
from .scorer import score_question, score_quiz
from .validation import (
    validate_dropdown_config,
    validate_matching_config,
    validate_multiple_choice_config,
    validate_ordering_config,
    validate_question,
    validate_quiz,
    validate_single_choice_config,
    validate_text_input_config,
    validation_summary,
)

__all__ = [
    "score_question",
    "score_quiz",
    "validate_single_choice_config",
    "validate_multiple_choice_config",
    "validate_text_input_config",
    "validate_dropdown_config",
    "validate_ordering_config",
    "validate_matching_config",
    "validate_question",
    "validate_quiz",
    "validation_summary",
    "QuizScoringError",
    "ConfigurationIntegrityError",
    "AnswerShapeError",
    "UnsupportedQuestionTypeError",
]
