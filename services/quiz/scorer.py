# services/quiz/scorer.py
"""Scoring entry points for quiz submissions.

Functions:
- score_question: dispatch one answer to the scorer of its question type, checking its shape.
- score_quiz: grade a whole submission; a failing question scores 0 instead of aborting.
- max_score_for / canonical_answer: weight and expected answer of an unanswered question.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Sequence, Tuple

from packages.common.metrics import observe_grading, record_question
from packages.schemas.quiz import (
    Answer,
    DropdownQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    QuizScoreResult,
    ScoreResult,
    SingleChoiceQuestion,
    TextInputQuestion,
)
from .errors import AnswerShapeError, UnsupportedQuestionTypeError
from .question_types import (
    correct_option_ids,
    correct_order,
    correct_single_option,
    score_dropdown,
    score_multiple_choice,
    score_ordering,
    score_single_choice,
    score_text_input,
)

logger = logging.getLogger("quiz.scorer")


def _is_text(answer: Any) -> bool:
    return isinstance(answer, str)


def _is_text_list(answer: Any) -> bool:
    return isinstance(answer, (list, tuple)) and all(isinstance(a, str) for a in answer)


def _is_text_mapping(answer: Any) -> bool:
    return isinstance(answer, Mapping) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in answer.items()
    )


# question_type -> (scorer, shape check, expected shape for error messages)
_SCORERS: Dict[str, Tuple[Callable[[Any, Any], ScoreResult], Callable[[Any], bool], str]] = {
    "SINGLE_CHOICE": (score_single_choice, _is_text, "a string"),
    "MULTIPLE_CHOICE": (lambda q, a: score_multiple_choice(q, list(a)), _is_text_list, "a list of option ids"),
    "TEXT_INPUT": (score_text_input, _is_text, "a string"),
    "DROPDOWN": (lambda q, a: score_dropdown(q, dict(a)), _is_text_mapping, "a mapping of dropdown id to option id"),
    "ORDERING": (lambda q, a: score_ordering(q, list(a)), _is_text_list, "a list of item ids"),
}


def score_question(question: Question, answer: Any) -> ScoreResult:
    """Score a single answer against its question.

    Raises:
        UnsupportedQuestionTypeError: The question type has no scorer (e.g. MATCHING).
        AnswerShapeError: The answer's type does not fit the question type.
        ConfigurationIntegrityError: The question lacks its type-specific configuration.
    """
    question_type = getattr(question, "question_type", None)
    entry = _SCORERS.get(question_type)
    if entry is None:
        raise UnsupportedQuestionTypeError(getattr(question, "id", None), question_type)

    scorer, fits, expected = entry
    if not fits(answer):
        raise AnswerShapeError(question.id, question_type, expected, answer)

    logger.debug("Scoring %s question %s", question_type, question.id)
    return scorer(question, answer)


def max_score_for(question: Question) -> float:
    """Weight of a question in the quiz total when it is left unanswered.

    Dropdown questions weigh one point per dropdown, ordering questions one
    point per item, everything else one point.
    """
    if isinstance(question, DropdownQuestion) and question.answers_data is not None:
        return len(question.answers_data.dropdowns)
    if isinstance(question, OrderingQuestion) and question.answers_data is not None:
        return len(question.answers_data.items)
    return 1


def canonical_answer(question: Question) -> Any:
    """Expected answer of `question`, echoed back for feedback."""
    if isinstance(question, SingleChoiceQuestion):
        return correct_single_option(question) or ""
    if isinstance(question, MultipleChoiceQuestion):
        return correct_option_ids(question)
    config = getattr(question, "answers_data", None)
    if config is None:
        return []
    if isinstance(question, TextInputQuestion):
        return list(config.acceptable_answers)
    if isinstance(question, DropdownQuestion):
        return {d.id: [o.id for o in d.options if o.is_correct] for d in config.dropdowns}
    if isinstance(question, OrderingQuestion):
        return correct_order(config)
    return []


def _blank_answer(question: Question) -> Answer:
    if isinstance(question, (MultipleChoiceQuestion, OrderingQuestion)):
        return []
    if isinstance(question, DropdownQuestion):
        return {}
    return ""


def _echo(answer: Any) -> Answer:
    """Coerce an arbitrary submitted value into a shape `ScoreResult` can hold."""
    if isinstance(answer, str):
        return answer
    if isinstance(answer, Mapping):
        return {str(k): str(v) for k, v in answer.items()}
    if isinstance(answer, (list, tuple)):
        return [str(a) for a in answer]
    return [str(answer)]


def _unanswered_result(question: Question) -> ScoreResult:
    return ScoreResult(
        question_id=question.id,
        selected_answers=_blank_answer(question),
        correct_answers=canonical_answer(question),
        is_correct=False,
        score=0,
        max_score=max_score_for(question),
        explanation="No answer provided",
    )


def _error_result(question: Question, answer: Any) -> ScoreResult:
    return ScoreResult(
        question_id=str(getattr(question, "id", "")),
        selected_answers=_echo(answer),
        correct_answers=[],
        is_correct=False,
        score=0,
        max_score=1,
        explanation="Error processing answer",
    )


def score_quiz(questions: Sequence[Question], answers: Mapping[str, Any]) -> QuizScoreResult:
    """Grade a submission and return a `QuizScoreResult` (percentage in [0, 100] for sane configs).

    Questions are graded in order. An unanswered question scores 0 but keeps
    its full weight in the denominator. A question whose grading raises is
    logged and replaced by a zero-score result worth one point, so one bad
    item never aborts the rest of the quiz.
    """
    t0 = time.perf_counter()
    results: List[ScoreResult] = []
    total = 0.0
    max_total = 0.0
    correct = 0

    for question in questions:
        question_type = str(getattr(question, "question_type", "UNKNOWN"))
        answer = answers.get(question.id)

        if answer is None:
            result = _unanswered_result(question)
            outcome = "unanswered"
        else:
            try:
                result = score_question(question, answer)
                outcome = "correct" if result.is_correct else "incorrect"
            except Exception:
                logger.exception("Error scoring question %s", question.id)
                result = _error_result(question, answer)
                outcome = "error"

        record_question(question_type, outcome)
        results.append(result)
        total += result.score
        max_total += result.max_score
        if result.is_correct:
            correct += 1

    percentage = (total / max_total) * 100.0 if max_total > 0 else 0.0
    observe_grading(time.perf_counter() - t0)
    return QuizScoreResult(
        total_score=total,
        max_total_score=max_total,
        percentage=percentage,
        correct_questions=correct,
        total_questions=len(questions),
        question_results=results,
    )
