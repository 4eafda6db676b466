# services/quiz/question_types.py
"""Per-type scoring for quiz questions.

Functions:
- score_single_choice: 1 if the picked option is the correct one, else 0.
- score_multiple_choice: all-or-nothing or partial credit, per question config.
- score_text_input: trimmed match against the acceptable answers.
- score_dropdown: per-blank check folded into all-or-nothing or per-blank points.
- score_ordering: exact order, or one point per item in its correct slot.

Every scorer is pure and returns a `ScoreResult`; a missing type-specific
configuration raises `ConfigurationIntegrityError`.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence

from packages.schemas.quiz import (
    BaseQuestion,
    DropdownQuestion,
    DropdownResultDetail,
    DropdownScoring,
    MultipleChoiceQuestion,
    OrderingConfig,
    OrderingQuestion,
    OrderingResultDetail,
    PartialCreditRules,
    ScoreResult,
    SingleChoiceQuestion,
    TextInputQuestion,
)
from .errors import ConfigurationIntegrityError
from .feedback import dropdown_feedback, ordering_mismatch_feedback, ordering_partial_feedback

DEFAULT_PARTIAL_CREDIT_RULES = PartialCreditRules(
    correct_selection_points=1, incorrect_selection_penalty=0, min_score=0
)
DEFAULT_DROPDOWN_SCORING = DropdownScoring(
    points_per_dropdown=1, require_all_correct=True, penalize_incorrect=False
)
# Fraction of a dropdown's points taken off for each wrong blank
INCORRECT_DROPDOWN_PENALTY = 0.5


def correct_option_ids(question: BaseQuestion) -> List[str]:
    return [o.id for o in question.options if o.correct]


def correct_single_option(question: BaseQuestion) -> Optional[str]:
    """The legacy `correct_option_id`, or the option flagged correct when it is unset."""
    if question.correct_option_id:
        return question.correct_option_id
    ids = correct_option_ids(question)
    return ids[0] if ids else None


def correct_order(config: OrderingConfig) -> List[str]:
    return [i.id for i in sorted(config.items, key=lambda i: i.correct_position)]


# ---------- Single choice ----------

def score_single_choice(question: SingleChoiceQuestion, answer: str) -> ScoreResult:
    """Return full marks if `answer` is the correct option id; an empty answer scores 0.

    The correct id is `correct_option_id`, or the option flagged `correct`
    when that is unset. If neither yields an id (including
    `correct_option_id=""` with no flagged option) nothing is correct, so an
    empty answer never matches an empty key.
    """
    correct = correct_single_option(question)
    is_correct = bool(correct) and answer == correct
    return ScoreResult(
        question_id=question.id,
        selected_answers=answer,
        correct_answers=correct or "",
        is_correct=is_correct,
        score=1 if is_correct else 0,
        max_score=1,
    )


# ---------- Multiple choice ----------

def _score_all_or_nothing(question: MultipleChoiceQuestion, selected: List[str]) -> ScoreResult:
    correct = correct_option_ids(question)
    is_correct = set(selected) == set(correct)
    return ScoreResult(
        question_id=question.id,
        selected_answers=selected,
        correct_answers=correct,
        is_correct=is_correct,
        score=1 if is_correct else 0,
        max_score=1,
        explanation=(
            "All correct answers selected"
            if is_correct
            else "Must select all correct answers and no incorrect ones"
        ),
    )


def _score_partial_credit(question: MultipleChoiceQuestion, selected: List[str], rules: PartialCreditRules) -> ScoreResult:
    """Score = hits * points + misses * penalty, floored at `rules.min_score`.

    Selections are de-duplicated first. `is_correct` still requires the exact
    correct set, whatever the numeric score.
    """
    correct = correct_option_ids(question)
    selected_set, correct_set = set(selected), set(correct)
    hits = len(selected_set & correct_set)
    misses = len(selected_set - correct_set)

    raw = hits * rules.correct_selection_points + misses * rules.incorrect_selection_penalty
    return ScoreResult(
        question_id=question.id,
        selected_answers=selected,
        correct_answers=correct,
        is_correct=selected_set == correct_set,
        score=max(raw, rules.min_score),
        max_score=len(correct_set) * rules.correct_selection_points,
        explanation=f"{hits} correct, {misses} incorrect",
    )


def score_multiple_choice(question: MultipleChoiceQuestion, answer: List[str]) -> ScoreResult:
    """Grade a multiple choice answer using the question's scoring method."""
    config = question.answers_data
    if config is None:
        raise ConfigurationIntegrityError(question.id, question.question_type)

    if config.scoring_method == "PARTIAL_CREDIT":
        rules = config.partial_credit_rules or DEFAULT_PARTIAL_CREDIT_RULES
        return _score_partial_credit(question, answer, rules)
    return _score_all_or_nothing(question, answer)


# ---------- Text input ----------

def score_text_input(question: TextInputQuestion, answer: str) -> ScoreResult:
    """Compare the trimmed answer with each trimmed acceptable answer; first match wins."""
    config = question.answers_data
    if config is None:
        raise ConfigurationIntegrityError(question.id, question.question_type)

    submitted = answer.strip()
    if not submitted:
        return ScoreResult(
            question_id=question.id,
            selected_answers=answer,
            correct_answers=list(config.acceptable_answers),
            is_correct=False,
            score=0,
            max_score=1,
            explanation="No answer provided",
        )

    if config.case_sensitive:
        is_correct = any(submitted == a.strip() for a in config.acceptable_answers)
    else:
        lowered = submitted.lower()
        is_correct = any(lowered == a.strip().lower() for a in config.acceptable_answers)

    return ScoreResult(
        question_id=question.id,
        selected_answers=answer,
        correct_answers=list(config.acceptable_answers),
        is_correct=is_correct,
        score=1 if is_correct else 0,
        max_score=1,
        explanation="Answer accepted" if is_correct else "Answer does not match any acceptable answer",
    )


# ---------- Dropdown ----------

def score_dropdown(question: DropdownQuestion, answer: Dict[str, str]) -> ScoreResult:
    """Grade a fill-in-the-blank answer mapping dropdown id -> selected option id.

    A missing or unknown selection counts as a wrong blank. With
    `require_all_correct` the question is all-or-nothing; otherwise each
    correct blank earns `points_per_dropdown`, and with `penalize_incorrect`
    each wrong blank costs half of that, floored at 0.
    """
    config = question.answers_data
    if config is None:
        raise ConfigurationIntegrityError(question.id, question.question_type)
    scoring = config.scoring or DEFAULT_DROPDOWN_SCORING

    details: List[DropdownResultDetail] = []
    for dropdown in config.dropdowns:
        selected_id = answer.get(dropdown.id)
        selected = next((o for o in dropdown.options if o.id == selected_id), None)
        details.append(
            DropdownResultDetail(
                dropdown_id=dropdown.id,
                label=dropdown.label,
                selected_option_id=selected_id,
                selected_text=selected.text if selected else None,
                is_correct=selected is not None and selected.is_correct,
                correct_options=[o.text for o in dropdown.options if o.is_correct],
            )
        )

    correct_count = sum(1 for d in details if d.is_correct)
    incorrect_count = len(details) - correct_count
    points = scoring.points_per_dropdown
    max_score = len(details) * points

    if scoring.require_all_correct:
        score = max_score if incorrect_count == 0 else 0
    else:
        score = correct_count * points
        if scoring.penalize_incorrect:
            score = max(score - incorrect_count * points * INCORRECT_DROPDOWN_PENALTY, 0)

    return ScoreResult(
        question_id=question.id,
        selected_answers=dict(answer),
        correct_answers={
            d.id: [o.id for o in d.options if o.is_correct] for d in config.dropdowns
        },
        is_correct=score == max_score,
        score=score,
        max_score=max_score,
        explanation=dropdown_feedback(details),
        details=details,
    )


# ---------- Ordering ----------

def _positions(submitted: Sequence[str], expected: Sequence[str]) -> tuple[List[int], List[int]]:
    hits: List[int] = []
    misses: List[int] = []
    for i, (s, e) in enumerate(zip(submitted, expected)):
        (hits if s == e else misses).append(i)
    return hits, misses


def score_ordering(question: OrderingQuestion, answer: List[str]) -> ScoreResult:
    """Grade a submitted item order against the order given by `correct_position`.

    A submission that is not a permutation of the item ids (missing,
    duplicated or foreign ids) scores 0. An exact match earns one point per
    item. Otherwise the answer scores 0 when the exact order is required
    without partial credit, and one point per item in its correct slot in
    every other case.
    """
    config = question.answers_data
    if config is None:
        raise ConfigurationIntegrityError(question.id, question.question_type)

    expected = correct_order(config)
    max_score = len(expected)
    submitted = list(answer)

    def result(score: float, explanation: str, hits: List[int], misses: List[int]) -> ScoreResult:
        return ScoreResult(
            question_id=question.id,
            selected_answers=submitted,
            correct_answers=expected,
            is_correct=score == max_score,
            score=score,
            max_score=max_score,
            explanation=explanation,
            details=OrderingResultDetail(
                correct_order=expected,
                user_order=submitted,
                correct_positions=hits,
                incorrect_positions=misses,
            ),
        )

    if len(submitted) != len(expected) or set(submitted) != set(expected):
        return result(
            0,
            "Not all items were arranged. Every item must be placed exactly once.",
            [],
            list(range(len(submitted))),
        )

    hits, misses = _positions(submitted, expected)
    if not misses:
        return result(max_score, "Perfect! All items are in the correct order.", hits, misses)

    if config.exact_order_required and not config.allow_partial_credit:
        return result(0, ordering_mismatch_feedback(submitted, expected, config.items), hits, misses)

    score = len(hits) * max_score / len(expected)
    return result(score, ordering_partial_feedback(len(hits), len(expected)), hits, misses)
