# services/quiz/validation.py
"""Authoring-time checks of question configuration.

Every validator collects all violated rules instead of stopping at the first
one and never raises: configuration passed as a raw mapping is parsed, and
parse failures are reported as errors like any other rule. Each check also
counts as a requirement, so reports carry a completion percentage, a status
and the list of fields an author still has to fill in.

Functions:
- validate_single_choice_config / validate_multiple_choice_config
- validate_text_input_config / validate_dropdown_config / validate_ordering_config
- validate_matching_config: both columns, their positions and the correct matches.
- validate_question: question text, option texts, editor limits and the per-type checks.
- validate_quiz: question ids unique, at least one question, one report per question.
- validation_summary: one-line description of a report.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from packages.schemas.quiz import (
    BaseQuestion,
    DropdownConfig,
    DropdownQuestion,
    MatchingConfig,
    MatchingItem,
    MatchingQuestion,
    MultipleChoiceConfig,
    MultipleChoiceQuestion,
    OrderingConfig,
    OrderingContent,
    OrderingQuestion,
    QuizValidationReport,
    SingleChoiceQuestion,
    TextInputConfig,
    TextInputQuestion,
    ValidationReport,
    parse_question,
)

M = TypeVar("M", bound=BaseModel)

PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")
MAX_DROPDOWNS = 10
MAX_ORDERING_ITEMS = 10
MAX_MATCHING_LEFT_ITEMS = 8
MAX_MATCHING_RIGHT_ITEMS = 10
MIN_CHOICE_OPTIONS = 2


class _Checklist:
    """Accumulates errors and counts met requirements."""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.missing: List[str] = []
        self.total = 0
        self.met = 0

    def fail(self, error: str, missing: Optional[str] = None) -> None:
        self.errors.append(error)
        if missing:
            self.missing.append(missing)

    def require(self, ok: bool, error: Optional[str] = None, missing: Optional[str] = None) -> bool:
        """Count one requirement; record `error` and `missing` when it is not met."""
        self.total += 1
        if ok:
            self.met += 1
        elif error:
            self.fail(error, missing)
        return ok

    def report(self) -> ValidationReport:
        # round half up
        pct = int(self.met * 100 / self.total + 0.5) if self.total else 0
        if self.errors:
            status = "error"
        elif pct == 100:
            status = "complete"
        elif pct > 0:
            status = "partial"
        else:
            status = "incomplete"
        return ValidationReport(
            is_valid=not self.errors,
            status=status,
            completion_percentage=pct,
            errors=self.errors,
            missing_fields=self.missing,
        )


def _coerce(model: Type[M], value: Any, checks: _Checklist) -> Optional[M]:
    """Parse `value` into `model`; None when absent or unparseable (parse errors are recorded)."""
    if value is None or isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            checks.fail(f"{loc}: {err['msg']}" if loc else err["msg"])
        return None


def _config(model: Type[M], value: Any, checks: _Checklist, label: str) -> Optional[M]:
    """Like `_coerce`, but a present, parseable configuration is itself a requirement."""
    if value is None:
        checks.require(False, f"{label} configuration is required", f"{label} configuration")
        return None
    parsed = _coerce(model, value, checks)
    checks.require(parsed is not None)
    return parsed


def _is_correct(option: Any) -> bool:
    if isinstance(option, Mapping):
        return bool(option.get("correct"))
    return bool(getattr(option, "correct", False))


def _option_field(option: Any, name: str) -> Optional[str]:
    if isinstance(option, Mapping):
        return option.get(name)
    return getattr(option, name, None)


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _check_content(content: OrderingContent, who: str, checks: _Checklist) -> None:
    if content.type == "text":
        checks.require(not _blank(content.text), f"{who} text is required")
    elif content.type == "image":
        checks.require(not _blank(content.image_url), f"{who} image URL is required")
        checks.require(not _blank(content.alt_text), f"{who} alt text is required for images")
    else:
        checks.require(
            not (_blank(content.text) and _blank(content.image_url)),
            f"{who} must have text or image",
        )


def _check_positions(positions: Sequence[int], label: str, checks: _Checklist) -> None:
    """Positions must be 1..N, each exactly once."""
    ordered = sorted(positions)
    duplicates = sorted(p for p, c in Counter(ordered).items() if c > 1)
    if duplicates:
        checks.fail(f"{label} must be unique. Duplicated: {', '.join(map(str, duplicates))}")
    for expected, actual in enumerate(ordered, start=1):
        if actual != expected:
            checks.fail(f"{label} must be sequential starting from 1. Found gap at position {expected}")
            break


# ---------- Choice questions ----------

def _check_choice_options(options: Sequence[Any], checks: _Checklist) -> None:
    if not checks.require(
        len(options) >= MIN_CHOICE_OPTIONS,
        f"At least {MIN_CHOICE_OPTIONS} options are required",
        "Answer options",
    ):
        return
    for n, option in enumerate(options, start=1):
        checks.require(
            not _blank(_option_field(option, "text")),
            f"Option {n} text is required",
            f"Option {n} text",
        )


def _check_single_choice(options: Sequence[Any], correct_option_id: Optional[str], checks: _Checklist) -> None:
    correct = [o for o in options if _is_correct(o)]
    checks.require(
        len(correct) == 1,
        "Exactly one option must be marked as correct for single choice questions",
        "Correct answer selection",
    )
    if correct_option_id and len(correct) == 1 and _option_field(correct[0], "id") != correct_option_id:
        checks.fail("Correct option id does not match the option marked as correct")


def _check_multiple_choice(
    options: Sequence[Any], config: Any, checks: _Checklist, config_required: bool = False
) -> None:
    checks.require(
        any(_is_correct(o) for o in options),
        "At least one option must be marked as correct",
        "Correct answer selections",
    )
    if config_required:
        cfg = _config(MultipleChoiceConfig, config, checks, "Multiple choice")
    else:
        cfg = _coerce(MultipleChoiceConfig, config, checks)
    if cfg is None:
        return

    if cfg.max_selections is not None and cfg.max_selections > len(options):
        checks.fail("Maximum selections cannot exceed number of options")
    if cfg.min_selections < 1:
        checks.fail("Minimum selections must be at least 1")
    if cfg.max_selections is not None and cfg.min_selections > cfg.max_selections:
        checks.fail("Minimum selections cannot exceed maximum selections")

    if cfg.scoring_method == "PARTIAL_CREDIT" and cfg.partial_credit_rules is not None:
        rules = cfg.partial_credit_rules
        if rules.correct_selection_points < 0:
            checks.fail("Correct selection points must be non-negative")
        if rules.incorrect_selection_penalty > 0:
            checks.fail("Incorrect selection penalty must be non-positive")
        if rules.min_score < 0:
            checks.fail("Minimum score must be non-negative")


def validate_single_choice_config(options: Sequence[Any], correct_option_id: Optional[str] = None) -> ValidationReport:
    """Exactly one option is correct, and the legacy `correct_option_id` names it when set."""
    checks = _Checklist()
    _check_single_choice(options, correct_option_id, checks)
    return checks.report()


def validate_multiple_choice_config(options: Sequence[Any], config: Any = None) -> ValidationReport:
    """Check correct options, selection bounds and partial-credit rules of a multiple choice question."""
    checks = _Checklist()
    _check_multiple_choice(options, config, checks)
    return checks.report()


# ---------- Text input ----------

def _check_text_input(config: Any, checks: _Checklist) -> None:
    cfg = _config(TextInputConfig, config, checks, "Text input")
    if cfg is None:
        return
    if not cfg.acceptable_answers:
        checks.require(False, "At least one acceptable answer is required", "Acceptable answers")
    else:
        checks.require(not any(_blank(a) for a in cfg.acceptable_answers), "Acceptable answers cannot be empty")


def validate_text_input_config(config: Any) -> ValidationReport:
    checks = _Checklist()
    _check_text_input(config, checks)
    return checks.report()


# ---------- Dropdown ----------

def _check_dropdown(config: Any, checks: _Checklist) -> Optional[DropdownConfig]:
    cfg = _config(DropdownConfig, config, checks, "Dropdown")
    if cfg is None:
        return None

    checks.require(not _blank(cfg.template), "Template text is required", "Template text")
    checks.require(bool(cfg.dropdowns), "At least one dropdown field is required", "Dropdown fields")

    for n, dropdown in enumerate(cfg.dropdowns, start=1):
        checks.require(not _blank(dropdown.id), f"Dropdown {n} ID is required", f"Dropdown {n} ID")
        checks.require(len(dropdown.options) >= 2, f"Dropdown {n} needs at least 2 options", f"Dropdown {n} options")
        checks.require(
            not any(_blank(o.id) or _blank(o.text) for o in dropdown.options),
            f"Dropdown {n} has options with missing id or text",
        )
        checks.require(
            any(o.is_correct for o in dropdown.options),
            f"Dropdown {n} needs at least one correct answer",
            f"Dropdown {n} correct answer",
        )

    ids = [d.id for d in cfg.dropdowns if not _blank(d.id)]
    for dup, count in Counter(ids).items():
        if count > 1:
            checks.fail(f"Dropdown ID '{dup}' is used {count} times")

    placeholders = PLACEHOLDER_PATTERN.findall(cfg.template)
    for dropdown_id in dict.fromkeys(ids):
        if dropdown_id not in placeholders:
            checks.fail(f"Template is missing placeholder {{{dropdown_id}}}")
    known = set(ids)
    for orphan in dict.fromkeys(placeholders):
        if orphan not in known:
            checks.fail(f"Template placeholder {{{orphan}}} has no matching dropdown")
    return cfg


def validate_dropdown_config(config: Any) -> ValidationReport:
    """Check every dropdown and the two-way mapping between dropdowns and template placeholders.

    Each dropdown needs an id, at least two options with id and text, and at
    least one correct option. Every dropdown id must appear as `{id}` in the
    template, and every `{id}` in the template must name a dropdown.
    """
    checks = _Checklist()
    _check_dropdown(config, checks)
    return checks.report()


# ---------- Ordering ----------

def _check_ordering(config: Any, checks: _Checklist) -> Optional[OrderingConfig]:
    cfg = _config(OrderingConfig, config, checks, "Ordering")
    if cfg is None:
        return None

    checks.require(len(cfg.items) >= 2, "At least 2 items are required", "Ordering items")
    for n, item in enumerate(cfg.items, start=1):
        checks.require(not _blank(item.id), f"Item {n} ID is required", f"Item {n} ID")
        _check_content(item.content, f"Item {n}", checks)
        checks.require(
            item.correct_position >= 1,
            f"Item {n} must have a positive correct position",
            f"Item {n} correct position",
        )
    _check_positions([i.correct_position for i in cfg.items], "Positions", checks)
    return cfg


def validate_ordering_config(config: Any) -> ValidationReport:
    """Check item count, per-item content and that positions form 1..N exactly once each."""
    checks = _Checklist()
    _check_ordering(config, checks)
    return checks.report()


# ---------- Matching ----------

def _check_matching_column(items: List[MatchingItem], side: str, limit: int, checks: _Checklist) -> None:
    if not checks.require(len(items) >= 2, f"At least 2 {side.lower()} items are required", f"{side} items"):
        return
    if len(items) > limit:
        checks.fail(f"Maximum {limit} {side.lower()} items allowed")
        return
    for n, item in enumerate(items, start=1):
        who = f"{side} item {n}"
        checks.require(not _blank(item.id), f"{who} ID is required", f"{who} ID")
        checks.require(item.position >= 1, f"{who} must have a positive position", f"{who} position")
        _check_content(item.content, who, checks)
    _check_positions([i.position for i in items], f"{side} item positions", checks)


def _check_matching(config: Any, checks: _Checklist) -> Optional[MatchingConfig]:
    cfg = _config(MatchingConfig, config, checks, "Matching")
    if cfg is None:
        return None

    _check_matching_column(cfg.left_items, "Left", MAX_MATCHING_LEFT_ITEMS, checks)
    _check_matching_column(cfg.right_items, "Right", MAX_MATCHING_RIGHT_ITEMS, checks)
    checks.require(bool(cfg.correct_matches), "At least 1 correct match is required", "Correct matches")

    left = {i.id for i in cfg.left_items}
    right = {i.id for i in cfg.right_items}
    for n, match in enumerate(cfg.correct_matches, start=1):
        if match.left_id not in left:
            checks.fail(f"Match {n} refers to unknown left item '{match.left_id}'")
        if match.right_id not in right:
            checks.fail(f"Match {n} refers to unknown right item '{match.right_id}'")
    return cfg


def validate_matching_config(config: Any) -> ValidationReport:
    """Check both columns of a matching question and its correct matches.

    Each column needs 2 to 8 (left) or 2 to 10 (right) items with an id,
    complete content and positions 1..N. At least one correct match is
    required, and every match must refer to items that exist.
    """
    checks = _Checklist()
    _check_matching(config, checks)
    return checks.report()


# ---------- Whole questions ----------

def validate_question(question: Any) -> ValidationReport:
    """Validate a complete question as the quiz editor does before saving it."""
    checks = _Checklist()
    if isinstance(question, Mapping):
        try:
            question = parse_question(dict(question))
        except ValidationError as e:
            for err in e.errors():
                checks.fail(err["msg"])
            return checks.report()
    if not isinstance(question, BaseQuestion):
        checks.fail(f"Not a question: {type(question).__name__}")
        return checks.report()

    checks.require(not _blank(question.text), "Question text is required", "Question text")

    if isinstance(question, SingleChoiceQuestion):
        _check_choice_options(question.options, checks)
        _check_single_choice(question.options, question.correct_option_id, checks)
    elif isinstance(question, MultipleChoiceQuestion):
        _check_choice_options(question.options, checks)
        _check_multiple_choice(question.options, question.answers_data, checks, config_required=True)
    elif isinstance(question, TextInputQuestion):
        _check_text_input(question.answers_data, checks)
    elif isinstance(question, DropdownQuestion):
        cfg = _check_dropdown(question.answers_data, checks)
        if cfg is not None:
            for n, dropdown in enumerate(cfg.dropdowns, start=1):
                checks.require(not _blank(dropdown.label), f"Dropdown {n} label is required", f"Dropdown {n} label")
            if len(cfg.dropdowns) > MAX_DROPDOWNS:
                checks.fail(f"Maximum {MAX_DROPDOWNS} dropdowns allowed")
    elif isinstance(question, OrderingQuestion):
        cfg = _check_ordering(question.answers_data, checks)
        if cfg is not None:
            checks.require(not _blank(cfg.instructions), "Instructions are required", "Instructions")
            if len(cfg.items) > MAX_ORDERING_ITEMS:
                checks.fail(f"Maximum {MAX_ORDERING_ITEMS} items allowed")
    elif isinstance(question, MatchingQuestion):
        cfg = _check_matching(question.answers_data, checks)
        if cfg is not None:
            checks.require(not _blank(cfg.instructions), "Instructions are required", "Instructions")

    return checks.report()


def validation_summary(report: ValidationReport) -> str:
    """Short human-readable status of a report, led by its first error."""
    if report.is_valid and report.status == "complete":
        return "Question is complete"
    if report.errors:
        return f"Has errors: {report.errors[0]}"
    if report.missing_fields:
        return f"Missing: {', '.join(report.missing_fields)}"
    return "Question is incomplete"


def validate_quiz(questions: Sequence[Any]) -> QuizValidationReport:
    """Validate every question of a quiz plus the quiz-level rules."""
    errors: List[str] = []
    if not questions:
        errors.append("At least 1 question is required")

    reports: Dict[str, ValidationReport] = {}
    ids: List[str] = []
    for n, question in enumerate(questions, start=1):
        qid = question.get("id") if isinstance(question, Mapping) else getattr(question, "id", None)
        qid = str(qid) if qid else f"#{n}"
        ids.append(qid)

        key, seen = qid, 1
        while key in reports:
            seen += 1
            key = f"{qid}#{seen}"
        reports[key] = validate_question(question)

    for dup, count in Counter(ids).items():
        if count > 1:
            errors.append(f"Question id '{dup}' is used {count} times")

    return QuizValidationReport(
        is_valid=not errors and all(r.is_valid for r in reports.values()),
        errors=errors,
        questions=reports,
    )
