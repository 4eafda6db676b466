# services/quiz/feedback.py
"""Human-readable feedback for graded questions.

Functions:
- item_display_text: short label for an ordering item (text, alt text or text + suffix).
- ordering_mismatch_feedback: both orders rendered side by side.
- ordering_partial_feedback: how many items sit in the right slot.
- dropdown_feedback: "Perfect!", "None correct" or the list of wrong blanks.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence

from packages.common.config import get_settings
from packages.schemas.quiz import DropdownResultDetail, OrderingItem

ORDER_SEPARATOR = " → "


def _truncate(text: str, limit: int) -> str:
    """Cut `text` to `limit` characters, marking the cut with an ellipsis."""
    text = text.strip()
    return text if len(text) <= limit else text[:limit] + "..."


def item_display_text(item: OrderingItem, max_chars: Optional[int] = None) -> str:
    """Return the label used for `item` in feedback strings.

    Text content is truncated to `max_chars` (defaults to the
    `FEEDBACK_MAX_CHARS` setting), images use their alt text and mixed
    content joins text and suffix before truncating.
    """
    limit = max_chars or get_settings().FEEDBACK_MAX_CHARS
    content = item.content
    if content.type == "text":
        return _truncate(content.text, limit)
    if content.type == "image":
        return content.alt_text or "Image"
    label = " ".join(p.strip() for p in (content.text, content.suffix) if p and p.strip())
    if label:
        return _truncate(label, limit)
    return "Image" if content.image_url else item.id


def format_order(ids: Sequence[str], items: Sequence[OrderingItem], max_chars: Optional[int] = None) -> str:
    """Render a sequence of item ids as `A → B → C`; unknown ids are shown as-is."""
    by_id: Dict[str, OrderingItem] = {i.id: i for i in items}
    return ORDER_SEPARATOR.join(
        item_display_text(by_id[i], max_chars) if i in by_id else i for i in ids
    )


def ordering_mismatch_feedback(submitted: Sequence[str], correct_order: Sequence[str], items: Sequence[OrderingItem]) -> str:
    return (
        f"Incorrect order. Correct order: {format_order(correct_order, items)}. "
        f"Your order: {format_order(submitted, items)}."
    )


def ordering_partial_feedback(correct_positions: int, total: int) -> str:
    return f"{correct_positions} of {total} items in the correct position"


def dropdown_feedback(details: List[DropdownResultDetail]) -> str:
    """Summarize dropdown outcomes, itemizing expected vs. selected for each wrong blank."""
    correct = sum(1 for d in details if d.is_correct)
    if correct == len(details):
        return "Perfect!"
    if correct == 0:
        return "None correct"
    wrong = [
        f"{d.label or d.dropdown_id}: expected {' or '.join(d.correct_options)}, "
        f"selected {d.selected_text or 'nothing'}"
        for d in details
        if not d.is_correct
    ]
    return f"{correct}/{len(details)} correct. " + "; ".join(wrong)
