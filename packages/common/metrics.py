"""Prometheus metrics for quiz grading.

- `quiz_questions_scored_total{question_type, outcome}`: one increment per graded question
- `quiz_grading_seconds`: latency of grading a whole submission
"""

from prometheus_client import Counter, Histogram

from .config import get_settings

QUESTIONS_SCORED = Counter(
    "quiz_questions_scored_total",
    "Total graded questions by type and outcome.",
    ["question_type", "outcome"],
)
GRADING_SECONDS = Histogram(
    "quiz_grading_seconds",
    "Latency of grading a quiz submission (seconds).",
)


def record_question(question_type: str, outcome: str) -> None:
    """Count one graded question; `outcome` is correct/incorrect/unanswered/error."""
    if get_settings().METRICS_ENABLED:
        QUESTIONS_SCORED.labels(question_type=question_type, outcome=outcome).inc()


def observe_grading(seconds: float) -> None:
    if get_settings().METRICS_ENABLED:
        GRADING_SECONDS.observe(seconds)
