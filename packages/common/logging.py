"""Logging utilities for the quiz grading engine.

Provides:
- `set_submission_id` / `get_submission_id` to store and read a per-submission correlation id in a ContextVar
- `JSONFormatter` to render logs as single-line JSON (optionally with submission_id)
- `configure_logging` to set up stdout logging with JSON or plain text output
"""

import logging, sys, json, time
from contextvars import ContextVar
from typing import TextIO

_submission_id: ContextVar[str | None] = ContextVar("submission_id", default=None)


def set_submission_id(sid: str | None) -> None:
    """Set/clear the correlation submission id used in log records.

    Args:
        sid: The submission id to store; pass None to clear it.
    """
    _submission_id.set(sid)


def get_submission_id() -> str | None:
    """Return the submission id of the current context, if any."""
    return _submission_id.get()


class JSONFormatter(logging.Formatter):
    """Format log records as compact JSON with timestamp and optional context."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize a `logging.LogRecord` to a JSON string.

        Includes: level, epoch timestamp (seconds, 3dp), logger name, message,
        optional `submission_id`, and exception info when present.
        """
        base = {
            "level": record.levelname,
            "ts": round(time.time(), 3),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        sid = get_submission_id()
        if sid:
            base["submission_id"] = sid
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def configure_logging(level: int | str = "INFO", json_logs: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Configure root logging to `stream` (stdout by default).

    Args:
        level: Logging level as int or string (e.g., logging.INFO or "INFO").
        json_logs: If True, records are rendered by `JSONFormatter`;
            otherwise as human-readable text.
        stream: Target stream; the CLI passes stderr to keep stdout for results.

    Returns:
        A logger instance named "quiz".
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        JSONFormatter()
        if json_logs
        else logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)
    return logging.getLogger("quiz")
