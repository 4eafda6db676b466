"""
services.quiz.loader

- Reads quiz and submission documents from JSON or YAML files.
- YAML is read as UTF-8, falling back to UTF-8 with BOM.
- Validation errors are logged and re-raised unchanged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from packages.schemas.quiz import Question, QuizSubmission, parse_questions

log = logging.getLogger("quiz.loader")


def _load_from_json(path: Path) -> Any:
    """Load a JSON file using UTF-8 encoding."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_from_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError:
        with open(path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    return yaml.safe_load(text)


def load_document(path: str | Path) -> Dict[str, Any]:
    """Detect file type by suffix, load it and require a mapping at the top level."""
    path = Path(path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        data = _load_from_json(path)
    elif suffix in (".yaml", ".yml"):
        data = _load_from_yaml(path)
    else:
        raise ValueError(f"Unsupported file type: {path.suffix}")

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def load_quiz(path: str | Path) -> List[Question]:
    """
    Load the `questions` list of a quiz document.

    Raises:
        FileNotFoundError / ValueError / ValidationError
    """
    doc = load_document(path)
    try:
        return parse_questions(doc.get("questions") or [])
    except ValidationError as e:
        log.error("Invalid quiz document at %s:\n%s", path, e.json(indent=2))
        raise


def load_submission(path: str | Path) -> QuizSubmission:
    """Load a submission document `{"answers": {question_id: answer}}`."""
    doc = load_document(path)
    try:
        return QuizSubmission.model_validate(doc)
    except ValidationError as e:
        log.error("Invalid submission document at %s:\n%s", path, e.json(indent=2))
        raise
