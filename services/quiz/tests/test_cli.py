"""Tests for the quizgrade command line and the document loader."""

import json
import logging

import pytest

from services.quiz.cli import main
from services.quiz.loader import load_document, load_quiz

QUIZ_YAML = """
questions:
  - id: q1
    question_type: SINGLE_CHOICE
    text: Pick A
    correct_option_id: A
    options:
      - {id: A, text: Alpha, correct: true}
      - {id: B, text: Beta}
  - id: q2
    question_type: TEXT_INPUT
    text: The answer?
    answers_data:
      acceptable_answers: ["42"]
"""


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """`main` reconfigures the root logger; put the previous handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def quiz_file(tmp_path):
    path = tmp_path / "quiz.yaml"
    path.write_text(QUIZ_YAML, encoding="utf-8")
    return path


def test_load_quiz_builds_typed_questions(quiz_file) -> None:
    questions = load_quiz(quiz_file)
    if [type(q).__name__ for q in questions] != ["SingleChoiceQuestion", "TextInputQuestion"]:
        pytest.fail(f"unexpected question types {questions}")


def test_load_document_rejects_unknown_suffix(tmp_path) -> None:
    path = tmp_path / "quiz.txt"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_document(path)


def test_grade_prints_report(quiz_file, tmp_path, capsys) -> None:
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"answers": {"q1": "A", "q2": " 42 "}}), encoding="utf-8")
    code = main(["grade", str(quiz_file), str(answers), "--submission-id", "sub-1"])
    if code != 0:
        pytest.fail(f"expected exit 0, got {code}")
    report = json.loads(capsys.readouterr().out)
    if report["percentage"] != 100 or report["correct_questions"] != 2:
        pytest.fail(f"unexpected report {report}")


def test_validate_exit_code(quiz_file, tmp_path, capsys) -> None:
    if main(["validate", str(quiz_file)]) != 0:
        pytest.fail("valid quiz should exit 0")
    capsys.readouterr()

    broken = tmp_path / "broken.json"
    broken.write_text(
        json.dumps({"questions": [{"id": "t", "question_type": "TEXT_INPUT", "text": "?"}]}),
        encoding="utf-8",
    )
    if main(["validate", str(broken)]) != 1:
        pytest.fail("invalid quiz should exit 1")
    report = json.loads(capsys.readouterr().out)
    if report["questions"]["t"]["errors"] != ["Text input configuration is required"]:
        pytest.fail(f"unexpected report {report}")


def test_missing_file_exit_code(tmp_path) -> None:
    if main(["validate", str(tmp_path / "nope.yaml")]) != 2:
        pytest.fail("missing input should exit 2")


@pytest.mark.parametrize(
    "bad, explanation",
    [(None, "No answer provided"), (7, "Error processing answer"), (["a", 1], "Error processing answer")],
)
def test_grade_keeps_going_past_a_malformed_answer(quiz_file, tmp_path, capsys, bad, explanation) -> None:
    """One wrong-shaped answer costs only its own question; the file is still graded."""
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"answers": {"q1": bad, "q2": "42"}}), encoding="utf-8")
    code = main(["grade", str(quiz_file), str(answers)])
    if code != 0:
        pytest.fail(f"expected exit 0, got {code}")
    report = json.loads(capsys.readouterr().out)
    first, second = report["question_results"]
    if first["score"] != 0 or first["explanation"] != explanation:
        pytest.fail(f"unexpected result for the malformed answer {first}")
    if second["score"] != 1 or (report["total_score"], report["max_total_score"]) != (1, 2):
        pytest.fail(f"remaining answers must still be graded: {report}")
