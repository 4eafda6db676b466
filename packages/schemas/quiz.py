"""Quiz schemas: questions, type-specific configuration, submissions and score reports."""

from pydantic import BaseModel, Field, TypeAdapter
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

QuestionType = Literal[
    "SINGLE_CHOICE", "MULTIPLE_CHOICE", "TEXT_INPUT", "DROPDOWN", "ORDERING", "MATCHING"
]
ScoringMethod = Literal["ALL_OR_NOTHING", "PARTIAL_CREDIT"]
CompletionStatus = Literal["complete", "partial", "incomplete", "error"]

# str: single choice / text input, list: multiple choice / ordering, dict: dropdown
Answer = Union[str, List[str], Dict[str, str]]


class ChoiceOption(BaseModel):
    """A selectable option of a single or multiple choice question."""
    id: str
    correct: bool = False
    text: Optional[str] = None


# ---------- Multiple choice ----------

class PartialCreditRules(BaseModel):
    """Points per correct pick, penalty per wrong pick (<= 0) and the score floor."""
    correct_selection_points: float = 1
    incorrect_selection_penalty: float = 0
    min_score: float = 0


class MultipleChoiceConfig(BaseModel):
    """Scoring configuration of a multiple choice question."""
    scoring_method: ScoringMethod = "ALL_OR_NOTHING"
    min_selections: int = 1
    max_selections: Optional[int] = None
    partial_credit_rules: Optional[PartialCreditRules] = None


# ---------- Text input ----------

class TextInputConfig(BaseModel):
    """Accepted free-text answers and the comparison mode."""
    acceptable_answers: List[str] = []
    case_sensitive: bool = False


# ---------- Dropdown ----------

class DropdownOption(BaseModel):
    id: str = ""
    text: str = ""
    is_correct: bool = False


class DropdownField(BaseModel):
    """One blank of a dropdown question, referenced as `{id}` in the template."""
    id: str = ""
    label: str = ""
    options: List[DropdownOption] = []


class DropdownScoring(BaseModel):
    points_per_dropdown: float = 1
    require_all_correct: bool = True
    penalize_incorrect: bool = False


class DropdownConfig(BaseModel):
    """Fill-in-the-blank template plus the dropdowns it references."""
    template: str = ""
    dropdowns: List[DropdownField] = []
    scoring: Optional[DropdownScoring] = None


# ---------- Ordering ----------

class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""


class ImageContent(BaseModel):
    type: Literal["image"] = "image"
    image_url: str = ""
    alt_text: str = ""


class MixedContent(BaseModel):
    type: Literal["mixed"] = "mixed"
    text: Optional[str] = None
    image_url: Optional[str] = None
    suffix: Optional[str] = None


OrderingContent = Annotated[
    Union[TextContent, ImageContent, MixedContent], Field(discriminator="type")
]


class OrderingItem(BaseModel):
    """An item to arrange; `correct_position` is 1-based."""
    id: str = ""
    correct_position: int = 0
    content: OrderingContent


class OrderingConfig(BaseModel):
    """Items to arrange and the partial-credit policy."""
    instructions: str = ""
    items: List[OrderingItem] = []
    allow_partial_credit: bool = False
    exact_order_required: bool = True


# ---------- Matching ----------

class MatchingItem(BaseModel):
    """An entry of the left or right column; `position` is 1-based within its column."""
    id: str = ""
    position: int = 0
    content: OrderingContent


class CorrectMatch(BaseModel):
    left_id: str
    right_id: str
    explanation: Optional[str] = None


class MatchingConfig(BaseModel):
    instructions: str = ""
    left_items: List[MatchingItem] = []
    right_items: List[MatchingItem] = []
    correct_matches: List[CorrectMatch] = []
    distractors: List[str] = []


# ---------- Questions ----------

class BaseQuestion(BaseModel):
    """Fields shared by every question variant."""
    id: str
    text: str = ""
    options: List[ChoiceOption] = []
    correct_option_id: Optional[str] = None


class SingleChoiceQuestion(BaseQuestion):
    question_type: Literal["SINGLE_CHOICE"] = "SINGLE_CHOICE"


class MultipleChoiceQuestion(BaseQuestion):
    question_type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    answers_data: Optional[MultipleChoiceConfig] = None


class TextInputQuestion(BaseQuestion):
    question_type: Literal["TEXT_INPUT"] = "TEXT_INPUT"
    answers_data: Optional[TextInputConfig] = None


class DropdownQuestion(BaseQuestion):
    question_type: Literal["DROPDOWN"] = "DROPDOWN"
    answers_data: Optional[DropdownConfig] = None


class OrderingQuestion(BaseQuestion):
    question_type: Literal["ORDERING"] = "ORDERING"
    answers_data: Optional[OrderingConfig] = None


class MatchingQuestion(BaseQuestion):
    """Validated like the other types but has no scorer."""
    question_type: Literal["MATCHING"] = "MATCHING"
    answers_data: Optional[MatchingConfig] = None


Question = Annotated[
    Union[
        SingleChoiceQuestion,
        MultipleChoiceQuestion,
        TextInputQuestion,
        DropdownQuestion,
        OrderingQuestion,
        MatchingQuestion,
    ],
    Field(discriminator="question_type"),
]

_question_adapter = TypeAdapter(Question)
_question_list_adapter = TypeAdapter(List[Question])


def parse_question(data: Dict[str, Any]) -> Question:
    """Build the question variant selected by `data["question_type"]`."""
    return _question_adapter.validate_python(data)


def parse_questions(data: List[Dict[str, Any]]) -> List[Question]:
    """Build a list of question variants, preserving order."""
    return _question_list_adapter.validate_python(data)


# ---------- Submissions and results ----------

class QuizSubmission(BaseModel):
    """A learner's answers keyed by question id.

    Values are kept as submitted; a wrong-shaped answer fails only its own
    question when the quiz is scored.
    """
    answers: Dict[str, Any] = {}


class DropdownResultDetail(BaseModel):
    """Outcome of a single dropdown, for feedback rendering."""
    dropdown_id: str
    label: str = ""
    selected_option_id: Optional[str] = None
    selected_text: Optional[str] = None
    is_correct: bool
    correct_options: List[str] = []


class OrderingResultDetail(BaseModel):
    """Submitted vs. correct order; positions are zero-based indices."""
    correct_order: List[str]
    user_order: List[str]
    correct_positions: List[int] = []
    incorrect_positions: List[int] = []


class ScoreResult(BaseModel):
    """Graded outcome of one question."""
    question_id: str
    selected_answers: Answer
    correct_answers: Union[str, List[str], Dict[str, List[str]]]
    is_correct: bool
    score: float
    max_score: float
    explanation: Optional[str] = None
    details: Optional[Union[List[DropdownResultDetail], OrderingResultDetail]] = None


class QuizScoreResult(BaseModel):
    """Aggregate report of a quiz submission; one result per question, in order."""
    total_score: float
    max_total_score: float
    percentage: float
    correct_questions: int
    total_questions: int
    question_results: List[ScoreResult] = []


class ValidationReport(BaseModel):
    """Outcome of an authoring-time configuration check; lists every problem found.

    `completion_percentage` is the share of checked requirements that are met
    and `missing_fields` names the unmet ones an author still has to fill in.
    """
    is_valid: bool
    status: CompletionStatus = "complete"
    completion_percentage: int = 100
    errors: List[str] = []
    missing_fields: List[str] = []


class QuizValidationReport(BaseModel):
    """Quiz-level errors plus one `ValidationReport` per question.

    Reports are keyed by question id; a repeated id gets a `#2`, `#3`, ...
    suffix so every question keeps its own report.
    """
    is_valid: bool
    errors: List[str] = []
    questions: Dict[str, ValidationReport] = {}
