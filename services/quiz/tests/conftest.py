"""Shared quiz fixtures for the grading tests."""

import pytest

from packages.schemas.quiz import (
    ChoiceOption,
    DropdownConfig,
    DropdownField,
    DropdownOption,
    DropdownQuestion,
    DropdownScoring,
    ImageContent,
    MixedContent,
    MultipleChoiceConfig,
    MultipleChoiceQuestion,
    OrderingConfig,
    OrderingItem,
    OrderingQuestion,
    PartialCreditRules,
    SingleChoiceQuestion,
    TextContent,
    TextInputConfig,
    TextInputQuestion,
)


@pytest.fixture
def single_choice() -> SingleChoiceQuestion:
    """Options A (correct), B, C."""
    return SingleChoiceQuestion(
        id="q1",
        text="Pick A",
        options=[ChoiceOption(id="A", correct=True, text="Alpha"), ChoiceOption(id="B", text="Beta"), ChoiceOption(id="C", text="Gamma")],
        correct_option_id="A",
    )


@pytest.fixture
def text_input() -> TextInputQuestion:
    """Accepts "42", case-insensitive."""
    return TextInputQuestion(
        id="q2",
        text="The answer?",
        answers_data=TextInputConfig(acceptable_answers=["42"], case_sensitive=False),
    )


@pytest.fixture
def make_multiple_choice():
    """Factory for a question with options a, b (correct), c, d (incorrect)."""

    def _make(method: str = "ALL_OR_NOTHING", rules: PartialCreditRules | None = None) -> MultipleChoiceQuestion:
        return MultipleChoiceQuestion(
            id="mc",
            text="Pick a and b",
            options=[
                ChoiceOption(id="a", correct=True, text="Option a"),
                ChoiceOption(id="b", correct=True, text="Option b"),
                ChoiceOption(id="c", text="Option c"),
                ChoiceOption(id="d", text="Option d"),
            ],
            answers_data=MultipleChoiceConfig(scoring_method=method, partial_credit_rules=rules),
        )

    return _make


@pytest.fixture
def dropdown_config() -> DropdownConfig:
    """Three blanks `{d1} {d2} {d3}`; the correct option of each is `<id>-ok`."""
    return DropdownConfig(
        template="The {d1} sat on the {d2} in the {d3}.",
        dropdowns=[
            DropdownField(
                id=d,
                label=f"Blank {d}",
                options=[
                    DropdownOption(id=f"{d}-ok", text=f"right {d}", is_correct=True),
                    DropdownOption(id=f"{d}-no", text=f"wrong {d}"),
                ],
            )
            for d in ("d1", "d2", "d3")
        ],
    )


@pytest.fixture
def make_dropdown(dropdown_config):
    def _make(scoring: DropdownScoring | None = None) -> DropdownQuestion:
        return DropdownQuestion(
            id="dd",
            text="Fill the blanks",
            answers_data=dropdown_config.model_copy(update={"scoring": scoring}),
        )

    return _make


@pytest.fixture
def ordering_items() -> list[OrderingItem]:
    """Items x, y, z, w whose correct order is w, x, y, z."""
    return [
        OrderingItem(id="x", correct_position=2, content=TextContent(text="Second step")),
        OrderingItem(id="y", correct_position=3, content=ImageContent(image_url="https://img/y.png", alt_text="Third picture")),
        OrderingItem(id="z", correct_position=4, content=MixedContent(text="Fourth", suffix="°C")),
        OrderingItem(id="w", correct_position=1, content=TextContent(text="First step of a rather long procedure")),
    ]


@pytest.fixture
def make_ordering(ordering_items):
    def _make(allow_partial_credit: bool = False, exact_order_required: bool = True) -> OrderingQuestion:
        return OrderingQuestion(
            id="ord",
            text="Put in order",
            answers_data=OrderingConfig(
                instructions="Drag the steps",
                items=ordering_items,
                allow_partial_credit=allow_partial_credit,
                exact_order_required=exact_order_required,
            ),
        )

    return _make
