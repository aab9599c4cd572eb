"""Tests for conditional question sequencing."""

import pytest

from sme_health.assessment.flow import (
    condition_holds,
    get_next_question,
    is_complete,
    should_show_question,
)
from sme_health.assessment.questions import (
    ASSESSMENT_QUESTIONS,
    Category,
    ConditionOperator,
    DisplayCondition,
    OptionRiskLevel,
    Question,
    QuestionOption,
    QuestionType,
)


def _question(qid: str, *conditions: DisplayCondition) -> Question:
    return Question(
        id=qid,
        question=f"{qid}?",
        type=QuestionType.NUMBER,
        category=Category.FINANCIAL_HEALTH,
        weight=0.1,
        conditions=conditions,
    )


CONDITIONAL_CATALOG = [
    _question("revenue"),
    _question("big_only", DisplayCondition("revenue", ConditionOperator.GREATER_THAN, 1000)),
    _question("small_only", DisplayCondition("revenue", ConditionOperator.LESS_THAN, 1000)),
    _question("closing"),
]


def test_first_question_from_start() -> None:
    assert get_next_question(ASSESSMENT_QUESTIONS, -1, {}) == 0


def test_unconditional_catalog_advances_one_by_one() -> None:
    assert get_next_question(ASSESSMENT_QUESTIONS, 0, {}) == 1
    assert get_next_question(ASSESSMENT_QUESTIONS, 5, {}) == 6


def test_end_of_catalog_signals_completion() -> None:
    last = len(ASSESSMENT_QUESTIONS) - 1
    next_index = get_next_question(ASSESSMENT_QUESTIONS, last, {})

    assert next_index == len(ASSESSMENT_QUESTIONS)
    assert is_complete(ASSESSMENT_QUESTIONS, next_index)


@pytest.mark.parametrize(
    "revenue,expected",
    [
        (5000, 1),
        ("5000", 1),
        (10, 2),
    ],
)
def test_numeric_conditions_pick_branch(revenue, expected: int) -> None:
    assert get_next_question(CONDITIONAL_CATALOG, 0, {"revenue": revenue}) == expected


def test_skips_to_closing_after_branch() -> None:
    assert get_next_question(CONDITIONAL_CATALOG, 1, {"revenue": 5000}) == 3


def test_boundary_value_matches_neither_branch() -> None:
    assert get_next_question(CONDITIONAL_CATALOG, 0, {"revenue": 1000}) == 3


def test_missing_dependency_hides_question() -> None:
    condition = DisplayCondition("revenue", ConditionOperator.GREATER_THAN, 1000)
    assert condition_holds(condition, {}) is False
    assert condition_holds(condition, {"revenue": None}) is False


def test_unparseable_number_fails_comparison() -> None:
    condition = DisplayCondition("revenue", ConditionOperator.GREATER_THAN, 1000)
    assert condition_holds(condition, {"revenue": "lots"}) is False


def test_equals_and_contains() -> None:
    equals = DisplayCondition("location", ConditionOperator.EQUALS, "Greater Accra")
    contains = DisplayCondition("business_type", ConditionOperator.CONTAINS, "Retail")

    assert condition_holds(equals, {"location": "Greater Accra"})
    assert not condition_holds(equals, {"location": "Volta Region"})
    assert condition_holds(contains, {"business_type": "Retail/Trading"})
    assert not condition_holds(contains, {"business_type": "Construction"})


def test_inventory_question_only_for_retail() -> None:
    inventory = next(q for q in ASSESSMENT_QUESTIONS if q.id == "inventory_management")

    assert should_show_question(inventory, {"business_type": "Retail/Trading"})
    assert not should_show_question(inventory, {"business_type": "Services/Consulting"})
    assert not should_show_question(inventory, {})


def test_flow_reaches_completion_without_retail() -> None:
    answers = {"business_type": "Services/Consulting"}
    shown = []
    index = get_next_question(ASSESSMENT_QUESTIONS, -1, answers)
    while not is_complete(ASSESSMENT_QUESTIONS, index):
        shown.append(ASSESSMENT_QUESTIONS[index].id)
        index = get_next_question(ASSESSMENT_QUESTIONS, index, answers)

    assert "inventory_management" not in shown
    assert len(shown) == len(ASSESSMENT_QUESTIONS) - 1


FUNDING_SOURCE = Question(
    id="funding_source",
    question="How is the business mainly funded?",
    type=QuestionType.MULTIPLE,
    category=Category.FINANCIAL_HEALTH,
    weight=0.1,
    options=(
        QuestionOption("Bank loan", 60, OptionRiskLevel.MEDIUM, "bank_loan"),
        QuestionOption("Owner savings", 80, OptionRiskLevel.LOW, "owner_savings"),
    ),
)

OPTION_CATALOG = [
    FUNDING_SOURCE,
    _question("loan_by_text", DisplayCondition("funding_source", ConditionOperator.EQUALS, "Bank loan")),
    _question("loan_by_tag", DisplayCondition("funding_source", ConditionOperator.EQUALS, "bank_loan")),
]


@pytest.mark.parametrize("answer", ["Bank loan", "bank_loan"])
def test_equals_matches_option_text_or_tag(answer: str) -> None:
    answers = {"funding_source": answer}

    assert get_next_question(OPTION_CATALOG, 0, answers) == 1
    assert get_next_question(OPTION_CATALOG, 1, answers) == 2


@pytest.mark.parametrize("answer", ["Owner savings", "owner_savings"])
def test_equals_rejects_other_option_in_either_form(answer: str) -> None:
    assert get_next_question(OPTION_CATALOG, 0, {"funding_source": answer}) == len(OPTION_CATALOG)


def test_equals_without_catalog_question_compares_raw_values() -> None:
    condition = DisplayCondition("funding_source", ConditionOperator.EQUALS, "Bank loan")

    assert condition_holds(condition, {"funding_source": "bank_loan"}) is False
    assert condition_holds(condition, {"funding_source": "bank_loan"}, FUNDING_SOURCE) is True
