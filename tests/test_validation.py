"""Tests for catalog checks and per-answer validation."""

import dataclasses

import pytest

from sme_health.assessment.questions import (
    ASSESSMENT_QUESTIONS,
    Category,
    ConditionOperator,
    DisplayCondition,
    Question,
    QuestionType,
    get_question,
)
from sme_health.assessment.validation import (
    CatalogValidationError,
    validate_answer,
    validate_catalog,
)


def test_shipped_catalog_is_valid() -> None:
    validate_catalog(ASSESSMENT_QUESTIONS)


def test_duplicate_ids_rejected() -> None:
    catalog = list(ASSESSMENT_QUESTIONS) + [ASSESSMENT_QUESTIONS[0]]

    with pytest.raises(CatalogValidationError) as excinfo:
        validate_catalog(catalog)

    assert any("duplicate question id" in problem for problem in excinfo.value.problems)


def test_problems_are_collected_together() -> None:
    bad = [
        Question(
            id="zero_weight",
            question="?",
            type=QuestionType.MULTIPLE,
            category=Category.FINANCIAL_HEALTH,
            weight=0,
        ),
        Question(
            id="text_threshold",
            question="?",
            type=QuestionType.YES_NO,
            category=Category.COMPLIANCE_RISK,
            weight=0.1,
            critical_threshold=50,
        ),
    ]

    with pytest.raises(CatalogValidationError) as excinfo:
        validate_catalog(bad)

    problems = excinfo.value.problems
    assert len(problems) == 3
    assert isinstance(excinfo.value, ValueError)


def test_condition_must_reference_earlier_or_onboarding_question() -> None:
    later = Question(
        id="early",
        question="?",
        type=QuestionType.NUMBER,
        category=Category.FINANCIAL_HEALTH,
        weight=0.1,
        conditions=(DisplayCondition("late", ConditionOperator.GREATER_THAN, 1),),
    )
    onboarding = dataclasses.replace(
        later,
        id="retail",
        conditions=(DisplayCondition("business_type", ConditionOperator.CONTAINS, "Retail"),),
    )

    with pytest.raises(CatalogValidationError):
        validate_catalog([later])
    validate_catalog([onboarding])


@pytest.mark.parametrize(
    "question_id,value,is_valid",
    [
        ("receivables_aging", 45, True),
        ("receivables_aging", "45", True),
        ("receivables_aging", 150, False),
        ("receivables_aging", -1, False),
        ("receivables_aging", "lots", False),
        ("receivables_aging", "", False),
        ("cash_runway_days", "days_60_89", True),
        ("cash_runway_days", "60-89 days - Adequate reserves", True),
        ("cash_runway_days", "About two months", False),
        ("cash_runway_days", None, False),
    ],
)
def test_validate_answer(question_id: str, value, is_valid: bool) -> None:
    result = validate_answer(get_question(question_id), value)

    assert result.is_valid is is_valid
    assert (result.error is None) is is_valid


def test_range_message_comes_from_rule() -> None:
    result = validate_answer(get_question("digital_payment_adoption"), 101)
    assert result.error == "Please enter a percentage between 0 and 100"


def test_yes_no_answers() -> None:
    question = Question(
        id="registered",
        question="Registered?",
        type=QuestionType.YES_NO,
        category=Category.COMPLIANCE_RISK,
        weight=0.1,
    )

    assert validate_answer(question, "Yes").is_valid
    assert not validate_answer(question, "perhaps").is_valid
