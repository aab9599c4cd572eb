"""End-to-end tests for the assessment engine."""

import json
from datetime import datetime

import pytest

from sme_health.assessment.assessment_engine import AssessmentResult, evaluate_assessment
from sme_health.assessment.models import Severity
from sme_health.assessment.questions import ASSESSMENT_QUESTIONS, CATEGORIES
from sme_health.demo_data import DEMO_PROFILES, get_demo_answers
from sme_health.patterns.risk_classification import RiskLevel

FIXED_TIME = datetime(2024, 3, 1, 9, 30, 0)


def test_empty_answers(engine) -> None:
    result = engine.calculate_score({})

    assert result.category_scores == {category: 0 for category in CATEGORIES}
    assert result.compound_risks == []
    assert result.critical_issues == []
    assert result.overall_score == 75
    assert result.risk_level == RiskLevel.LOW
    assert len(result.next_steps.short_term) == 5
    assert result.next_steps.immediate == []
    assert result.funding_readiness.score == 0
    assert result.funding_readiness.tier == "low"


def test_cash_crisis_scenario(engine, crisis_answers) -> None:
    result = engine.calculate_score(crisis_answers)

    assert [issue.id for issue in result.critical_issues] == [
        "cash_runway_days",
        "profit_margin_reality",
        "receivables_aging",
        "cash_flow_crisis",
    ]
    assert [issue.priority for issue in result.critical_issues][:3] == [100, 100, 95]
    assert all(issue.severity == Severity.URGENT for issue in result.critical_issues)
    assert [risk.id for risk in result.compound_risks] == ["cash_flow_crisis"]
    assert result.overall_score == 51
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.category_scores["financial_health"] == 7

    failure = result.predictive_analytics.failure_probability
    assert failure.three_months == pytest.approx(0.825)
    assert failure.six_months == pytest.approx(0.66)
    assert failure.twelve_months == pytest.approx(0.55)

    assert len(result.next_steps.immediate) == 4
    assert result.funding_readiness.tier == "low"
    assert result.funding_readiness.score <= 40
    assert result.benchmark_comparison.percentile == 62


def test_compound_issues_do_not_count_toward_risk_level(engine) -> None:
    result = engine.calculate_score({"cash_runway_days": "days_under_15", "receivables_aging": 40})

    assert [issue.id for issue in result.critical_issues] == [
        "cash_runway_days",
        "receivables_aging",
        "cash_flow_crisis",
    ]
    assert result.urgent_issue_count == 3
    assert result.overall_score == 51
    assert result.risk_level == RiskLevel.HIGH
    assert len(result.next_steps.immediate) == 3
    assert result.funding_readiness.score <= 40


def test_healthy_scenario(engine, healthy_answers) -> None:
    result = engine.calculate_score(healthy_answers)

    assert result.critical_issues == []
    assert result.compound_risks == []
    assert result.overall_score == 100
    assert result.risk_level == RiskLevel.LOW
    assert result.category_scores["compliance_risk"] == 100
    assert result.category_scores["growth_readiness"] == 100
    assert result.category_scores["financial_health"] >= 80
    assert result.funding_readiness.tier == "high"
    assert result.next_steps.strategic == ["Consider growth financing options and expansion planning"]
    assert "Excellent regulatory compliance" in result.strengths_to_leverage
    assert result.predictive_analytics.recovery_time_estimate == "3-6 months with minor adjustments"
    assert len(result.predictive_analytics.survival_factors) == 5


def test_cash_crisis_demo_profile(engine) -> None:
    result = engine.calculate_score(get_demo_answers("cash_crisis"))

    assert [risk.id for risk in result.compound_risks] == [
        "cash_flow_crisis",
        "compliance_shutdown",
        "owner_dependency_crisis",
    ]
    assert result.risk_level == RiskLevel.CRITICAL


def test_concentration_trap_demo_profile(engine) -> None:
    result = engine.calculate_score(get_demo_answers("concentration_trap"))

    assert [risk.id for risk in result.compound_risks] == [
        "customer_concentration_trap",
        "profitability_death_spiral",
    ]
    assert result.overall_score == 43
    assert result.risk_level == RiskLevel.HIGH


@pytest.mark.parametrize("profile", sorted(DEMO_PROFILES))
def test_result_invariants(engine, profile: str) -> None:
    result = engine.calculate_score(get_demo_answers(profile))

    assert 0 <= result.overall_score <= 100
    assert all(0 <= score <= 100 for score in result.category_scores.values())

    priorities = [issue.priority for issue in result.critical_issues]
    assert priorities == sorted(priorities, reverse=True)

    probabilities = [risk.probability for risk in result.compound_risks]
    assert probabilities == sorted(probabilities, reverse=True)


def test_same_answers_same_result(engine, crisis_answers) -> None:
    first = engine.calculate_score(crisis_answers, created_at=FIXED_TIME)
    second = engine.calculate_score(crisis_answers, created_at=FIXED_TIME)

    assert first.to_dict() == second.to_dict()


def test_text_and_tag_answers_agree(engine) -> None:
    by_text = engine.calculate_score({"gra_tax_compliance": "Significantly behind or not registered"}, created_at=FIXED_TIME)
    by_tag = engine.calculate_score({"gra_tax_compliance": "behind_or_unregistered"}, created_at=FIXED_TIME)

    assert by_text.to_dict() == by_tag.to_dict()


def test_answers_are_not_mutated(engine, crisis_answers) -> None:
    before = dict(crisis_answers)
    engine.calculate_score(crisis_answers)
    assert crisis_answers == before


def test_result_survives_json_round_trip(engine) -> None:
    result = engine.calculate_score(get_demo_answers("cash_crisis"), created_at=FIXED_TIME)
    restored = AssessmentResult.from_dict(json.loads(json.dumps(result.to_dict())))

    assert restored == result
    assert restored.risk_level is RiskLevel.CRITICAL
    assert [i.id for i in restored.critical_issues] == [i.id for i in result.critical_issues]


def test_two_overall_views_are_kept_apart(engine, healthy_answers) -> None:
    result = engine.calculate_score(healthy_answers)
    category_average = sum(result.category_scores.values()) / len(result.category_scores)

    assert result.overall_score == 100
    assert result.overall_score != round(category_average)
    assert result.predictive_analytics.growth_potential.current == round(category_average)


def test_evaluate_assessment_with_custom_catalog() -> None:
    catalog = [q for q in ASSESSMENT_QUESTIONS if q.category.value == "compliance_risk"]
    result = evaluate_assessment(catalog, {"gra_tax_compliance": "fully_compliant"}, created_at=FIXED_TIME)

    assert result.category_scores["compliance_risk"] == 100
    assert result.category_scores["financial_health"] == 0
    assert result.created_at == FIXED_TIME


def test_validate_answers_reports_missing(engine) -> None:
    report = engine.validate_answers({"cash_runway_days": "days_90_plus", "receivables_aging": 150})

    assert report["valid"] is False
    assert "receivables_aging" in report["invalid_values"]
    assert "profit_margin_reality" in report["missing_questions"]
    assert "inventory_management" not in report["missing_questions"]
    assert report["total_count"] == len(ASSESSMENT_QUESTIONS) - 1


def test_complete_demo_answers_validate(engine) -> None:
    report = engine.validate_answers(get_demo_answers("cash_crisis"))

    assert report["valid"] is True
    assert report["completion_percentage"] == 100
