"""Tests for compound risk detection and the risk-adjusted score."""

import pytest

from sme_health.assessment.models import RiskSeverity
from sme_health.assessment.risk_analyzer import RiskCorrelationAnalyzer
from sme_health.assessment.risk_rules import COMPOUND_RISK_RULES, POSITIVE_FACTOR_RULES, get_rule


@pytest.fixture
def analyzer() -> RiskCorrelationAnalyzer:
    return RiskCorrelationAnalyzer()


def _ids(risks) -> list:
    return [risk.id for risk in risks]


def test_rule_catalog_order() -> None:
    assert [rule.id for rule in COMPOUND_RISK_RULES] == [
        "cash_flow_crisis",
        "customer_concentration_trap",
        "owner_dependency_crisis",
        "compliance_shutdown",
        "profitability_death_spiral",
    ]
    assert [rule.bonus for rule in POSITIVE_FACTOR_RULES] == [10, 8, 12, 15, 0]


def test_get_rule_unknown_raises() -> None:
    assert get_rule("compliance_shutdown").probability == 0.80
    with pytest.raises(KeyError):
        get_rule("alien_invasion")


def test_no_answers_no_risks(analyzer: RiskCorrelationAnalyzer) -> None:
    analysis = analyzer.analyze({})

    assert analysis.compound_risks == []
    assert analysis.risk_adjusted_score == 75
    assert analysis.positive_factors == []


def test_cash_flow_crisis_from_receivables(analyzer, crisis_answers) -> None:
    analysis = analyzer.analyze(crisis_answers)

    assert _ids(analysis.compound_risks) == ["cash_flow_crisis"]
    risk = analysis.compound_risks[0]
    assert risk.severity == RiskSeverity.CRITICAL
    assert risk.probability == 0.95
    # 75 - 25 x 0.95 = 51.25
    assert analysis.risk_adjusted_score == 51


@pytest.mark.parametrize(
    "answers,detected",
    [
        ({"cash_runway_days": "days_15_29", "receivables_aging": 31}, True),
        ({"cash_runway_days": "days_15_29", "receivables_aging": 30}, False),
        ({"cash_runway_days": "days_15_29", "profit_margin_reality": "margin_5_10"}, True),
        ({"cash_runway_days": "days_30_59", "receivables_aging": 90}, False),
        ({"cash_runway_days": "days_under_15"}, False),
        ({"cash_runway_days": "days_under_15", "receivables_aging": "n/a"}, False),
    ],
)
def test_cash_flow_crisis_conditions(analyzer, answers: dict, detected: bool) -> None:
    assert ("cash_flow_crisis" in _ids(analyzer.analyze_compound_risks(answers))) is detected


def test_concentration_trap_needs_price_competition(analyzer) -> None:
    trapped = {"customer_concentration_risk": 75, "competitive_differentiation": "price_only"}
    branded = {"customer_concentration_risk": 75, "competitive_differentiation": "unique_brand"}

    assert "customer_concentration_trap" in _ids(analyzer.analyze_compound_risks(trapped))
    assert "customer_concentration_trap" not in _ids(analyzer.analyze_compound_risks(branded))


def test_risks_sorted_by_probability(analyzer) -> None:
    answers = {
        "profit_margin_reality": "Below 5% or breakeven - Unsustainable",
        "competitive_differentiation": "Lower prices than competitors",
        "key_person_dependency": "Business would likely collapse",
        "gra_tax_compliance": "Significantly behind or not registered",
        "customer_concentration_risk": 90,
        "cash_runway_days": "Less than 15 days - Critical danger",
    }
    risks = analyzer.analyze_compound_risks(answers)

    assert _ids(risks) == [
        "cash_flow_crisis",
        "customer_concentration_trap",
        "compliance_shutdown",
        "owner_dependency_crisis",
        "profitability_death_spiral",
    ]
    probabilities = [risk.probability for risk in risks]
    assert probabilities == sorted(probabilities, reverse=True)


def test_penalties_clamp_at_zero(analyzer) -> None:
    answers = {
        "profit_margin_reality": "margin_below_5",
        "competitive_differentiation": "price_only",
        "key_person_dependency": "likely_collapse",
        "gra_tax_compliance": "behind_or_unregistered",
        "customer_concentration_risk": 90,
        "cash_runway_days": "days_under_15",
    }
    # 75 - 23.75 - 21.25 - 20 - 11.25 - 10.5 < 0
    assert analyzer.analyze(answers).risk_adjusted_score == 0


def test_bonuses_clamp_at_100(analyzer, healthy_answers) -> None:
    analysis = analyzer.analyze(healthy_answers)

    assert analysis.compound_risks == []
    assert analysis.risk_adjusted_score == 100
    assert analysis.positive_factors == [
        "strong_financials",
        "good_governance",
        "diversified_revenue",
        "competitive_advantage",
    ]


def test_single_bonus(analyzer) -> None:
    answers = {"competitive_differentiation": "Better quality or service than competitors"}
    assert analyzer.analyze(answers).risk_adjusted_score == 90


def test_diversified_revenue_needs_an_answer(analyzer) -> None:
    assert "diversified_revenue" not in analyzer.analyze({}).positive_factors
    assert "diversified_revenue" in analyzer.analyze({"customer_concentration_risk": 39}).positive_factors
    assert "diversified_revenue" not in analyzer.analyze({"customer_concentration_risk": 40}).positive_factors


def test_risk_carries_rule_category(analyzer) -> None:
    risks = analyzer.analyze_compound_risks({"key_person_dependency": "significant_problems"})

    assert risks[0].category == "operational_resilience"
    assert risks[0].severity == RiskSeverity.HIGH
