"""Tests for the rule-based failure outlook."""

import pytest

from sme_health.assessment.predictive import PredictiveAnalytics, estimate_recovery_time
from sme_health.assessment.risk_analyzer import RiskCorrelationAnalyzer


@pytest.fixture
def predictive() -> PredictiveAnalytics:
    return PredictiveAnalytics()


def test_baseline_without_risks(predictive) -> None:
    failure = predictive.failure_probability({})

    assert failure.twelve_months == pytest.approx(0.15)
    assert failure.six_months == pytest.approx(0.18)
    assert failure.three_months == pytest.approx(0.225)


def test_cash_crisis_raises_probability(predictive, crisis_answers) -> None:
    failure = predictive.failure_probability(crisis_answers)

    assert failure.twelve_months == pytest.approx(0.55)
    assert failure.six_months == pytest.approx(0.66)
    assert failure.three_months == pytest.approx(0.825)


def test_probabilities_capped(predictive) -> None:
    answers = {
        "cash_runway_days": "days_under_15",
        "profit_margin_reality": "margin_below_5",
        "gra_tax_compliance": "months_behind",
        "competitive_differentiation": "price_only",
    }
    failure = predictive.failure_probability(answers)

    # 0.15 + 0.40 + 0.35 + 0.25 = 1.15 before capping
    assert failure.three_months == 0.95
    assert failure.six_months == 0.95
    assert failure.twelve_months == 0.95


def test_horizons_never_increase_with_time(predictive) -> None:
    for answers in ({}, {"key_person_dependency": "likely_collapse"}, {"gra_tax_compliance": "months_behind"}):
        failure = predictive.failure_probability(answers)
        assert failure.three_months >= failure.six_months >= failure.twelve_months


@pytest.mark.parametrize(
    "six_months,expected",
    [
        (0.95, "12-18 months with aggressive intervention"),
        (0.81, "12-18 months with aggressive intervention"),
        (0.8, "8-12 months with focused improvements"),
        (0.66, "8-12 months with focused improvements"),
        (0.5, "6-9 months with moderate changes"),
        (0.4, "3-6 months with minor adjustments"),
        (0.18, "3-6 months with minor adjustments"),
    ],
)
def test_recovery_time(six_months: float, expected: str) -> None:
    assert estimate_recovery_time(six_months) == expected


def test_survival_factors_follow_positive_rules(predictive, healthy_answers) -> None:
    factors = predictive.survival_factors(healthy_answers)

    assert len(factors) == 5
    assert factors[-1] == "Digital payment adoption improves cash flow and reduces risks"


def test_critical_interventions_only_from_critical_risks(predictive) -> None:
    analyzer = RiskCorrelationAnalyzer()
    risks = analyzer.analyze_compound_risks({
        "key_person_dependency": "likely_collapse",
        "gra_tax_compliance": "months_behind",
    })
    interventions = predictive.critical_interventions(risks)

    assert interventions == [
        "Immediate compliance audit",
        "Engage tax advisor/accountant",
        "Set up payment plans with authorities",
        "Complete all outstanding registrations",
    ]


def test_growth_potential_caps_at_100(predictive) -> None:
    growth = predictive.growth_potential({"a": 80, "b": 90})

    assert growth.current == 85
    assert growth.with_recommendations == 100
    assert growth.with_accelerator_program == 100


def test_calculate_builds_full_block(predictive, crisis_answers) -> None:
    risks = RiskCorrelationAnalyzer().analyze_compound_risks(crisis_answers)
    metrics = predictive.calculate(crisis_answers, risks)

    assert metrics.recovery_time_estimate == "8-12 months with focused improvements"
    assert len(metrics.critical_interventions) == 4
    assert metrics.growth_potential is None
    assert metrics.to_dict()["failure_probability"]["6_months"] == pytest.approx(0.66)
