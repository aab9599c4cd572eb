"""Tests for the reusable scoring, classification and benchmark patterns."""

import pytest

from sme_health.patterns.benchmark_engine import BenchmarkEngine
from sme_health.patterns.risk_classification import (
    RiskClassifier,
    RiskLevel,
    TierClassifier,
    create_funding_tier_classifier,
)
from sme_health.patterns.weighted_scoring import (
    ScoreContribution,
    WeightedScoringEngine,
    round_half_up,
)


@pytest.mark.parametrize(
    "value,expected",
    [(0.5, 1), (1.5, 2), (2.5, 3), (51.25, 51), (62.19, 62), (-0.4, 0)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_weighted_engine_averages_per_group() -> None:
    engine = WeightedScoringEngine(["a", "b"])
    result = engine.score([
        ScoreContribution("a", 100, 0.2, "q1"),
        ScoreContribution("a", 10, 0.18, "q2"),
    ])

    assert result.scores == {"a": 57, "b": 0}


def test_weighted_engine_ignores_unknown_groups_and_zero_weights() -> None:
    engine = WeightedScoringEngine(["a"])
    result = engine.score([
        ScoreContribution("zzz", 100, 1.0, "stray"),
        ScoreContribution("a", 100, 0, "weightless"),
        ScoreContribution("a", 40, 1.0, "real"),
    ])

    assert result.scores == {"a": 40}
    assert [c.source_id for c in result.ignored] == ["stray", "weightless"]


def test_weighted_engine_needs_groups() -> None:
    with pytest.raises(ValueError):
        WeightedScoringEngine([])


def test_risk_classifier_summary_lists_all_levels() -> None:
    summary = RiskClassifier().get_threshold_summary()
    assert [row["level"] for row in summary] == [level.value for level in RiskLevel]


def test_risk_classification_to_dict() -> None:
    data = RiskClassifier().classify(30, 0).to_dict()

    assert data["level"] == "Critical Risk"
    assert data["level_priority"] == 1


@pytest.mark.parametrize(
    "score,tier",
    [(75, "high"), (74.99, "medium"), (60, "medium"), (59.9, "low"), (0, "low")],
)
def test_funding_tiers(score: float, tier: str) -> None:
    assert create_funding_tier_classifier().classify(score) == tier


def test_tier_classifier_floor() -> None:
    tiers = TierClassifier({50: "pass"}, floor_tier="fail")
    assert tiers.classify(10) == "fail"


def test_benchmark_compare() -> None:
    comparison = BenchmarkEngine().compare(41)

    assert comparison.to_dict() == {
        "your_score": 41,
        "industry_average": 58,
        "top_performers": 82,
        "percentile": 50,
    }


def test_cohort_statistics() -> None:
    stats = BenchmarkEngine().cohort_statistics([40, 55, 70, 82], score=55)

    assert stats.count == 4
    assert stats.mean == pytest.approx(61.75)
    assert stats.median == pytest.approx(62.5)
    assert stats.percentile_rank == pytest.approx(37.5)


def test_empty_cohort() -> None:
    stats = BenchmarkEngine().cohort_statistics([], score=50)

    assert stats.count == 0
    assert stats.percentile_rank is None
