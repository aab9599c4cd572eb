"""
Patterns Module for SME Health Assessment

Reusable analytical patterns: weighted scoring, risk classification and
benchmarking.
"""

from .risk_classification import (
    RiskClassifier,
    RiskLevel,
    RiskThreshold,
    RiskClassification,
    TierClassifier,
    create_risk_level_classifier,
    create_funding_tier_classifier
)

from .weighted_scoring import (
    WeightedScoringEngine,
    ScoreContribution,
    GroupScore,
    ScoreResult,
    round_half_up,
    clamp
)

from .benchmark_engine import (
    BenchmarkEngine,
    BenchmarkComparison,
    CohortStatistics,
    create_sme_benchmarks
)

__all__ = [
    # Risk Classification
    'RiskClassifier',
    'RiskLevel',
    'RiskThreshold',
    'RiskClassification',
    'TierClassifier',
    'create_risk_level_classifier',
    'create_funding_tier_classifier',
    # Weighted Scoring
    'WeightedScoringEngine',
    'ScoreContribution',
    'GroupScore',
    'ScoreResult',
    'round_half_up',
    'clamp',
    # Benchmarking
    'BenchmarkEngine',
    'BenchmarkComparison',
    'CohortStatistics',
    'create_sme_benchmarks',
]
