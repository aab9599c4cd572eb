"""
Predictive Analytics

Deterministic, explainable failure outlook. A baseline failure probability
is raised by fixed increments for each matching compound risk rule, then
scaled for 3, 6 and 12 month horizons and capped at 0.95.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..patterns.weighted_scoring import round_half_up
from .models import CompoundRisk, FailureProbability, GrowthPotential, PredictiveMetrics, RiskSeverity
from .risk_analyzer import RiskCorrelationAnalyzer

logger = logging.getLogger(__name__)


BASELINE_FAILURE_PROBABILITY = 0.15  # Ghana SME baseline
MAX_FAILURE_PROBABILITY = 0.95

HORIZON_MULTIPLIERS = {
    "3_months": 1.5,
    "6_months": 1.2,
    "12_months": 1.0
}

# (six-month probability strictly above, estimate), checked top down
RECOVERY_TIME_STEPS = [
    (0.8, "12-18 months with aggressive intervention"),
    (0.6, "8-12 months with focused improvements"),
    (0.4, "6-9 months with moderate changes"),
]
DEFAULT_RECOVERY_TIME = "3-6 months with minor adjustments"

RECOMMENDATIONS_UPLIFT = 25
ACCELERATOR_UPLIFT = 40


def estimate_recovery_time(six_month_probability: float) -> str:
    for floor, estimate in RECOVERY_TIME_STEPS:
        if six_month_probability > floor:
            return estimate
    return DEFAULT_RECOVERY_TIME


class PredictiveAnalytics:
    """Failure probabilities, survival factors and interventions for one answer set."""

    def __init__(self, analyzer: Optional[RiskCorrelationAnalyzer] = None):
        self.analyzer = analyzer or RiskCorrelationAnalyzer()

    def base_probability(self, answers: Mapping[str, Any]) -> float:
        """Baseline plus the increment of every matching risk rule."""
        probability = BASELINE_FAILURE_PROBABILITY
        for rule in self.analyzer.matching_rules(answers):
            probability += rule.failure_increment
        return probability

    def failure_probability(self, answers: Mapping[str, Any]) -> FailureProbability:
        base = self.base_probability(answers)
        horizons = {
            horizon: round(min(MAX_FAILURE_PROBABILITY, base * multiplier), 4)
            for horizon, multiplier in HORIZON_MULTIPLIERS.items()
        }
        return FailureProbability(
            three_months=horizons["3_months"],
            six_months=horizons["6_months"],
            twelve_months=horizons["12_months"]
        )

    def survival_factors(self, answers: Mapping[str, Any]) -> List[str]:
        return [rule.survival_factor for rule in self.analyzer.matching_positive_rules(answers)]

    @staticmethod
    def critical_interventions(compound_risks: Sequence[CompoundRisk]) -> List[str]:
        """Mitigations of critical risks, first occurrence kept."""
        interventions: List[str] = []
        for risk in compound_risks:
            if risk.severity != RiskSeverity.CRITICAL:
                continue
            for action in risk.mitigation:
                if action not in interventions:
                    interventions.append(action)
        return interventions

    @staticmethod
    def growth_potential(category_scores: Dict[str, int]) -> GrowthPotential:
        current = round_half_up(sum(category_scores.values()) / len(category_scores)) if category_scores else 0
        return GrowthPotential(
            current=current,
            with_recommendations=min(100, current + RECOMMENDATIONS_UPLIFT),
            with_accelerator_program=min(100, current + ACCELERATOR_UPLIFT)
        )

    def calculate(
        self,
        answers: Mapping[str, Any],
        compound_risks: Sequence[CompoundRisk],
        category_scores: Optional[Dict[str, int]] = None
    ) -> PredictiveMetrics:
        """Build the full predictive block."""
        failure = self.failure_probability(answers)
        logger.debug(
            f"Failure probability 3m={failure.three_months} "
            f"6m={failure.six_months} 12m={failure.twelve_months}"
        )

        return PredictiveMetrics(
            failure_probability=failure,
            survival_factors=self.survival_factors(answers),
            critical_interventions=self.critical_interventions(compound_risks),
            recovery_time_estimate=estimate_recovery_time(failure.six_months),
            growth_potential=self.growth_potential(category_scores) if category_scores is not None else None
        )
