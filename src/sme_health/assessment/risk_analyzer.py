"""
Risk Correlation Analyzer

Scans an answer set against the compound risk rule table and produces a
probability-ranked list of detected risks plus an independent
risk-adjusted overall score (baseline 75, minus severity-weighted
penalties, plus positive factor bonuses).

The risk-adjusted score is deliberately not reconciled with the weighted
category scores; both are reported side by side.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..patterns.weighted_scoring import clamp, round_half_up
from .answers import AnswerSheet
from .models import CompoundRisk
from .questions import ASSESSMENT_QUESTIONS, Question
from .risk_rules import (
    COMPOUND_RISK_RULES,
    POSITIVE_FACTOR_RULES,
    CompoundRiskRule,
    PositiveFactorRule
)

logger = logging.getLogger(__name__)


@dataclass
class RiskAnalysis:
    """Output of one risk correlation pass."""
    compound_risks: List[CompoundRisk]
    risk_adjusted_score: int
    positive_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compound_risks": [r.to_dict() for r in self.compound_risks],
            "risk_adjusted_score": self.risk_adjusted_score,
            "positive_factors": list(self.positive_factors)
        }


class RiskCorrelationAnalyzer:
    """
    Detects compound risks and computes the risk-adjusted overall score.

    Example:
        analyzer = RiskCorrelationAnalyzer()
        analysis = analyzer.analyze({
            "cash_runway_days": "Less than 15 days - Critical danger",
            "receivables_aging": 40,
        })
        analysis.compound_risks[0].id      # "cash_flow_crisis"
        analysis.risk_adjusted_score       # 51
    """

    BASELINE_SCORE = 75

    def __init__(
        self,
        questions: Optional[Sequence[Question]] = None,
        rules: Tuple[CompoundRiskRule, ...] = COMPOUND_RISK_RULES,
        positive_rules: Tuple[PositiveFactorRule, ...] = POSITIVE_FACTOR_RULES
    ):
        self.questions = list(questions) if questions is not None else ASSESSMENT_QUESTIONS
        self.rules = rules
        self.positive_rules = positive_rules

    def sheet(self, answers: Mapping[str, Any]) -> AnswerSheet:
        return AnswerSheet(self.questions, answers)

    def matching_rules(self, answers: Mapping[str, Any]) -> List[CompoundRiskRule]:
        """Rules whose predicate holds, in catalog order."""
        sheet = self.sheet(answers)
        return [rule for rule in self.rules if rule.matches(sheet)]

    def matching_positive_rules(self, answers: Mapping[str, Any]) -> List[PositiveFactorRule]:
        sheet = self.sheet(answers)
        return [rule for rule in self.positive_rules if rule.matches(sheet)]

    def analyze_compound_risks(self, answers: Mapping[str, Any]) -> List[CompoundRisk]:
        """Detected compound risks, highest probability first."""
        risks = [rule.to_risk() for rule in self.matching_rules(answers)]
        risks.sort(key=lambda r: r.probability, reverse=True)

        if risks:
            logger.debug(f"Detected compound risks: {[r.id for r in risks]}")
        return risks

    def calculate_risk_adjusted_score(
        self,
        answers: Mapping[str, Any],
        compound_risks: Sequence[CompoundRisk]
    ) -> int:
        """Baseline 75, minus severity_weight x probability per risk, plus bonuses."""
        score = float(self.BASELINE_SCORE)

        for risk in compound_risks:
            score -= risk.severity.score_weight * risk.probability

        for rule in self.matching_positive_rules(answers):
            score += rule.bonus

        return round_half_up(clamp(score))

    def analyze(self, answers: Mapping[str, Any]) -> RiskAnalysis:
        """Run detection and scoring in one pass."""
        compound_risks = self.analyze_compound_risks(answers)
        positive_factors = [
            rule.id for rule in self.matching_positive_rules(answers) if rule.bonus > 0
        ]
        return RiskAnalysis(
            compound_risks=compound_risks,
            risk_adjusted_score=self.calculate_risk_adjusted_score(answers, compound_risks),
            positive_factors=positive_factors
        )
