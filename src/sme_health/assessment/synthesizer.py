"""
Issue & Recommendation Synthesizer

Merges question-level issues with compound-risk issues into one
priority-ordered list, then derives the risk verdict, next steps,
funding readiness, benchmark comparison and strengths.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..patterns.benchmark_engine import BenchmarkComparison, BenchmarkEngine, create_sme_benchmarks
from ..patterns.risk_classification import (
    RiskClassification,
    RiskClassifier,
    TierClassifier,
    create_funding_tier_classifier,
    create_risk_level_classifier
)
from ..patterns.weighted_scoring import round_half_up
from .models import (
    BusinessIssue,
    CompoundRisk,
    FundingReadiness,
    NextSteps,
    RiskSeverity,
    Severity
)
from .questions import CATEGORIES

logger = logging.getLogger(__name__)


SHORT_TERM_THRESHOLD = 60
STRATEGIC_THRESHOLD = 70
STRENGTH_THRESHOLD = 80
URGENT_FUNDING_CAP = 40

CATEGORY_IMPROVEMENTS = {
    "financial_health": "Implement monthly financial reporting and cash flow forecasting",
    "operational_resilience": "Document key processes and create backup systems",
    "market_position": "Develop customer retention program and market research",
    "compliance_risk": "Complete regulatory audit and implement compliance checklist",
    "growth_readiness": "Create business plan and identify growth opportunities"
}

CATEGORY_STRENGTHS = {
    "financial_health": "Strong financial management and cash flow control",
    "operational_resilience": "Robust operational processes and efficiency",
    "market_position": "Strong market position and customer relationships",
    "compliance_risk": "Excellent regulatory compliance",
    "growth_readiness": "Well-positioned for growth and expansion"
}

GROWTH_FINANCING_STEP = "Consider growth financing options and expansion planning"

FUNDING_RECOMMENDATIONS = {
    "high": "Ready for investment - strong fundamentals across all areas",
    "medium": "Address identified issues before seeking funding",
    "low": "Significant improvements needed before investment readiness"
}


@dataclass
class Synthesis:
    """Everything the synthesizer derives for one assessment."""
    issues: List[BusinessIssue]
    risk: RiskClassification
    next_steps: NextSteps
    funding_readiness: FundingReadiness
    benchmark: BenchmarkComparison
    strengths: List[str] = field(default_factory=list)
    competitive_advantages: List[str] = field(default_factory=list)


def compound_risk_issues(compound_risks: Sequence[CompoundRisk]) -> List[BusinessIssue]:
    """
    One issue per detected risk.

    Priority is (1 - probability) x 100 plus the risk's position in the
    probability-ordered list, which breaks ties between equal probabilities.
    """
    issues = []
    for index, risk in enumerate(compound_risks):
        issues.append(BusinessIssue(
            id=risk.id,
            title=risk.name,
            severity=risk.severity.issue_severity,
            impact=risk.impact,
            solution="; ".join(risk.mitigation),
            timeframe="Immediate" if risk.severity == RiskSeverity.CRITICAL else "30 days",
            category=risk.category,
            priority=round((1 - risk.probability) * 100 + index, 4)
        ))
    return issues


def merge_issues(
    question_issues: Sequence[BusinessIssue],
    compound_issues: Sequence[BusinessIssue]
) -> List[BusinessIssue]:
    """All issues, highest priority first; equal priorities keep input order."""
    return sorted(
        list(question_issues) + list(compound_issues),
        key=lambda issue: issue.priority,
        reverse=True
    )


def count_urgent(issues: Sequence[BusinessIssue]) -> int:
    return sum(1 for issue in issues if issue.severity == Severity.URGENT)


class IssueSynthesizer:
    """Combines scores, issues and risks into guidance."""

    def __init__(
        self,
        risk_classifier: Optional[RiskClassifier] = None,
        funding_tiers: Optional[TierClassifier] = None,
        benchmarks: Optional[BenchmarkEngine] = None
    ):
        self.risk_classifier = risk_classifier or create_risk_level_classifier()
        self.funding_tiers = funding_tiers or create_funding_tier_classifier()
        self.benchmarks = benchmarks or create_sme_benchmarks()

    def determine_risk_level(self, overall_score: int, issues: Sequence[BusinessIssue]) -> RiskClassification:
        return self.risk_classifier.classify(overall_score, count_urgent(issues))

    def generate_next_steps(
        self,
        category_scores: Dict[str, int],
        issues: Sequence[BusinessIssue]
    ) -> NextSteps:
        immediate = [issue.solution for issue in issues if issue.severity == Severity.URGENT]

        short_term = [
            CATEGORY_IMPROVEMENTS.get(category, "Address identified weaknesses")
            for category, score in category_scores.items()
            if score < SHORT_TERM_THRESHOLD
        ]

        strategic = []
        if (category_scores.get("financial_health", 0) > STRATEGIC_THRESHOLD
                and category_scores.get("compliance_risk", 0) > STRATEGIC_THRESHOLD):
            strategic.append(GROWTH_FINANCING_STEP)

        return NextSteps(immediate=immediate, short_term=short_term, strategic=strategic)

    def assess_funding_readiness(
        self,
        category_scores: Dict[str, int],
        issues: Sequence[BusinessIssue]
    ) -> FundingReadiness:
        funding_score = sum(category_scores.get(c, 0) for c in CATEGORIES) / len(CATEGORIES)

        if count_urgent(issues) > 0:
            funding_score = min(funding_score, URGENT_FUNDING_CAP)

        tier = self.funding_tiers.classify(funding_score)

        return FundingReadiness(
            score=round_half_up(funding_score),
            tier=tier,
            recommendation=FUNDING_RECOMMENDATIONS[tier],
            required_improvements=[issue.title for issue in issues]
        )

    @staticmethod
    def identify_strengths(category_scores: Dict[str, int]) -> List[str]:
        return [
            CATEGORY_STRENGTHS.get(category, "Strong performance in key area")
            for category, score in category_scores.items()
            if score >= STRENGTH_THRESHOLD
        ]

    @staticmethod
    def identify_advantages(category_scores: Dict[str, int]) -> List[str]:
        advantages = []

        if category_scores.get("market_position", 0) > 75 and category_scores.get("financial_health", 0) > 70:
            advantages.append("Strong market position backed by solid financials")

        if category_scores.get("operational_resilience", 0) > 80:
            advantages.append("Operational excellence provides competitive edge")

        return advantages

    def synthesize(
        self,
        overall_score: int,
        category_scores: Dict[str, int],
        question_issues: Sequence[BusinessIssue],
        compound_risks: Sequence[CompoundRisk]
    ) -> Synthesis:
        issues = merge_issues(question_issues, compound_risk_issues(compound_risks))
        # Only question-level urgent issues count toward the verdict
        risk = self.determine_risk_level(overall_score, question_issues)

        logger.debug(f"{len(issues)} issues ({risk.urgent_issues} urgent), verdict {risk.level.value}")

        return Synthesis(
            issues=issues,
            risk=risk,
            next_steps=self.generate_next_steps(category_scores, issues),
            funding_readiness=self.assess_funding_readiness(category_scores, issues),
            benchmark=self.benchmarks.compare(overall_score),
            strengths=self.identify_strengths(category_scores),
            competitive_advantages=self.identify_advantages(category_scores)
        )
