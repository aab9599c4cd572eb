"""
SME Health Assessment Engine

Scores assessment answers and generates guidance:
- Weighted category scores (0-100)
- Risk-adjusted overall score and risk level
- Prioritized critical issues and compound risks
- Failure outlook, funding readiness and next steps
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..patterns.benchmark_engine import BenchmarkComparison
from ..patterns.risk_classification import RiskLevel
from .flow import get_next_question, is_complete
from .models import (
    BusinessIssue,
    CompoundRisk,
    FundingReadiness,
    NextSteps,
    PredictiveMetrics,
    Severity
)
from .predictive import PredictiveAnalytics
from .questions import ASSESSMENT_QUESTIONS, Question
from .risk_analyzer import RiskCorrelationAnalyzer
from .scoring import CategoryAggregator
from .synthesizer import IssueSynthesizer
from .validation import validate_answers

logger = logging.getLogger(__name__)


@dataclass
class AssessmentResult:
    """Complete assessment result"""
    overall_score: int  # 0-100, risk-adjusted
    risk_level: RiskLevel
    category_scores: Dict[str, int]  # 0-100 each
    critical_issues: List[BusinessIssue]  # priority descending
    compound_risks: List[CompoundRisk]  # probability descending
    benchmark_comparison: BenchmarkComparison
    next_steps: NextSteps
    funding_readiness: FundingReadiness
    predictive_analytics: PredictiveMetrics
    created_at: datetime
    strengths_to_leverage: List[str] = field(default_factory=list)
    competitive_advantages: List[str] = field(default_factory=list)

    @property
    def urgent_issue_count(self) -> int:
        return sum(1 for issue in self.critical_issues if issue.severity == Severity.URGENT)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "overall_score": self.overall_score,
            "risk_level": self.risk_level.value,
            "category_scores": dict(self.category_scores),
            "critical_issues": [issue.to_dict() for issue in self.critical_issues],
            "compound_risks": [risk.to_dict() for risk in self.compound_risks],
            "strengths_to_leverage": list(self.strengths_to_leverage),
            "competitive_advantages": list(self.competitive_advantages),
            "benchmark_comparison": self.benchmark_comparison.to_dict(),
            "next_steps": self.next_steps.to_dict(),
            "funding_readiness": self.funding_readiness.to_dict(),
            "predictive_analytics": self.predictive_analytics.to_dict(),
            "created_at": self.created_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssessmentResult":
        """Rebuild a result stored with to_dict()."""
        return cls(
            overall_score=data["overall_score"],
            risk_level=RiskLevel(data["risk_level"]),
            category_scores=dict(data["category_scores"]),
            critical_issues=[BusinessIssue.from_dict(i) for i in data["critical_issues"]],
            compound_risks=[CompoundRisk.from_dict(r) for r in data["compound_risks"]],
            benchmark_comparison=BenchmarkComparison.from_dict(data["benchmark_comparison"]),
            next_steps=NextSteps.from_dict(data["next_steps"]),
            funding_readiness=FundingReadiness.from_dict(data["funding_readiness"]),
            predictive_analytics=PredictiveMetrics.from_dict(data["predictive_analytics"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            strengths_to_leverage=list(data.get("strengths_to_leverage", [])),
            competitive_advantages=list(data.get("competitive_advantages", []))
        )


class AssessmentEngine:
    """
    Engine for scoring SME health assessments.

    Holds no per-assessment state; one instance can score any number of
    answer sets, and the same answers always give the same result.

    Example:
        engine = AssessmentEngine()

        answers = {
            "cash_runway_days": "Less than 15 days - Critical danger",
            "receivables_aging": 40,
            "profit_margin_reality": "margin_below_5",  # tags work too
            ...
        }

        result = engine.calculate_score(answers)
        print(f"Overall Score: {result.overall_score}")
        print(f"Risk Level: {result.risk_level.value}")
    """

    def __init__(self, questions: Optional[Sequence[Question]] = None):
        """Initialize the assessment engine"""
        self.questions = list(questions) if questions is not None else ASSESSMENT_QUESTIONS
        self.aggregator = CategoryAggregator(self.questions)
        self.risk_analyzer = RiskCorrelationAnalyzer(self.questions)
        self.predictive = PredictiveAnalytics(self.risk_analyzer)
        self.synthesizer = IssueSynthesizer()

    def get_next_question(self, current_index: int, answers: Mapping[str, Any]) -> int:
        """Index of the next question to show; len(questions) when complete."""
        return get_next_question(self.questions, current_index, answers)

    def is_complete(self, next_index: int) -> bool:
        return is_complete(self.questions, next_index)

    def calculate_score(
        self,
        answers: Mapping[str, Any],
        created_at: Optional[datetime] = None
    ) -> AssessmentResult:
        """
        Calculate assessment result from answers.

        Args:
            answers: Dict mapping question_id to the answer (option text or
                tag, number or numeric string, yes/no)
            created_at: Timestamp to stamp on the result; defaults to now

        Returns:
            AssessmentResult with scores, issues and guidance
        """
        answers = dict(answers)

        scoring = self.aggregator.aggregate(answers)
        logger.debug(f"Category scores: {scoring.category_scores}")

        risk_analysis = self.risk_analyzer.analyze(answers)
        overall_score = risk_analysis.risk_adjusted_score

        synthesis = self.synthesizer.synthesize(
            overall_score,
            scoring.category_scores,
            scoring.issues,
            risk_analysis.compound_risks
        )

        predictive = self.predictive.calculate(
            answers,
            risk_analysis.compound_risks,
            scoring.category_scores
        )

        result = AssessmentResult(
            overall_score=overall_score,
            risk_level=synthesis.risk.level,
            category_scores=scoring.category_scores,
            critical_issues=synthesis.issues,
            compound_risks=risk_analysis.compound_risks,
            benchmark_comparison=synthesis.benchmark,
            next_steps=synthesis.next_steps,
            funding_readiness=synthesis.funding_readiness,
            predictive_analytics=predictive,
            created_at=created_at or datetime.utcnow(),
            strengths_to_leverage=synthesis.strengths,
            competitive_advantages=synthesis.competitive_advantages
        )

        logger.info(
            f"Assessment scored: overall={result.overall_score}, "
            f"risk={result.risk_level.value}, issues={len(result.critical_issues)}"
        )
        return result

    def get_question(self, question_id: str) -> Optional[Question]:
        """Get a question by ID"""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def get_all_questions(self) -> List[Question]:
        """Get all questions"""
        return list(self.questions)

    def validate_answers(self, answers: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate answer set.

        Returns dict with:
        - valid: bool
        - missing_questions: list of missing question IDs
        - invalid_values: {question_id: error message}
        - completion_percentage: float
        """
        return validate_answers(answers, self.questions)


def evaluate_assessment(
    questions: Sequence[Question],
    answers: Mapping[str, Any],
    created_at: Optional[datetime] = None
) -> AssessmentResult:
    """Score one answer set against a catalog."""
    return AssessmentEngine(questions).calculate_score(answers, created_at=created_at)
