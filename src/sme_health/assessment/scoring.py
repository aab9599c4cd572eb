"""
Question Scoring & Category Aggregation

Turns each typed answer into a 0-100 sub-score, flags business-killer
answers as urgent issues, and rolls the weighted sub-scores up into one
score per business category.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..patterns.weighted_scoring import ScoreContribution, WeightedScoringEngine, clamp
from .answers import is_no, is_yes, parse_number
from .models import BusinessIssue, Severity
from .questions import CATEGORIES, OptionRiskLevel, Question, QuestionOption, QuestionType

logger = logging.getLogger(__name__)


# One canned remedy per category, used as the solution of question-level issues
CATEGORY_REMEDIES = {
    "financial_health": "Implement emergency cash flow management and seek immediate funding",
    "operational_resilience": "Strengthen operational processes and build redundancy",
    "market_position": "Diversify customer base and improve competitive positioning",
    "compliance_risk": "Achieve immediate regulatory compliance to avoid shutdowns",
    "growth_readiness": "Address structural barriers before pursuing growth"
}

CATEGORY_ISSUE_TITLES = {
    "financial_health": "Critical Cash Flow Issue",
    "operational_resilience": "Operational Risk Detected",
    "market_position": "Market Vulnerability",
    "compliance_risk": "Compliance Violation Risk",
    "growth_readiness": "Growth Barrier Identified"
}

OPTION_ISSUE_PRIORITY = 100
THRESHOLD_ISSUE_PRIORITY = 95


@dataclass
class QuestionScore:
    """Sub-score for one answered question."""
    question_id: str
    category: str
    score: float  # 0-100
    weight: float
    issue: Optional[BusinessIssue] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_id": self.question_id,
            "category": self.category,
            "score": round(self.score, 2),
            "weight": self.weight,
            "issue": self.issue.to_dict() if self.issue else None
        }


@dataclass
class CategoryScoring:
    """Category scores plus the question-level findings behind them."""
    category_scores: Dict[str, int]
    question_scores: List[QuestionScore] = field(default_factory=list)
    issues: List[BusinessIssue] = field(default_factory=list)


def _format_number(value: float) -> str:
    return f"{value:g}"


def _option_issue(question: Question, option: Optional[QuestionOption] = None) -> BusinessIssue:
    category = question.category.value
    impact = option.insight if option and option.insight else question.insight
    return BusinessIssue(
        id=question.id,
        title=CATEGORY_ISSUE_TITLES.get(category, "Business Risk Identified"),
        severity=Severity.URGENT,
        impact=impact,
        solution=CATEGORY_REMEDIES.get(category, "Implement corrective measures immediately"),
        timeframe="Immediate",
        category=category,
        priority=OPTION_ISSUE_PRIORITY
    )


def _threshold_issue(question: Question, value: float) -> BusinessIssue:
    category = question.category.value
    return BusinessIssue(
        id=question.id,
        title=f"Critical: {question.question.replace('?', '')}",
        severity=Severity.URGENT,
        impact=(
            f"Value of {_format_number(value)}% exceeds safe threshold of "
            f"{_format_number(question.critical_threshold)}%"
        ),
        solution=CATEGORY_REMEDIES.get(category, "Implement corrective measures immediately"),
        timeframe="Immediate",
        category=category,
        priority=THRESHOLD_ISSUE_PRIORITY
    )


def score_question(question: Question, answer: Any) -> QuestionScore:
    """
    Score a single answer.

    Rules by type:
    - multiple: the chosen option's declared score (0 if no option matches)
    - percentage/number: min(100, value), or a linear penalty when the value
      is strictly above a declared critical threshold
    - yes_no: "yes" scores 100, anything else 0
    - scale (1-10): value / 10 * 100

    Malformed numbers score 0 and never trigger a threshold.
    """
    score = 0.0
    issue = None

    if question.type == QuestionType.MULTIPLE:
        option = question.find_option(answer)
        if option is None:
            logger.debug(f"No option of '{question.id}' matches answer {answer!r}")
        else:
            score = option.score
            if option.risk_level == OptionRiskLevel.CRITICAL and question.business_killer:
                issue = _option_issue(question, option)

    elif question.is_numeric:
        value = parse_number(answer)
        if value is None:
            logger.warning(f"Non-numeric answer {answer!r} for '{question.id}' scored as 0")
        elif question.critical_threshold is not None and value > question.critical_threshold:
            score = max(0.0, 100 - (value / question.critical_threshold) * 100)
            if question.business_killer:
                issue = _threshold_issue(question, value)
        else:
            score = min(100.0, value)

    elif question.type == QuestionType.YES_NO:
        score = 100.0 if is_yes(answer) else 0.0
        if is_no(answer) and question.business_killer:
            issue = _option_issue(question)

    elif question.type == QuestionType.SCALE:
        value = parse_number(answer)
        if value is None:
            logger.warning(f"Non-numeric answer {answer!r} for '{question.id}' scored as 0")
        else:
            score = (value / 10) * 100

    return QuestionScore(
        question_id=question.id,
        category=question.category.value,
        score=clamp(score),
        weight=question.weight,
        issue=issue
    )


class CategoryAggregator:
    """
    Weighted category scores for an answer map.

    Unanswered questions contribute nothing; a category without any
    answered weight scores exactly 0.

    Example:
        aggregator = CategoryAggregator(ASSESSMENT_QUESTIONS)
        scoring = aggregator.aggregate({"cash_runway_days": "90+ days - Strong cash reserves"})
        scoring.category_scores["financial_health"]  # 100
    """

    def __init__(self, questions: Sequence[Question]):
        self.questions = list(questions)
        self.engine = WeightedScoringEngine(CATEGORIES.keys())

    def aggregate(self, answers: Mapping[str, Any]) -> CategoryScoring:
        known_ids = {q.id for q in self.questions}
        unknown = [qid for qid in answers if qid not in known_ids]
        if unknown:
            logger.debug(f"Ignoring answers for unknown questions: {unknown}")

        question_scores = []
        for question in self.questions:
            if answers.get(question.id) is None:
                continue
            question_scores.append(score_question(question, answers[question.id]))

        result = self.engine.score(
            ScoreContribution(qs.category, qs.score, qs.weight, qs.question_id)
            for qs in question_scores
        )

        return CategoryScoring(
            category_scores=result.scores,
            question_scores=question_scores,
            issues=[qs.issue for qs in question_scores if qs.issue is not None]
        )
