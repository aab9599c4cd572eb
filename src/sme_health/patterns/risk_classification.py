"""
Risk Classification Pattern - SME Health Assessment

Converts an overall score plus a count of urgent issues into one of four
discrete risk levels. Thresholds are checked from most to least severe;
the first one whose score or urgent-issue trigger fires wins.

Use cases:
- Overall business risk verdict
- Funding readiness tiers
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class RiskLevel(Enum):
    """The four overall risk verdicts."""
    CRITICAL = "Critical Risk"
    HIGH = "High Risk"
    MODERATE = "Moderate Risk"
    LOW = "Low Risk"

    @property
    def priority(self) -> int:
        """Numeric priority (lower = more urgent)."""
        return {
            RiskLevel.CRITICAL: 1,
            RiskLevel.HIGH: 2,
            RiskLevel.MODERATE: 3,
            RiskLevel.LOW: 4
        }[self]

    @property
    def color(self) -> str:
        """Standard color for visualization."""
        return {
            RiskLevel.CRITICAL: "#DC143C",
            RiskLevel.HIGH: "#FF6B35",
            RiskLevel.MODERATE: "#FFA500",
            RiskLevel.LOW: "#2E8B57"
        }[self]


@dataclass
class RiskThreshold:
    """
    Trigger for one risk level.

    Fires when the score is strictly below ``score_below`` or the urgent
    issue count is strictly above ``urgent_issues_above``.
    """
    level: RiskLevel
    score_below: Optional[float] = None
    urgent_issues_above: Optional[int] = None
    description: str = ""
    action_required: str = ""

    def matches(self, score: float, urgent_issues: int) -> bool:
        if self.score_below is not None and score < self.score_below:
            return True
        if self.urgent_issues_above is not None and urgent_issues > self.urgent_issues_above:
            return True
        return False


@dataclass
class RiskClassification:
    """Result of classifying an assessment's risk."""
    score: float
    urgent_issues: int
    level: RiskLevel
    description: str
    action_required: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "urgent_issues": self.urgent_issues,
            "level": self.level.value,
            "level_priority": self.level.priority,
            "level_color": self.level.color,
            "description": self.description,
            "action_required": self.action_required,
            "metadata": self.metadata
        }


class RiskClassifier:
    """
    Classifies (overall score, urgent issue count) into a RiskLevel.

    Example:
    ```python
    classifier = RiskClassifier()

    result = classifier.classify(score=74, urgent_issues=0)
    print(result.level.value)  # "Moderate Risk"
    ```
    """

    DEFAULT_THRESHOLDS = [
        RiskThreshold(RiskLevel.CRITICAL, score_below=40, urgent_issues_above=2,
                      description="Business survival is in immediate danger",
                      action_required="Act on every urgent issue this week"),
        RiskThreshold(RiskLevel.HIGH, score_below=60, urgent_issues_above=0,
                      description="Serious weaknesses that can escalate quickly",
                      action_required="Resolve urgent issues within 30 days"),
        RiskThreshold(RiskLevel.MODERATE, score_below=75,
                      description="Stable but with gaps to close",
                      action_required="Work through short-term improvements"),
    ]

    FALLBACK = RiskThreshold(RiskLevel.LOW,
                             description="Healthy fundamentals",
                             action_required="Keep monitoring and plan for growth")

    def __init__(self, thresholds: Optional[List[RiskThreshold]] = None):
        self.thresholds = sorted(
            thresholds or self.DEFAULT_THRESHOLDS,
            key=lambda t: t.level.priority
        )
        self._validate_thresholds()

    def _validate_thresholds(self) -> None:
        """Validate threshold configuration."""
        if not self.thresholds:
            raise ValueError("At least one threshold must be defined")

        for i in range(len(self.thresholds) - 1):
            current = self.thresholds[i]
            next_t = self.thresholds[i + 1]
            if (current.score_below is not None and next_t.score_below is not None
                    and current.score_below > next_t.score_below):
                logger.warning(
                    f"Threshold for {current.level.value} ({current.score_below}) is above "
                    f"{next_t.level.value} ({next_t.score_below}); the less severe level is unreachable"
                )

    def classify(
        self,
        score: float,
        urgent_issues: int = 0,
        metadata: Optional[Dict[str, Any]] = None
    ) -> RiskClassification:
        """Classify a score and urgent issue count into a risk level."""
        matched = self.FALLBACK
        for threshold in self.thresholds:
            if threshold.matches(score, urgent_issues):
                matched = threshold
                break

        return RiskClassification(
            score=score,
            urgent_issues=urgent_issues,
            level=matched.level,
            description=matched.description,
            action_required=matched.action_required,
            metadata=metadata or {}
        )

    def get_threshold_summary(self) -> List[Dict[str, Any]]:
        """Get summary of configured thresholds."""
        return [
            {
                "level": t.level.value,
                "color": t.level.color,
                "score_below": t.score_below,
                "urgent_issues_above": t.urgent_issues_above,
                "description": t.description,
                "action_required": t.action_required
            }
            for t in self.thresholds + [self.FALLBACK]
        ]


class TierClassifier:
    """
    Maps a score onto named tiers by minimum score, highest first.

    Example:
    ```python
    tiers = TierClassifier({75: "high", 60: "medium", 0: "low"})
    tiers.classify(62.4)  # "medium"
    ```
    """

    def __init__(self, thresholds: Dict[float, str], floor_tier: Optional[str] = None):
        if not thresholds:
            raise ValueError("At least one tier must be defined")
        self.thresholds = dict(sorted(thresholds.items(), reverse=True))
        self.floor_tier = floor_tier or list(self.thresholds.values())[-1]

    def classify(self, score: float) -> str:
        for minimum, tier in self.thresholds.items():
            if score >= minimum:
                return tier
        return self.floor_tier


def create_risk_level_classifier() -> RiskClassifier:
    """Create the classifier for the overall assessment verdict."""
    return RiskClassifier()


def create_funding_tier_classifier() -> TierClassifier:
    """Create the classifier for funding readiness tiers."""
    return TierClassifier({75: "high", 60: "medium", 0: "low"})
