"""
Assessment result building blocks

Issues, compound risks and the derived guidance records that make up an
AssessmentResult. Every record converts to and from plain dicts so results
can be stored and reloaded without losing ordering or enum values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(Enum):
    """Urgency of a business issue."""
    URGENT = "urgent"
    IMPORTANT = "important"
    MONITOR = "monitor"


class RiskSeverity(Enum):
    """Severity of a detected compound risk."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"

    @property
    def score_weight(self) -> int:
        """Points removed from the risk-adjusted score per unit of probability."""
        return {
            RiskSeverity.CRITICAL: 25,
            RiskSeverity.HIGH: 15,
            RiskSeverity.MEDIUM: 8
        }[self]

    @property
    def issue_severity(self) -> Severity:
        return {
            RiskSeverity.CRITICAL: Severity.URGENT,
            RiskSeverity.HIGH: Severity.IMPORTANT,
            RiskSeverity.MEDIUM: Severity.MONITOR
        }[self]


@dataclass
class BusinessIssue:
    """A prioritized finding; higher priority sorts first."""
    id: str
    title: str
    severity: Severity
    impact: str
    solution: str
    timeframe: str
    category: str
    priority: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "impact": self.impact,
            "solution": self.solution,
            "timeframe": self.timeframe,
            "category": self.category,
            "priority": self.priority
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BusinessIssue":
        return cls(
            id=data["id"],
            title=data["title"],
            severity=Severity(data["severity"]),
            impact=data["impact"],
            solution=data["solution"],
            timeframe=data["timeframe"],
            category=data["category"],
            priority=data["priority"]
        )


@dataclass
class CompoundRisk:
    """A dangerous multi-factor pattern detected in one answer set."""
    id: str
    name: str
    severity: RiskSeverity
    factors: List[str]
    probability: float  # 0-1
    impact: str
    mitigation: List[str]
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "severity": self.severity.value,
            "factors": list(self.factors),
            "probability": self.probability,
            "impact": self.impact,
            "mitigation": list(self.mitigation),
            "category": self.category
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompoundRisk":
        return cls(
            id=data["id"],
            name=data["name"],
            severity=RiskSeverity(data["severity"]),
            factors=list(data["factors"]),
            probability=data["probability"],
            impact=data["impact"],
            mitigation=list(data["mitigation"]),
            category=data["category"]
        )


@dataclass
class FailureProbability:
    """Estimated chance of failure over three horizons."""
    three_months: float
    six_months: float
    twelve_months: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "3_months": self.three_months,
            "6_months": self.six_months,
            "12_months": self.twelve_months
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "FailureProbability":
        return cls(data["3_months"], data["6_months"], data["12_months"])


@dataclass
class GrowthPotential:
    """Where the business could be with and without intervention."""
    current: int
    with_recommendations: int
    with_accelerator_program: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "current": self.current,
            "with_recommendations": self.with_recommendations,
            "with_accelerator_program": self.with_accelerator_program
        }

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> "GrowthPotential":
        return cls(data["current"], data["with_recommendations"], data["with_accelerator_program"])


@dataclass
class PredictiveMetrics:
    """Rule-based failure outlook."""
    failure_probability: FailureProbability
    survival_factors: List[str] = field(default_factory=list)
    critical_interventions: List[str] = field(default_factory=list)
    recovery_time_estimate: str = ""
    growth_potential: Optional[GrowthPotential] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "failure_probability": self.failure_probability.to_dict(),
            "survival_factors": list(self.survival_factors),
            "critical_interventions": list(self.critical_interventions),
            "recovery_time_estimate": self.recovery_time_estimate,
            "growth_potential": self.growth_potential.to_dict() if self.growth_potential else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PredictiveMetrics":
        growth = data.get("growth_potential")
        return cls(
            failure_probability=FailureProbability.from_dict(data["failure_probability"]),
            survival_factors=list(data.get("survival_factors", [])),
            critical_interventions=list(data.get("critical_interventions", [])),
            recovery_time_estimate=data.get("recovery_time_estimate", ""),
            growth_potential=GrowthPotential.from_dict(growth) if growth else None
        )


@dataclass
class NextSteps:
    """Action plan split by horizon."""
    immediate: List[str] = field(default_factory=list)
    short_term: List[str] = field(default_factory=list)
    strategic: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "immediate": list(self.immediate),
            "short_term": list(self.short_term),
            "strategic": list(self.strategic)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, List[str]]) -> "NextSteps":
        return cls(list(data["immediate"]), list(data["short_term"]), list(data["strategic"]))


@dataclass
class FundingReadiness:
    """Preparedness to seek external investment."""
    score: int
    tier: str  # high, medium, low
    recommendation: str
    required_improvements: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "tier": self.tier,
            "recommendation": self.recommendation,
            "required_improvements": list(self.required_improvements)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FundingReadiness":
        return cls(
            score=data["score"],
            tier=data["tier"],
            recommendation=data["recommendation"],
            required_improvements=list(data["required_improvements"])
        )
