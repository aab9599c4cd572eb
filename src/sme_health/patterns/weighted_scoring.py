"""
Weighted Scoring Pattern - SME Health Assessment

Groups weighted 0-100 scores into one averaged score per group. Used to
roll per-question scores up into category scores.

Use cases:
- Category scores from weighted question scores
- Any weighted average where some groups may receive no input
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


@dataclass
class ScoreContribution:
    """A single weighted input to a group."""
    group: str
    score: float  # 0-100
    weight: float
    source_id: str = ""


@dataclass
class GroupScore:
    """Accumulated score for one group."""
    group: str
    weighted_sum: float = 0.0
    total_weight: float = 0.0
    contributions: List[ScoreContribution] = field(default_factory=list)

    @property
    def score(self) -> int:
        """Rounded weighted average; 0 when nothing contributed weight."""
        if self.total_weight <= 0:
            return 0
        return round_half_up(clamp(self.weighted_sum / self.total_weight))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "score": self.score,
            "weighted_sum": round(self.weighted_sum, 4),
            "total_weight": round(self.total_weight, 4),
            "contributions": [
                {"source_id": c.source_id, "score": c.score, "weight": c.weight}
                for c in self.contributions
            ]
        }


@dataclass
class ScoreResult:
    """Result of scoring a set of contributions."""
    group_scores: Dict[str, GroupScore]
    ignored: List[ScoreContribution] = field(default_factory=list)

    @property
    def scores(self) -> Dict[str, int]:
        return {name: gs.score for name, gs in self.group_scores.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": self.scores,
            "groups": {name: gs.to_dict() for name, gs in self.group_scores.items()},
            "ignored": [c.source_id for c in self.ignored]
        }


class WeightedScoringEngine:
    """
    Weighted average per group over a fixed set of groups.

    Groups that receive no weight score exactly 0. Contributions for groups
    outside the configured set are ignored rather than raised.

    Example:
    ```python
    engine = WeightedScoringEngine(["financial_health", "market_position"])

    result = engine.score([
        ScoreContribution("financial_health", 100, 0.20, "cash_runway_days"),
        ScoreContribution("financial_health", 10, 0.18, "profit_margin_reality"),
    ])

    print(result.scores)  # {"financial_health": 57, "market_position": 0}
    ```
    """

    def __init__(self, groups: Iterable[str]):
        self.groups = list(groups)
        if not self.groups:
            raise ValueError("At least one group must be defined")

    def score(self, contributions: Iterable[ScoreContribution]) -> ScoreResult:
        """Accumulate contributions and return per-group averages."""
        group_scores = {name: GroupScore(group=name) for name in self.groups}
        ignored = []

        for contribution in contributions:
            group = group_scores.get(contribution.group)
            if group is None:
                logger.debug(
                    f"Ignoring contribution '{contribution.source_id}' for unknown group '{contribution.group}'"
                )
                ignored.append(contribution)
                continue

            if contribution.weight <= 0:
                logger.debug(f"Ignoring non-positive weight for '{contribution.source_id}'")
                ignored.append(contribution)
                continue

            group.weighted_sum += clamp(contribution.score) * contribution.weight
            group.total_weight += contribution.weight
            group.contributions.append(contribution)

        return ScoreResult(group_scores=group_scores, ignored=ignored)

