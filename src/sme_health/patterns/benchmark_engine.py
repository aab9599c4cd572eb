"""
Benchmark Engine Pattern - SME Health Assessment

Compares an assessment score against fixed SME benchmarks and, when stored
results are available, against the cohort of previously assessed businesses.

Use cases:
- Benchmark block of an assessment result
- Cohort statistics over stored assessment scores
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from .weighted_scoring import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkComparison:
    """Score compared with industry reference points."""
    your_score: int
    industry_average: int
    top_performers: int
    percentile: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "your_score": self.your_score,
            "industry_average": self.industry_average,
            "top_performers": self.top_performers,
            "percentile": self.percentile
        }

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> "BenchmarkComparison":
        return cls(
            your_score=data["your_score"],
            industry_average=data["industry_average"],
            top_performers=data["top_performers"],
            percentile=data["percentile"]
        )


@dataclass
class CohortStatistics:
    """Distribution of stored overall scores."""
    count: int
    mean: float
    median: float
    p25: float
    p75: float
    percentile_rank: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "p25": self.p25,
            "p75": self.p75,
            "percentile_rank": self.percentile_rank
        }


class BenchmarkEngine:
    """
    Benchmark comparison for assessment scores.

    Example:
    ```python
    engine = BenchmarkEngine()

    comparison = engine.compare(51)
    print(comparison.percentile)  # 62

    stats = engine.cohort_statistics([40, 55, 70, 82], score=60)
    print(stats.percentile_rank)  # 50.0
    ```
    """

    # SME reference points (fixed until enough stored results exist to replace them)
    INDUSTRY_AVERAGE = 58
    TOP_PERFORMERS = 82
    MAX_PERCENTILE = 95

    def __init__(
        self,
        industry_average: int = INDUSTRY_AVERAGE,
        top_performers: int = TOP_PERFORMERS
    ):
        if top_performers <= 0:
            raise ValueError("top_performers must be positive")
        self.industry_average = industry_average
        self.top_performers = top_performers

    def compare(self, score: int) -> BenchmarkComparison:
        """Compare a score with the fixed benchmarks."""
        percentile = min(
            self.MAX_PERCENTILE,
            round_half_up(score / self.top_performers * 100)
        )
        return BenchmarkComparison(
            your_score=score,
            industry_average=self.industry_average,
            top_performers=self.top_performers,
            percentile=percentile
        )

    def cohort_statistics(
        self,
        scores: Sequence[float],
        score: Optional[float] = None
    ) -> CohortStatistics:
        """Summarize a cohort of scores; optionally rank one score within it."""
        if len(scores) == 0:
            return CohortStatistics(count=0, mean=0.0, median=0.0, p25=0.0, p75=0.0)

        values = np.asarray(scores, dtype=float)
        p25, median, p75 = np.percentile(values, [25, 50, 75])

        percentile_rank = None
        if score is not None:
            # Share of the cohort strictly below the score, ties counted half
            below = np.sum(values < score)
            equal = np.sum(values == score)
            percentile_rank = round(float((below + 0.5 * equal) / len(values) * 100), 1)

        logger.debug(f"Cohort of {len(values)} scores, median {median:.1f}")
        return CohortStatistics(
            count=int(len(values)),
            mean=round(float(np.mean(values)), 2),
            median=round(float(median), 2),
            p25=round(float(p25), 2),
            p75=round(float(p75), 2),
            percentile_rank=percentile_rank
        )


def create_sme_benchmarks() -> BenchmarkEngine:
    """Create the benchmark engine with the default SME reference points."""
    return BenchmarkEngine()
