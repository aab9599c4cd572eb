"""Tests for progress, completion-time and freshness helpers."""

from datetime import datetime, timedelta

import pytest

from sme_health.assessment.progress import (
    analyze_completion_time,
    calculate_progress,
    generate_insight,
    is_progress_fresh,
)
from sme_health.assessment.questions import get_question

START = datetime(2024, 3, 1, 9, 0, 0)


@pytest.mark.parametrize(
    "index,total,expected",
    [(-1, 19, 0), (0, 19, 5), (9, 19, 53), (18, 19, 100), (0, 0, 0)],
)
def test_calculate_progress(index: int, total: int, expected: int) -> None:
    assert calculate_progress(index, total) == expected


@pytest.mark.parametrize(
    "seconds,quality,reliability",
    [
        (10 * 14, "rushed", 0.6),
        (10 * 15, "normal", 0.8),
        (10 * 120, "normal", 0.8),
        (10 * 121, "thoughtful", 0.9),
    ],
)
def test_completion_quality(seconds: int, quality: str, reliability: float) -> None:
    analysis = analyze_completion_time(START, START + timedelta(seconds=seconds), 10)

    assert analysis["quality"] == quality
    assert analysis["reliability"] == reliability
    assert analysis["duration_seconds"] == seconds


def test_zero_questions_counts_as_rushed() -> None:
    assert analyze_completion_time(START, START, 0)["quality"] == "rushed"


def test_progress_freshness() -> None:
    assert is_progress_fresh(START, START + timedelta(hours=23), ttl_hours=24)
    assert not is_progress_fresh(START, START + timedelta(hours=24), ttl_hours=24)
    assert not is_progress_fresh(START, START + timedelta(hours=2), ttl_hours=1)


def test_generate_insight_falls_back_to_question() -> None:
    question = get_question("receivables_aging")
    assert generate_insight(question, 10) == question.insight
