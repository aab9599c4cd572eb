"""
Assessment progress helpers

Progress percentage, completion-time quality and freshness of saved
in-progress answers. Used by the web layer around the engine.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from ..patterns.weighted_scoring import round_half_up
from .questions import Question

DEFAULT_PROGRESS_TTL_HOURS = 24

# Seconds per question
RUSHED_BELOW = 15
THOUGHTFUL_ABOVE = 120

COMPLETION_RELIABILITY = {
    "rushed": 0.6,
    "normal": 0.8,
    "thoughtful": 0.9
}


def calculate_progress(current_index: int, total: int) -> int:
    """Percentage complete after answering the question at current_index."""
    if total <= 0:
        return 0
    return round_half_up((current_index + 1) / total * 100)


def analyze_completion_time(start: datetime, end: datetime, question_count: int) -> Dict[str, Any]:
    """
    Judge how carefully an assessment was answered.

    Under 15 seconds per question reads as rushed, over two minutes as
    thoughtful; reliability is a rough confidence in the answers.
    """
    duration = max(0.0, (end - start).total_seconds())
    per_question = duration / question_count if question_count > 0 else 0.0

    if per_question < RUSHED_BELOW:
        quality = "rushed"
    elif per_question > THOUGHTFUL_ABOVE:
        quality = "thoughtful"
    else:
        quality = "normal"

    return {
        "duration_seconds": round(duration, 1),
        "seconds_per_question": round(per_question, 1),
        "quality": quality,
        "reliability": COMPLETION_RELIABILITY[quality]
    }


def is_progress_fresh(
    saved_at: datetime,
    now: Optional[datetime] = None,
    ttl_hours: float = DEFAULT_PROGRESS_TTL_HOURS
) -> bool:
    """Saved answers are only resumed within the TTL."""
    now = now or datetime.utcnow()
    return now - saved_at < timedelta(hours=ttl_hours)


def generate_insight(question: Question, answer: Any) -> str:
    """The chosen option's insight if it has one, else the question's."""
    option = question.find_option(answer)
    if option is not None and option.insight:
        return option.insight
    return question.insight
