"""
Answer parsing helpers

Answers arrive from the UI as strings, numbers or boolean-like tokens.
These helpers turn them into the numbers and option tags that scoring
and risk rules work with, without ever raising on malformed input.
"""

import math
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional

from .questions import Question


def parse_number(value: Any) -> Optional[float]:
    """
    Parse an answer as a number.

    Returns None for missing, blank or non-numeric answers; callers treat
    None as failing every numeric comparison.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def is_yes(value: Any) -> bool:
    """True for a yes/no answer meaning "yes"."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("yes", "true")


def is_no(value: Any) -> bool:
    """True for a yes/no answer meaning "no"."""
    if isinstance(value, bool):
        return not value
    return str(value).strip().lower() in ("no", "false")


class AnswerSheet:
    """
    Read-only view of an answer map resolved against the question catalog.

    Rules ask for option tags and parsed numbers instead of raw text.

    Example:
        sheet = AnswerSheet(ASSESSMENT_QUESTIONS, {"cash_runway_days": "Less than 15 days - Critical danger"})
        sheet.tag("cash_runway_days")        # "days_under_15"
        sheet.tag_in("cash_runway_days", {"days_15_29", "days_under_15"})  # True
    """

    def __init__(self, questions: Iterable[Question], answers: Mapping[str, Any]):
        self._questions: Dict[str, Question] = {q.id: q for q in questions}
        # None means unanswered
        self._answers = {qid: value for qid, value in answers.items() if value is not None}

    def has(self, question_id: str) -> bool:
        return question_id in self._answers

    def raw(self, question_id: str, default: Any = None) -> Any:
        return self._answers.get(question_id, default)

    def tag(self, question_id: str) -> Optional[str]:
        """Tag of the chosen option, or None if unanswered or unrecognised."""
        question = self._questions.get(question_id)
        if question is None or question_id not in self._answers:
            return None
        option = question.find_option(self._answers[question_id])
        return option.tag if option else None

    def tag_in(self, question_id: str, tags: Collection[str]) -> bool:
        return self.tag(question_id) in tags

    def number(self, question_id: str, default: Optional[float] = None) -> Optional[float]:
        """
        Parsed numeric answer.

        An unanswered question yields ``default``; an answer that does not
        parse yields None regardless of the default.
        """
        if question_id not in self._answers:
            return default
        return parse_number(self._answers[question_id])

    def answered_ids(self) -> List[str]:
        return list(self._answers)
