"""
Question Flow Controller

Decides which question to show next given the answers so far. A question
is shown only when every one of its display conditions holds; an index
equal to the number of questions signals that the assessment is complete.
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from .answers import parse_number
from .questions import ConditionOperator, DisplayCondition, Question

logger = logging.getLogger(__name__)


def _same_answer(answer: Any, expected: Any, dependency: Optional[Question]) -> bool:
    """Option text and option tag name the same choice."""
    if dependency is not None and dependency.options:
        chosen = dependency.find_option(answer)
        wanted = dependency.find_option(expected)
        if chosen is not None and wanted is not None:
            return chosen is wanted
    return answer == expected


def condition_holds(
    condition: DisplayCondition,
    answers: Mapping[str, Any],
    dependency: Optional[Question] = None
) -> bool:
    """
    Evaluate one display condition; a missing answer never satisfies it.

    ``dependency`` is the catalog question the condition refers to, when
    there is one; ``equals`` then matches an answer by option text or tag.
    """
    answer = answers.get(condition.depends_on)
    if answer is None:
        return False

    if condition.operator == ConditionOperator.EQUALS:
        return _same_answer(answer, condition.value, dependency)

    if condition.operator in (ConditionOperator.GREATER_THAN, ConditionOperator.LESS_THAN):
        left = parse_number(answer)
        right = parse_number(condition.value)
        if left is None or right is None:
            return False
        if condition.operator == ConditionOperator.GREATER_THAN:
            return left > right
        return left < right

    if condition.operator == ConditionOperator.CONTAINS:
        return str(condition.value) in str(answer)

    logger.warning(f"Unknown condition operator {condition.operator!r} on '{condition.depends_on}'")
    return False


def should_show_question(
    question: Question,
    answers: Mapping[str, Any],
    catalog: Optional[Mapping[str, Question]] = None
) -> bool:
    """True if the question has no conditions or all of them hold."""
    catalog = catalog or {}
    return all(
        condition_holds(c, answers, catalog.get(c.depends_on))
        for c in question.conditions
    )


def get_next_question(
    questions: Sequence[Question],
    current_index: int,
    answers: Mapping[str, Any]
) -> int:
    """
    Index of the next question to display.

    Args:
        questions: Ordered question catalog
        current_index: Index just answered, or -1 at the start
        answers: Answers recorded so far

    Returns:
        Index of the next visible question, or len(questions) when complete
    """
    catalog = {q.id: q for q in questions}
    for index in range(max(current_index + 1, 0), len(questions)):
        if should_show_question(questions[index], answers, catalog):
            return index
        logger.debug(f"Skipping question '{questions[index].id}': display conditions not met")

    return len(questions)


def is_complete(questions: Sequence[Question], next_index: int) -> bool:
    return next_index >= len(questions)
