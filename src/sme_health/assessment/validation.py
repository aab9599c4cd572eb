"""
Catalog and answer validation

The catalog is checked once at startup; a broken catalog raises
CatalogValidationError listing every problem found. Answer validation is
advisory: it reports problems to the UI layer and never blocks scoring.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Collection, Dict, List, Mapping, Optional, Sequence

from .answers import is_no, is_yes, parse_number
from .flow import get_next_question
from .questions import (
    ASSESSMENT_QUESTIONS,
    CATEGORIES,
    ONBOARDING_QUESTION_IDS,
    ConditionOperator,
    Question,
    QuestionType
)

logger = logging.getLogger(__name__)


class CatalogValidationError(ValueError):
    """Raised when the question catalog is internally inconsistent."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__(f"Invalid question catalog: {'; '.join(self.problems)}")


def validate_catalog(
    questions: Sequence[Question] = ASSESSMENT_QUESTIONS,
    external_ids: Collection[str] = ONBOARDING_QUESTION_IDS
) -> None:
    """
    Check a question catalog before use.

    Args:
        questions: Ordered question catalog
        external_ids: Ids answered outside the catalog (onboarding) that
            display conditions may depend on

    Raises:
        CatalogValidationError: listing every problem found
    """
    problems = []
    seen = set()

    for question in questions:
        qid = question.id

        if qid in seen:
            problems.append(f"duplicate question id '{qid}'")

        if question.category.value not in CATEGORIES:
            problems.append(f"'{qid}' has unknown category '{question.category.value}'")

        if question.weight <= 0:
            problems.append(f"'{qid}' has non-positive weight {question.weight}")

        if question.critical_threshold is not None:
            if not question.is_numeric:
                problems.append(f"'{qid}' declares a critical threshold on a {question.type.value} question")
            elif question.critical_threshold <= 0:
                problems.append(f"'{qid}' has non-positive critical threshold {question.critical_threshold}")

        if question.type == QuestionType.MULTIPLE:
            if not question.options:
                problems.append(f"'{qid}' is multiple choice but has no options")

            texts = [o.text for o in question.options]
            tags = [o.tag for o in question.options]
            if len(set(texts)) != len(texts):
                problems.append(f"'{qid}' has duplicate option texts")
            if len(set(tags)) != len(tags):
                problems.append(f"'{qid}' has duplicate option tags")

            for option in question.options:
                if not 0 <= option.score <= 100:
                    problems.append(f"'{qid}' option '{option.tag}' scores {option.score}, outside 0-100")

        for condition in question.conditions:
            if not isinstance(condition.operator, ConditionOperator):
                problems.append(f"'{qid}' uses unknown condition operator {condition.operator!r}")
            if condition.depends_on not in seen and condition.depends_on not in external_ids:
                problems.append(
                    f"'{qid}' depends on '{condition.depends_on}', which is not asked before it"
                )

        seen.add(qid)

    if problems:
        raise CatalogValidationError(problems)

    logger.debug(f"Question catalog OK ({len(questions)} questions)")


@dataclass
class ValidationResult:
    """Outcome of validating one answer."""
    is_valid: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "error": self.error}


def _check_rule(rule_type: str, rule: Any, value: Any) -> bool:
    if rule_type == "range":
        number = parse_number(value)
        if number is None:
            return False
        minimum, maximum = rule
        return minimum <= number <= maximum

    if rule_type == "pattern":
        return re.fullmatch(rule, str(value)) is not None

    logger.warning(f"Unknown validation rule type '{rule_type}' ignored")
    return True


def validate_answer(question: Question, value: Any) -> ValidationResult:
    """Check an answer against its question's type and validation rules."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return ValidationResult(False, "An answer is required")

    if question.type == QuestionType.MULTIPLE and question.find_option(value) is None:
        return ValidationResult(False, "Please choose one of the listed options")

    if question.type == QuestionType.YES_NO and not (is_yes(value) or is_no(value)):
        return ValidationResult(False, "Please answer yes or no")

    if question.is_numeric or question.type == QuestionType.SCALE:
        if parse_number(value) is None:
            return ValidationResult(False, "Please enter a number")

    for rule in question.validators:
        if not _check_rule(rule.type, rule.rule, value):
            return ValidationResult(False, rule.message)

    return ValidationResult(True)


def validate_answers(
    answers: Mapping[str, Any],
    questions: Sequence[Question] = ASSESSMENT_QUESTIONS
) -> Dict[str, Any]:
    """
    Validate a whole answer set.

    Only questions the flow would actually show count as missing.

    Returns dict with:
    - valid: bool
    - missing_questions: list of missing question IDs
    - invalid_values: {question_id: error message}
    - completion_percentage: float
    """
    missing = []
    invalid = {}
    shown = 0

    index = get_next_question(questions, -1, answers)
    while index < len(questions):
        question = questions[index]
        shown += 1

        if answers.get(question.id) is None:
            missing.append(question.id)
        else:
            result = validate_answer(question, answers[question.id])
            if not result.is_valid:
                invalid[question.id] = result.error

        index = get_next_question(questions, index, answers)

    answered = shown - len(missing)

    return {
        "valid": not missing and not invalid,
        "missing_questions": missing,
        "invalid_values": invalid,
        "completion_percentage": round(answered / shown * 100, 1) if shown > 0 else 0,
        "answered_count": answered,
        "total_count": shown
    }
