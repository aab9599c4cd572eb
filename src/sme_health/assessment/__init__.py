"""
SME Health Assessment Module

Business health assessment with:
- Conditional questionnaire across five categories
- Weighted category scoring and business-killer detection
- Compound risk correlation and risk-adjusted scoring
- Failure outlook, funding readiness and next steps
"""

from .assessment_engine import AssessmentEngine, AssessmentResult, evaluate_assessment
from .models import BusinessIssue, CompoundRisk, Severity, RiskSeverity
from .questions import ASSESSMENT_QUESTIONS, CATEGORIES, ONBOARDING_QUESTIONS, Question, QuestionType
from .validation import CatalogValidationError, validate_catalog

__all__ = [
    'AssessmentEngine',
    'AssessmentResult',
    'evaluate_assessment',
    'BusinessIssue',
    'CompoundRisk',
    'Severity',
    'RiskSeverity',
    'ASSESSMENT_QUESTIONS',
    'CATEGORIES',
    'ONBOARDING_QUESTIONS',
    'Question',
    'QuestionType',
    'CatalogValidationError',
    'validate_catalog',
]
