"""
Database Module for SME Health Assessment

SQLAlchemy models for stored assessment results and in-progress answers.
"""

from .models import (
    db,
    AssessmentRecord,
    AssessmentProgress
)

__all__ = [
    'db',
    'AssessmentRecord',
    'AssessmentProgress',
]
