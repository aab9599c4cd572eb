"""Shared fixtures for the assessment test suite."""

import pytest

from sme_health.assessment.assessment_engine import AssessmentEngine
from sme_health.config.settings import TestingConfig
from sme_health.database.models import db
from sme_health.demo_data import get_demo_answers
from sme_health.web.app import create_app


@pytest.fixture
def engine() -> AssessmentEngine:
    return AssessmentEngine()


@pytest.fixture
def crisis_answers() -> dict:
    """Cash runway under 15 days, 40% overdue receivables, sub-5% margins."""
    return {
        "cash_runway_days": "Less than 15 days - Critical danger",
        "receivables_aging": 40,
        "profit_margin_reality": "Below 5% or breakeven - Unsustainable",
    }


@pytest.fixture
def healthy_answers() -> dict:
    return get_demo_answers("healthy")


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
