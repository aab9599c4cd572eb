"""
Database Models for SME Health Assessment

SQLAlchemy models for completed assessment results and the answers of
assessments still in progress.
"""

import uuid
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import JSON

db = SQLAlchemy()


def generate_uuid():
    return str(uuid.uuid4())


class AssessmentRecord(db.Model):
    """
    A completed assessment.

    The full AssessmentResult is kept as JSON; score and risk level are
    copied into columns for listing and cohort statistics.
    """
    __tablename__ = 'assessment_records'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(100), index=True)

    # Summary (copied from the result)
    overall_score = db.Column(db.Integer, nullable=False)
    risk_level = db.Column(db.String(20), nullable=False)
    funding_tier = db.Column(db.String(10))

    # Full result and the answers that produced it
    result = db.Column(JSON, nullable=False)
    answers = db.Column(JSON)

    # Completion analysis
    duration_seconds = db.Column(db.Float)
    completion_quality = db.Column(db.String(20))  # rushed, normal, thoughtful

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'overall_score': self.overall_score,
            'risk_level': self.risk_level,
            'funding_tier': self.funding_tier,
            'result': self.result,
            'duration_seconds': self.duration_seconds,
            'completion_quality': self.completion_quality,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class AssessmentProgress(db.Model):
    """
    Answers of an assessment that has not been submitted yet.

    One row per user; resumed only while fresh.
    """
    __tablename__ = 'assessment_progress'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(100), unique=True, nullable=False)

    current_index = db.Column(db.Integer, default=-1)
    answers = db.Column(JSON, default=dict)

    # Timestamps
    started_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'current_index': self.current_index,
            'answers': self.answers or {},
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
