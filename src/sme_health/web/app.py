"""
SME Health Assessment - Flask Web Application

JSON API around the assessment engine: question flow, answer validation,
saved progress, submission and stored results.
"""

import os
import logging
from datetime import datetime, timezone
from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError

from ..config.settings import get_config
from ..database.models import db, AssessmentRecord, AssessmentProgress
from ..assessment.assessment_engine import AssessmentEngine
from ..assessment.progress import (
    analyze_completion_time,
    calculate_progress,
    generate_insight,
    is_progress_fresh
)
from ..assessment.questions import CATEGORIES, ONBOARDING_QUESTIONS
from ..assessment.validation import validate_answer, validate_catalog
from ..patterns.benchmark_engine import create_sme_benchmarks

# Configure logging
logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO'))
logger = logging.getLogger(__name__)


def _bad_request(message):
    return jsonify({'error': message}), 400


def _parse_timestamp(value):
    """ISO-8601 string to naive UTC datetime, or None."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


# =============================================================================
# App Factory
# =============================================================================

def create_app(config_class=None, questions=None):
    """Create Flask application"""
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        config_class = get_config()
    app.config.from_object(config_class)
    logging.getLogger('sme_health').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    engine = AssessmentEngine(questions)
    benchmarks = create_sme_benchmarks()

    if app.config.get('VALIDATE_CATALOG_ON_STARTUP', True):
        validate_catalog(engine.questions)
        logger.info(f"Question catalog validated ({len(engine.questions)} questions)")

    # Initialize extensions
    db.init_app(app)

    # Rate limiting
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[app.config['RATELIMIT_DEFAULT']]
    )
    app.extensions['assessment_engine'] = engine

    # Create tables
    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    # =============================================================================
    # API Routes - Catalog & Flow
    # =============================================================================

    @app.route('/api/health', methods=['GET'])
    @limiter.exempt
    def api_health():
        """Liveness check"""
        return jsonify({
            'status': 'ok',
            'app_name': app.config['APP_NAME'],
            'questions': len(engine.questions)
        })

    @app.route('/api/assessment/questions', methods=['GET'])
    def api_questions():
        """Full question catalog with categories and onboarding questions"""
        return jsonify({
            'questions': [q.to_dict() for q in engine.questions],
            'categories': CATEGORIES,
            'onboarding': ONBOARDING_QUESTIONS
        })

    @app.route('/api/assessment/next', methods=['POST'])
    def api_next_question():
        """Next question index for the answers so far"""
        data = request.get_json(silent=True) or {}
        answers = data.get('answers', {})
        if not isinstance(answers, dict):
            return _bad_request('answers must be an object')

        try:
            current_index = int(data.get('current_index', -1))
        except (TypeError, ValueError):
            return _bad_request('current_index must be an integer')

        next_index = engine.get_next_question(current_index, answers)
        complete = engine.is_complete(next_index)

        return jsonify({
            'next_index': next_index,
            'complete': complete,
            'question': None if complete else engine.questions[next_index].to_dict(),
            'progress': calculate_progress(current_index, len(engine.questions))
        })

    @app.route('/api/assessment/validate', methods=['POST'])
    def api_validate_answer():
        """Validate one answer and return the matching insight"""
        data = request.get_json(silent=True) or {}
        question_id = data.get('question_id')
        if not question_id:
            return _bad_request('question_id is required')

        question = engine.get_question(question_id)
        if question is None:
            return jsonify({'error': f"Unknown question '{question_id}'"}), 404

        value = data.get('value')
        result = validate_answer(question, value)

        return jsonify({
            **result.to_dict(),
            'insight': generate_insight(question, value) if result.is_valid else None
        })

    # =============================================================================
    # API Routes - Saved Progress
    # =============================================================================

    @app.route('/api/assessment/progress/<user_id>', methods=['PUT'])
    def api_save_progress(user_id):
        """Save in-progress answers"""
        data = request.get_json(silent=True) or {}
        answers = data.get('answers', {})
        if not isinstance(answers, dict):
            return _bad_request('answers must be an object')

        try:
            current_index = int(data.get('current_index', -1))
        except (TypeError, ValueError):
            return _bad_request('current_index must be an integer')

        progress = AssessmentProgress.query.filter_by(user_id=user_id).first()
        if progress is None:
            progress = AssessmentProgress(user_id=user_id)
            db.session.add(progress)

        progress.current_index = current_index
        progress.answers = answers
        progress.updated_at = datetime.utcnow()

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Saving progress for {user_id} failed: {e}")
            return jsonify({'saved': False, 'error': 'Progress could not be saved'}), 503

        return jsonify({'saved': True, 'progress': progress.to_dict()})

    @app.route('/api/assessment/progress/<user_id>', methods=['GET'])
    def api_resume_progress(user_id):
        """Resume saved answers while they are fresh"""
        progress = AssessmentProgress.query.filter_by(user_id=user_id).first()
        if progress is None:
            return jsonify({'error': 'No saved progress'}), 404

        ttl_hours = app.config.get('PROGRESS_TTL_HOURS', 24)
        if not is_progress_fresh(progress.updated_at, datetime.utcnow(), ttl_hours):
            logger.info(f"Discarding stale progress for {user_id}")
            try:
                db.session.delete(progress)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Discarding stale progress for {user_id} failed: {e}")
            return jsonify({'error': 'Saved progress expired'}), 404

        answers = progress.answers or {}
        next_index = engine.get_next_question(progress.current_index, answers)

        return jsonify({
            'progress': progress.to_dict(),
            'next_index': next_index,
            'complete': engine.is_complete(next_index),
            'percent_complete': calculate_progress(progress.current_index, len(engine.questions))
        })

    @app.route('/api/assessment/progress/<user_id>', methods=['DELETE'])
    def api_clear_progress(user_id):
        """Discard saved answers"""
        try:
            AssessmentProgress.query.filter_by(user_id=user_id).delete()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Clearing progress for {user_id} failed: {e}")
            return jsonify({'success': False, 'error': 'Progress could not be cleared'}), 503
        return jsonify({'success': True})

    # =============================================================================
    # API Routes - Submission & Results
    # =============================================================================

    @app.route('/api/assessment/submit', methods=['POST'])
    def api_submit_assessment():
        """Score a completed assessment and store the result"""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get('answers'), dict):
            return _bad_request('answers must be an object')

        answers = data['answers']
        user_id = data.get('user_id')

        result = engine.calculate_score(answers)

        completion = None
        started_at = _parse_timestamp(data.get('started_at'))
        if started_at is not None:
            answered = sum(1 for value in answers.values() if value is not None)
            completion = analyze_completion_time(started_at, result.created_at, answered)

        record = AssessmentRecord(
            user_id=user_id,
            overall_score=result.overall_score,
            risk_level=result.risk_level.value,
            funding_tier=result.funding_readiness.tier,
            result=result.to_dict(),
            answers=answers,
            duration_seconds=completion['duration_seconds'] if completion else None,
            completion_quality=completion['quality'] if completion else None
        )

        saved = True
        try:
            db.session.add(record)
            if user_id:
                AssessmentProgress.query.filter_by(user_id=user_id).delete()
            db.session.commit()
        except SQLAlchemyError as e:
            # The computed result stays valid; the caller may retry storage
            db.session.rollback()
            logger.error(f"Storing assessment result failed: {e}")
            saved = False

        return jsonify({
            'result': result.to_dict(),
            'record_id': record.id if saved else None,
            'saved': saved,
            'completion': completion
        }), 201 if saved else 200

    @app.route('/api/assessment/results/<record_id>', methods=['GET'])
    def api_get_result(record_id):
        """Get a stored result"""
        record = db.get_or_404(AssessmentRecord, record_id)
        return jsonify(record.to_dict())

    @app.route('/api/assessment/users/<user_id>/results', methods=['GET'])
    def api_user_results(user_id):
        """List a user's stored results, newest first"""
        records = AssessmentRecord.query.filter_by(user_id=user_id)\
                                        .order_by(AssessmentRecord.created_at.desc())\
                                        .all()
        return jsonify({
            'results': [r.to_dict() for r in records]
        })

    @app.route('/api/assessment/cohort', methods=['GET'])
    def api_cohort():
        """Distribution of stored overall scores"""
        scores = [row.overall_score for row in AssessmentRecord.query.all()]
        score = request.args.get('score', type=float)

        stats = benchmarks.cohort_statistics(scores, score=score)
        return jsonify({
            'cohort': stats.to_dict(),
            'benchmarks': {
                'industry_average': benchmarks.industry_average,
                'top_performers': benchmarks.top_performers
            }
        })

    # =============================================================================
    # Error Handlers
    # =============================================================================

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f"Server error: {e}")
        return jsonify({'error': 'Internal server error'}), 500

    return app


# =============================================================================
# Main
# =============================================================================

if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'True').lower() == 'true'
    app.run(debug=debug, port=port, host='0.0.0.0')
