from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from config import get_config
from extensions import db, migrate
from services.exceptions import (
    WellbeingError,
    SessionRequiredError,
    GoalNotFoundError,
    ValidationError,
    ActiveGoalLimitError,
    NoActiveGoalsError,
)
import logging
from logging.handlers import RotatingFileHandler
import os
import sys

ERROR_STATUS_CODES = (
    (SessionRequiredError, 401),
    (GoalNotFoundError, 404),
    (ValidationError, 400),
    (ActiveGoalLimitError, 409),
    (NoActiveGoalsError, 409),
)


def error_status(error):
    for error_type, status in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 400


def _setup_logging(app):
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    formatter = logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    if app.config.get('LOG_TO_STDOUT'):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(level)
        app.logger.addHandler(stream_handler)
    elif not app.debug and not app.testing:
        if not os.path.exists('logs'):
            os.mkdir('logs')
        file_handler = RotatingFileHandler('logs/balanceme.log', maxBytes=10240, backupCount=10)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)

    app.logger.setLevel(level)


def create_app(config_name=None):
    app = Flask(__name__)

    # Get configuration based on environment or passed parameter
    if config_name:
        from config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models to register them with SQLAlchemy
    import models  # noqa: F401

    _setup_logging(app)
    app.logger.info('BalanceMe progress engine startup')

    # One report service per application so its in-flight registry is shared
    # by every request handled here.
    from services.weekly_report_service import WeeklyReportService
    app.extensions['weekly_reports'] = WeeklyReportService()

    # Register blueprints
    from routes.goals import goals_bp
    from routes.daily_goals import daily_goals_bp
    from routes.api import api_bp

    app.register_blueprint(goals_bp, url_prefix='/goals')
    app.register_blueprint(daily_goals_bp, url_prefix='/daily-goals')
    app.register_blueprint(api_bp, url_prefix='/api')

    # Main route
    @app.route('/')
    def index():
        return jsonify({'success': True, 'service': 'balanceme-progress'})

    # Error handlers
    @app.errorhandler(WellbeingError)
    def wellbeing_error(error):
        status = error_status(error)
        return jsonify({'success': False, 'message': str(error)}), status

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'message': 'Not found'}), 404

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        app.logger.error(f'Database error: {error}')
        return jsonify({'success': False, 'message': 'Could not save your changes, please retry.'}), 500

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'success': False, 'message': 'Internal server error'}), 500

    return app
