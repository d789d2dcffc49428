import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Security settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SERVER_NAME = os.environ.get('SERVER_NAME')
    APPLICATION_ROOT = os.environ.get('APPLICATION_ROOT', '/')
    PREFERRED_URL_SCHEME = os.environ.get('PREFERRED_URL_SCHEME', 'http')

    # Database configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///balanceme.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session configuration
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = int(os.environ.get('SESSION_LIFETIME', 86400))  # 24 hours default

    # Default timezone for users that never set one
    DEFAULT_TIMEZONE = os.environ.get('DEFAULT_TIMEZONE', 'UTC')

    # Weekly goals
    MAX_ACTIVE_GOALS = int(os.environ.get('MAX_ACTIVE_GOALS', 3))
    REPORT_NOTIFICATIONS_ENABLED = os.environ.get('REPORT_NOTIFICATIONS_ENABLED', 'True').lower() == 'true'

    # Daily goals
    DAILY_GOAL_WEEK_SUCCESS_THRESHOLD = float(os.environ.get('DAILY_GOAL_WEEK_SUCCESS_THRESHOLD', 0.6))
    DAILY_GOAL_STREAK_WINDOW_WEEKS = int(os.environ.get('DAILY_GOAL_STREAK_WINDOW_WEEKS', 20))

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT', 'False').lower() == 'true'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Debug mode - automatically set based on environment
    DEBUG = os.environ.get('FLASK_ENV', 'development').lower() == 'development'

    # Testing mode
    TESTING = False

class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True


class DevelopmentConfig(Config):
    DEBUG = True

class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    REPORT_NOTIFICATIONS_ENABLED = True

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}

def get_config():
    """Get configuration based on environment variable"""
    env = os.environ.get('FLASK_ENV', 'development').lower()
    return config.get(env, config['default'])
