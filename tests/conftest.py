"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
from datetime import date, datetime, timedelta

from app import create_app, db
from models import DailyGoal, DailyGoalCheckin, Goal, HabitEntry, MoodEntry, User
from services.time_window import format_date_key

# Wednesday of ISO week 2025-W11 (Monday 2025-03-10)
REFERENCE_DATE = date(2025, 3, 12)
WEEK_MONDAY = date(2025, 3, 10)
WEEK_KEY = '2025-W11'


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app('testing')
    app.config.update({
        'SECRET_KEY': 'test-secret-key',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Create database session."""
    with app.app_context():
        yield db.session


@pytest.fixture
def report_service(app):
    """The application's weekly report service."""
    return app.extensions['weekly_reports']


@pytest.fixture
def test_user(db_session):
    """Create test user."""
    user = User(email='test@example.com', display_name='Test', timezone='UTC')
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def logged_in_client(client, test_user):
    """Client with the test user in session."""
    with client.session_transaction() as sess:
        sess['user_id'] = test_user.id
    return client


def make_goal(db_session, user, **fields):
    """Insert a goal directly, bypassing the active-goal cap."""
    values = {
        'title': 'Goal',
        'category': 'custom',
        'metric_type': 'frequency',
        'comparison': 'at_least',
        'target_value': 1,
        'filters': {},
        'is_active': True,
    }
    values.update(fields)
    goal = Goal(user_id=user.id, **values)
    db_session.add(goal)
    db_session.commit()
    return goal


@pytest.fixture
def mood_goal(db_session, test_user):
    """Average mood of at least 1.5 over the week."""
    return make_goal(db_session, test_user, title='Feel good', category='mood',
                     metric_type='avg_mood', target_value=1.5)


@pytest.fixture
def habit_goal(db_session, test_user):
    """At least 5 movement entries per week."""
    return make_goal(db_session, test_user, title='Move more', category='habit',
                     target_value=5, filters={'categories': ['movimiento']})


@pytest.fixture
def daily_goal(db_session, test_user):
    goal = DailyGoal(user_id=test_user.id, title='Drink water', category='custom')
    db_session.add(goal)
    db_session.commit()
    return goal


def add_mood(db_session, user, valence, when, emojis=('alegre',), energy=1.0):
    entry = MoodEntry(user_id=user.id, emojis=list(emojis), valence=valence, energy=energy, created_at=when)
    db_session.add(entry)
    db_session.commit()
    return entry


def add_habit(db_session, user, when, preset_habits=(), categories=()):
    entry = HabitEntry(user_id=user.id, preset_habits=list(preset_habits), categories=list(categories), created_at=when)
    db_session.add(entry)
    db_session.commit()
    return entry


def add_checkins(db_session, goal, days):
    """Insert done check-ins for each date in ``days``."""
    for day in days:
        db_session.add(DailyGoalCheckin(goal_id=goal.id, date_key=format_date_key(day), check_date=day, done=True))
    db_session.commit()


def week_days(monday, count):
    """The first ``count`` days of the week starting at ``monday``."""
    return [monday + timedelta(days=offset) for offset in range(count)]


def at(day, hour=12):
    return datetime.combine(day, datetime.min.time()).replace(hour=hour)
