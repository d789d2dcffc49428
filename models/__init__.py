"""Database models package.

This package contains the SQLAlchemy ORM model definitions for the application.
Raw entries (moods, habits, goal activities, check-ins) are written by the UI
layer; snapshots, weekly reports and streak fields are derived by the
services package.
"""

# Re-export model classes from individual modules
from .user import User  # noqa: F401
from .mood import MoodEntry  # noqa: F401
from .habit import HabitEntry  # noqa: F401
from .goal import Goal, GoalActivity  # noqa: F401
from .snapshot import GoalSnapshot, WeeklyReport  # noqa: F401
from .daily_goal import DailyGoal, DailyGoalCheckin  # noqa: F401
from .daily_checkin import DailyCheckin  # noqa: F401
from .notification import Notification  # noqa: F401

__all__ = [
    "User",
    "MoodEntry",
    "HabitEntry",
    "Goal",
    "GoalActivity",
    "GoalSnapshot",
    "WeeklyReport",
    "DailyGoal",
    "DailyGoalCheckin",
    "DailyCheckin",
    "Notification",
]
