"""Business logic service layer.

This package groups the progress engine's operations: week windows, metric
aggregation, goal evaluation, weekly reports and daily goal streaks. Keeping
business logic out of route handlers makes it testable without HTTP.
"""

from services.user_service import create_user, require_user, update_user_timezone  # noqa: F401
from services.log_service import add_mood_entry, add_habit_entry  # noqa: F401
from services.goal_service import create_goal, update_goal, archive_goal, log_goal_activity  # noqa: F401
from services.goal_evaluator import evaluate_goal_progress  # noqa: F401
from services.daily_goal_service import (
    create_daily_goal,
    get_weekly_completion,
    toggle_goal_today,
    update_weekly_stats_and_streak,
)  # noqa: F401
from services.weekly_report_service import WeeklyReportService  # noqa: F401


__all__ = [
    "create_user",
    "require_user",
    "update_user_timezone",
    "add_mood_entry",
    "add_habit_entry",
    "create_goal",
    "update_goal",
    "archive_goal",
    "log_goal_activity",
    "evaluate_goal_progress",
    "create_daily_goal",
    "get_weekly_completion",
    "toggle_goal_today",
    "update_weekly_stats_and_streak",
    "WeeklyReportService",
]
