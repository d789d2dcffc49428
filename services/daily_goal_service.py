"""Daily goal check-ins and weekly streaks.

A daily goal is checked at most once per local day. A week (Monday to
Sunday) is successful when enough of its days are checked, and the streak
counters on the goal are re-derived from the recent check-in history after
every new check-in rather than incremented.
"""
from collections import namedtuple
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from flask import current_app

from extensions import db
from models import DailyGoal, DailyGoalCheckin
from services.exceptions import GoalNotFoundError, SessionRequiredError, ValidationError
from services.time_window import (DAYS_PER_WEEK, format_daily_week_key, format_date_key,
                                  get_daily_week_start, iter_week_days, resolve_local_date)
from services.user_service import get_user_timezone

DEFAULT_SUCCESS_THRESHOLD = 0.6
DEFAULT_WINDOW_WEEKS = 20
DEFAULT_CHECKIN_DAYS = DEFAULT_WINDOW_WEEKS * DAYS_PER_WEEK
UPDATABLE_FIELDS = ('title', 'category', 'is_active')

StreakStats = namedtuple('StreakStats', ['current_streak_weeks', 'best_streak_weeks', 'last_completed_date', 'weeks'])


def _success_threshold() -> float:
    return current_app.config.get('DAILY_GOAL_WEEK_SUCCESS_THRESHOLD', DEFAULT_SUCCESS_THRESHOLD)


def _window_weeks() -> int:
    return current_app.config.get('DAILY_GOAL_STREAK_WINDOW_WEEKS', DEFAULT_WINDOW_WEEKS)


def _checkin_key(checkin) -> Optional[str]:
    date_key = getattr(checkin, 'date_key', None)
    if date_key:
        return date_key
    check_date = getattr(checkin, 'check_date', None)
    if isinstance(check_date, date):
        return format_date_key(check_date)
    return None


def _checkin_date(checkin) -> Optional[date]:
    check_date = getattr(checkin, 'check_date', None)
    if isinstance(check_date, datetime):
        return check_date.date()
    if isinstance(check_date, date):
        return check_date
    date_key = getattr(checkin, 'date_key', None)
    if date_key:
        try:
            return datetime.strptime(date_key, '%Y-%m-%d').date()
        except ValueError:
            return None
    return None


def _done_keys(checkins: Iterable) -> set:
    keys = set()
    for checkin in checkins or []:
        if checkin is None or not getattr(checkin, 'done', False):
            continue
        key = _checkin_key(checkin)
        if key:
            keys.add(key)
    return keys


def get_weekly_completion(checkins: Iterable, week_start_date: date) -> Dict:
    """
    Completion summary for the Monday-anchored week containing ``week_start_date``.

    Only distinct days inside the 7-day window with a ``done`` check-in count.

    Returns:
        Dictionary with completed_days, total_days, completion_ratio, completion_percent
    """
    done_keys = _done_keys(checkins)
    week_start = get_daily_week_start(week_start_date)

    completed_days = sum(1 for day in iter_week_days(week_start) if format_date_key(day) in done_keys)
    total_days = DAYS_PER_WEEK
    completion_ratio = min(1.0, max(0.0, completed_days / total_days))

    return {
        'completed_days': completed_days,
        'total_days': total_days,
        'completion_ratio': completion_ratio,
        'completion_percent': int(completion_ratio * 100 + 0.5),
    }


def is_week_successful(completion_ratio: float, threshold: float = DEFAULT_SUCCESS_THRESHOLD) -> bool:
    return completion_ratio >= threshold


def compute_streak_stats(checkins: Iterable, current_week_start: date,
                         max_weeks: int = DEFAULT_WINDOW_WEEKS,
                         threshold: float = DEFAULT_SUCCESS_THRESHOLD) -> StreakStats:
    """
    Re-derive streak counters from check-in history.

    Args:
        checkins: Check-ins of one goal, any order
        current_week_start: Any day of the current week
        max_weeks: Number of weeks examined, current week included
        threshold: Minimum completion ratio of a successful week

    Returns:
        StreakStats; ``weeks`` lists one entry per examined week, newest first
    """
    checkins = [checkin for checkin in checkins or [] if checkin is not None]
    current_week_start = get_daily_week_start(current_week_start)

    weeks = []
    for offset in range(max(int(max_weeks), 0)):
        week_start = current_week_start - timedelta(days=offset * DAYS_PER_WEEK)
        completion = get_weekly_completion(checkins, week_start)
        weeks.append({
            'week_start': week_start,
            'week_key': format_daily_week_key(week_start),
            'completed_days': completion['completed_days'],
            'completion_ratio': completion['completion_ratio'],
            'successful': is_week_successful(completion['completion_ratio'], threshold),
        })

    current_streak = 0
    for week in weeks:
        if not week['successful']:
            break
        current_streak += 1

    best_streak = 0
    running = 0
    for week in weeks:
        if week['successful']:
            running += 1
            best_streak = max(best_streak, running)
        else:
            running = 0

    done_dates = [_checkin_date(checkin) for checkin in checkins if getattr(checkin, 'done', False)]
    done_dates = [day for day in done_dates if day is not None]
    last_completed = max(done_dates) if done_dates else None

    return StreakStats(current_streak, best_streak, last_completed, weeks)


def is_goal_done_today(checkins: Iterable, reference_date: date) -> bool:
    return format_date_key(reference_date) in _done_keys(checkins)


def _require_user_id(user_id):
    if not user_id:
        raise SessionRequiredError()


def get_daily_goal(user_id, goal_id) -> DailyGoal:
    if not goal_id:
        raise GoalNotFoundError()
    goal = DailyGoal.query.filter_by(id=goal_id, user_id=user_id).first()
    if goal is None:
        raise GoalNotFoundError(goal_id)
    return goal


def get_daily_goals(user_id, include_inactive: bool = False) -> List[DailyGoal]:
    """Daily goals of the user, newest first."""
    if not user_id:
        return []
    query = DailyGoal.query.filter_by(user_id=user_id)
    if not include_inactive:
        query = query.filter_by(is_active=True)
    return query.order_by(DailyGoal.created_at.desc(), DailyGoal.id.desc()).all()


def get_goal_checkins(user_id, goal_id, max_days: int = DEFAULT_CHECKIN_DAYS) -> List[DailyGoalCheckin]:
    """Most recent check-ins of one goal, newest first."""
    if not user_id or not goal_id:
        return []
    goal = get_daily_goal(user_id, goal_id)
    return (DailyGoalCheckin.query
            .filter_by(goal_id=goal.id)
            .order_by(DailyGoalCheckin.check_date.desc())
            .limit(max_days)
            .all())


def create_daily_goal(user_id, title: str = None, category: str = 'custom', is_active: bool = True) -> DailyGoal:
    _require_user_id(user_id)

    goal = DailyGoal(
        user_id=user_id,
        title=(title or '').strip() or 'Daily goal',
        category=category or 'custom',
        is_active=bool(is_active),
        current_streak_weeks=0,
        best_streak_weeks=0,
    )
    db.session.add(goal)
    db.session.commit()

    current_app.logger.info(f'Daily goal {goal.id} created for user {user_id}')
    return goal


def update_daily_goal(user_id, goal_id, **updates) -> DailyGoal:
    """Update title, category or active flag. Streak fields are never written here."""
    _require_user_id(user_id)
    goal = get_daily_goal(user_id, goal_id)

    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f'Fields cannot be updated: {", ".join(sorted(unknown))}')

    if 'title' in updates:
        goal.title = (updates['title'] or '').strip() or goal.title
    if 'category' in updates:
        goal.category = updates['category'] or 'custom'
    if 'is_active' in updates:
        goal.is_active = bool(updates['is_active'])

    goal.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(f'Daily goal {goal.id} updated for user {user_id}: {sorted(updates)}')
    return goal


def deactivate_daily_goal(user_id, goal_id) -> DailyGoal:
    return update_daily_goal(user_id, goal_id, is_active=False)


def delete_daily_goal(user_id, goal_id) -> bool:
    """Delete a goal together with its check-ins."""
    if not user_id or not goal_id:
        return False
    goal = get_daily_goal(user_id, goal_id)

    DailyGoalCheckin.query.filter_by(goal_id=goal.id).delete()
    db.session.delete(goal)
    db.session.commit()

    current_app.logger.info(f'Daily goal {goal_id} deleted for user {user_id}')
    return True


def update_weekly_stats_and_streak(user_id, goal_id, reference_date=None,
                                   max_weeks: Optional[int] = None) -> Optional[StreakStats]:
    """
    Recompute and store the streak fields of one daily goal.

    The most recent ``max_weeks * 7`` check-ins are read and the counters are
    rewritten as a whole, so running this twice gives the same result.
    """
    if not user_id or not goal_id:
        return None

    goal = get_daily_goal(user_id, goal_id)
    max_weeks = max_weeks or _window_weeks()

    today = resolve_local_date(reference_date, get_user_timezone(user_id))
    current_week_start = get_daily_week_start(today)

    checkins = (DailyGoalCheckin.query
                .filter_by(goal_id=goal.id)
                .order_by(DailyGoalCheckin.check_date.desc())
                .limit(max_weeks * DAYS_PER_WEEK)
                .all())

    stats = compute_streak_stats(checkins, current_week_start, max_weeks, _success_threshold())

    goal.week_start = current_week_start
    goal.current_streak_weeks = stats.current_streak_weeks
    goal.best_streak_weeks = stats.best_streak_weeks
    if stats.last_completed_date is not None:
        goal.last_completed_date = stats.last_completed_date
    goal.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(
        f'Daily goal {goal.id} streak recomputed: current={stats.current_streak_weeks} best={stats.best_streak_weeks}')
    return stats


def toggle_goal_today(user_id, goal_id, reference_date=None) -> Dict:
    """
    Mark the goal as done for the user's local today.

    A day that is already done is left untouched and no recompute runs.

    Returns:
        ``{'already_done': bool}``
    """
    _require_user_id(user_id)
    goal = get_daily_goal(user_id, goal_id)

    today = resolve_local_date(reference_date, get_user_timezone(user_id))
    today_key = format_date_key(today)

    checkin = DailyGoalCheckin.query.filter_by(goal_id=goal.id, date_key=today_key).first()
    if checkin is not None and checkin.done:
        return {'already_done': True}

    if checkin is None:
        checkin = DailyGoalCheckin(goal_id=goal.id, date_key=today_key, check_date=today)
        db.session.add(checkin)
    checkin.done = True
    checkin.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(f'Daily goal {goal.id} checked for {today_key}')

    try:
        update_weekly_stats_and_streak(user_id, goal.id, reference_date=today)
    except Exception as e:
        # The check-in stays; the next recompute rebuilds the counters
        db.session.rollback()
        current_app.logger.warning(f'Streak recompute failed for daily goal {goal.id}: {e}')

    return {'already_done': False}
