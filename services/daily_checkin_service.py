"""User-level daily activity check-ins.

Logging a mood or a habit marks the corresponding flag on today's check-in.
A day counts towards the activity streak only when both flags are set.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Set

from flask import current_app

from extensions import db
from models import DailyCheckin
from services.time_window import format_date_key, resolve_local_date
from services.user_service import get_user_timezone


def upsert_daily_checkin(user_id, mood_logged: Optional[bool] = None,
                         habits_logged: Optional[bool] = None,
                         reference_date: Optional[date] = None) -> Optional[DailyCheckin]:
    """Set the given flags on today's check-in. Flags are never cleared."""
    if not user_id:
        return None
    if mood_logged is not True and habits_logged is not True:
        return None

    today = resolve_local_date(reference_date, get_user_timezone(user_id))
    date_key = format_date_key(today)

    checkin = DailyCheckin.query.filter_by(user_id=user_id, date_key=date_key).first()
    if checkin is None:
        checkin = DailyCheckin(user_id=user_id, date_key=date_key, mood_logged=False, habits_logged=False)
        db.session.add(checkin)

    if mood_logged is True:
        checkin.mood_logged = True
    if habits_logged is True:
        checkin.habits_logged = True

    db.session.commit()
    return checkin


def fetch_daily_checkins(user_id, days: int = 60) -> List[DailyCheckin]:
    """Most recent check-ins first, at most ``days`` rows."""
    if not user_id:
        return []
    try:
        max_days = int(days)
    except (TypeError, ValueError):
        max_days = 60
    if max_days <= 0:
        max_days = 60

    return (DailyCheckin.query
            .filter_by(user_id=user_id)
            .order_by(DailyCheckin.date_key.desc())
            .limit(max_days)
            .all())


def get_valid_streak_dates(checkins: Iterable[DailyCheckin]) -> Set[str]:
    return {
        checkin.date_key
        for checkin in checkins or []
        if checkin is not None and checkin.mood_logged is True and checkin.habits_logged is True and checkin.date_key
    }


def calculate_streak(checkins: Iterable[DailyCheckin], today: date) -> int:
    """Consecutive valid days ending today; 0 when today is not valid yet."""
    valid_days = get_valid_streak_dates(checkins)

    streak = 0
    cursor = today
    while format_date_key(cursor) in valid_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def get_user_streak(user_id, reference_date: Optional[date] = None) -> int:
    if not user_id:
        return 0
    today = resolve_local_date(reference_date, get_user_timezone(user_id))
    streak = calculate_streak(fetch_daily_checkins(user_id, 60), today)
    current_app.logger.debug(f'Activity streak for user {user_id}: {streak}')
    return streak
