"""Raw entry service functions.

These helpers record the raw activity the progress engine reads (mood
entries, habit entries) and provide the week-range readers used by the
weekly report generator. Timestamps are stored as naive UTC.
"""
from datetime import datetime
from typing import Iterable, List, Optional

import pytz
from flask import current_app

from extensions import db
from models import GoalActivity, HabitEntry, MoodEntry
from services.daily_checkin_service import upsert_daily_checkin
from services.mood_scores import compute_mood_averages, mood_score_to_label
from services.user_service import require_user


def _to_utc_naive(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.utcnow()
    if value.tzinfo is not None:
        return value.astimezone(pytz.UTC).replace(tzinfo=None)
    return value


def add_mood_entry(user_id: int,
                   emojis: Iterable[str],
                   valence: Optional[float] = None,
                   energy: Optional[float] = None,
                   note: str = "",
                   created_at: Optional[datetime] = None) -> MoodEntry:
    """
    Create and persist a mood entry, then mark today's mood check-in.

    Args:
        user_id: ID of the user logging the mood
        emojis: Emoji names selected by the user
        valence: Explicit valence score (computed from the emojis when omitted)
        energy: Explicit energy score (computed from the emojis when omitted)
        note: Optional free text
        created_at: Timestamp (aware, or naive UTC); defaults to now

    Returns:
        Created MoodEntry
    """
    require_user(user_id)
    emojis = [emoji for emoji in (emojis or []) if isinstance(emoji, str)]

    computed = compute_mood_averages(emojis)
    scores = {
        'valence': computed['valence'] if valence is None else valence,
        'energy': computed['energy'] if energy is None else energy,
    }

    entry = MoodEntry(
        user_id=user_id,
        emojis=emojis,
        valence=scores['valence'],
        energy=scores['energy'],
        mood_label=mood_score_to_label(scores),
        note=note,
        created_at=_to_utc_naive(created_at),
    )
    db.session.add(entry)
    db.session.commit()

    upsert_daily_checkin(user_id, mood_logged=True)
    current_app.logger.info(f'Mood entry {entry.id} logged for user {user_id}')
    return entry


def add_habit_entry(user_id: int,
                    preset_habits: Iterable[str] = (),
                    categories: Iterable[str] = (),
                    summary: str = "",
                    created_at: Optional[datetime] = None) -> HabitEntry:
    """Create and persist a habit entry, then mark today's habits check-in."""
    require_user(user_id)

    entry = HabitEntry(
        user_id=user_id,
        preset_habits=[tag for tag in (preset_habits or []) if isinstance(tag, str)],
        categories=[tag for tag in (categories or []) if isinstance(tag, str)],
        summary=summary,
        created_at=_to_utc_naive(created_at),
    )
    db.session.add(entry)
    db.session.commit()

    upsert_daily_checkin(user_id, habits_logged=True)
    current_app.logger.info(f'Habit entry {entry.id} logged for user {user_id}')
    return entry


def get_mood_entries_between(user_id: int, start_utc: datetime, end_utc: datetime) -> List[MoodEntry]:
    """Mood entries with ``start_utc <= created_at <= end_utc``."""
    return MoodEntry.query.filter(
        MoodEntry.user_id == user_id,
        MoodEntry.created_at.between(start_utc, end_utc)
    ).order_by(MoodEntry.created_at).all()


def get_habit_entries_between(user_id: int, start_utc: datetime, end_utc: datetime) -> List[HabitEntry]:
    """Habit entries with ``start_utc <= created_at <= end_utc``."""
    return HabitEntry.query.filter(
        HabitEntry.user_id == user_id,
        HabitEntry.created_at.between(start_utc, end_utc)
    ).order_by(HabitEntry.created_at).all()


def get_goal_activities_between(user_id: int, start_utc: datetime, end_utc: datetime) -> List[GoalActivity]:
    """Activity logs of every goal with ``start_utc <= created_at <= end_utc``."""
    return GoalActivity.query.filter(
        GoalActivity.user_id == user_id,
        GoalActivity.created_at.between(start_utc, end_utc)
    ).order_by(GoalActivity.created_at).all()
