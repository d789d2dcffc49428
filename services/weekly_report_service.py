"""Weekly report generation.

Evaluates every active goal for one ISO week and persists one snapshot per
goal plus one aggregate report in a single commit. Snapshot and report ids
are derived from ``(goal_id, week_key)`` and ``(user_id, week_key)``, so a
re-run overwrites the same rows instead of adding new ones.
"""
import threading
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import GoalSnapshot, WeeklyReport
from models.snapshot import report_key, snapshot_key
from services import goal_service, log_service
from services.exceptions import NoActiveGoalsError
from services.goal_evaluator import evaluate_goal_progress
from services.metric_aggregator import summarize_habit_entries, summarize_mood_entries
from services.notification_dispatcher import NotificationDispatcher
from services.time_window import get_week_window
from services.user_service import require_user


class WeeklyReportService:
    """Generates weekly reports; one instance is shared per application.

    The instance remembers which ``(user_id, week_key)`` pairs are being
    generated right now, so a second call for the same week made while the
    first is still running returns immediately. Calls from other processes
    are not coordinated; they write identical rows under the same ids.
    """

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self._in_flight = set()
        self._lock = threading.Lock()

    def is_generating(self, user_id, week_key: str) -> bool:
        with self._lock:
            return (user_id, week_key) in self._in_flight

    def _claim(self, key) -> bool:
        with self._lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def _release(self, key) -> None:
        with self._lock:
            self._in_flight.discard(key)

    def generate_weekly_report(self, user_id, reference_date=None, force: bool = False) -> Dict:
        """
        Generate the report for the week containing ``reference_date``.

        Args:
            user_id: Session user
            reference_date: Any date/datetime inside the target week (defaults to now)
            force: Regenerate even if a report for the week already exists

        Returns:
            ``{'skipped': True, 'reason': ..., 'week_key': ...}`` when nothing was
            done, otherwise the week key, goal summaries and overviews.

        Raises:
            SessionRequiredError: no session user
            NoActiveGoalsError: the user has no active goal
            SQLAlchemyError: the commit failed; nothing was written
        """
        user = require_user(user_id)
        active_goals = goal_service.get_active_goals(user.id)
        if not active_goals:
            raise NoActiveGoalsError()

        window = get_week_window(reference_date, user.timezone_name)
        key = (user.id, window.week_key)

        if not self._claim(key):
            current_app.logger.info(f'Weekly report {window.week_key} for user {user.id} already in progress')
            return {'skipped': True, 'reason': 'in_progress', 'week_key': window.week_key}

        try:
            if not force and db.session.get(WeeklyReport, report_key(user.id, window.week_key)) is not None:
                current_app.logger.info(f'Weekly report {window.week_key} for user {user.id} exists, skipping')
                return {'skipped': True, 'reason': 'exists', 'week_key': window.week_key}

            result = self._generate(user, active_goals, window)
        finally:
            self._release(key)

        self._notify(user.id, result)
        return result

    def _generate(self, user, active_goals, window) -> Dict:
        mood_entries = log_service.get_mood_entries_between(user.id, window.start_utc, window.end_utc)
        habit_entries = log_service.get_habit_entries_between(user.id, window.start_utc, window.end_utc)
        activities = log_service.get_goal_activities_between(user.id, window.start_utc, window.end_utc)

        activities_by_goal = defaultdict(list)
        for activity in activities:
            if activity.goal_id:
                activities_by_goal[activity.goal_id].append(activity)

        # Prior snapshots are read before anything is staged in the session
        previous_snapshots = {
            goal.id: goal_service.get_previous_snapshot(goal.id, window.week_key)
            for goal in active_goals
        }

        generated_at = datetime.utcnow()
        snapshots: List[GoalSnapshot] = []
        goal_summaries = []

        for goal in active_goals:
            evaluation = evaluate_goal_progress(
                goal,
                mood_entries=mood_entries,
                habit_entries=habit_entries,
                activities=activities_by_goal.get(goal.id, []),
                previous_snapshot=previous_snapshots[goal.id],
            )
            measurement_label = goal.display_measurement_label

            snapshots.append(GoalSnapshot(
                id=snapshot_key(goal.id, window.week_key),
                user_id=user.id,
                goal_id=goal.id,
                goal_title=goal.title,
                goal_category=goal.category,
                metric_type=goal.metric_type,
                measurement_label=measurement_label,
                comparison=evaluation.comparison,
                target_value=evaluation.target_value,
                actual_value=evaluation.actual_value,
                delta=evaluation.delta,
                coverage_count=evaluation.coverage_count,
                met=evaluation.met,
                streak_after_week=evaluation.streak_after_week,
                progress_percent=evaluation.progress_percent,
                details=evaluation.details,
                week_key=window.week_key,
                week_start=window.start_utc,
                week_end=window.end_utc,
                generated_at=generated_at,
            ))

            goal_summaries.append({
                'goal_id': goal.id,
                'title': goal.title,
                'category': goal.category,
                'metric_type': goal.metric_type,
                'met': evaluation.met,
                'actual_value': evaluation.actual_value,
                'target_value': evaluation.target_value,
                'comparison': evaluation.comparison,
                'delta': evaluation.delta,
                'streak_after_week': evaluation.streak_after_week,
                'measurement_label': measurement_label,
                'progress_percent': evaluation.progress_percent,
            })

        mood_overview = summarize_mood_entries(mood_entries)
        habit_overview = summarize_habit_entries(habit_entries)

        report = WeeklyReport(
            id=report_key(user.id, window.week_key),
            user_id=user.id,
            week_key=window.week_key,
            week_start=window.start_utc,
            week_end=window.end_utc,
            generated_at=generated_at,
            goals=goal_summaries,
            mood_overview=mood_overview,
            habit_overview=habit_overview,
        )

        try:
            for snapshot in snapshots:
                db.session.merge(snapshot)
            db.session.merge(report)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f'Weekly report {window.week_key} for user {user.id} not saved: {e}')
            raise

        current_app.logger.info(
            f'Weekly report {window.week_key} saved for user {user.id}: '
            f'{sum(1 for s in goal_summaries if s["met"])}/{len(goal_summaries)} goals met')

        return {
            'skipped': False,
            'week_key': window.week_key,
            'week_start': window.week_start.isoformat(),
            'week_end': window.week_end.isoformat(),
            'goal_summaries': goal_summaries,
            'mood_overview': mood_overview,
            'habit_overview': habit_overview,
        }

    def _notify(self, user_id, result: Dict) -> None:
        """Best-effort summary notification; failures never reach the caller."""
        if not current_app.config.get('REPORT_NOTIFICATIONS_ENABLED', True):
            return

        met_count = sum(1 for summary in result['goal_summaries'] if summary['met'])
        try:
            self.dispatcher.dispatch(
                user_id,
                category='weekly_report',
                title='Weekly report ready',
                body=f'Week {result["week_key"]}: {met_count} of {len(result["goal_summaries"])} goals met.',
                extra_data={'type': 'weekly-report', 'week_key': result['week_key']},
            )
        except Exception as e:
            db.session.rollback()
            current_app.logger.warning(f'Weekly report notification failed for user {user_id}: {e}')


def get_weekly_reports(user_id, limit: int = 12) -> List[WeeklyReport]:
    """Most recent reports first."""
    return (WeeklyReport.query
            .filter_by(user_id=user_id)
            .order_by(WeeklyReport.week_start.desc())
            .limit(limit)
            .all())


def get_goal_snapshots(user_id, goal_id=None, limit: int = 40) -> List[GoalSnapshot]:
    """Most recent snapshots first, optionally for a single goal."""
    query = GoalSnapshot.query.filter_by(user_id=user_id)
    if goal_id is not None:
        query = query.filter_by(goal_id=goal_id)
    return query.order_by(GoalSnapshot.week_start.desc(), GoalSnapshot.goal_id).limit(limit).all()
