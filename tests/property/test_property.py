"""
Property-based tests for key functionalities using Hypothesis.
"""
from datetime import date, timedelta
from types import SimpleNamespace

import pytz
from hypothesis import given, settings, strategies as st

from models import Goal
from services.daily_goal_service import compute_streak_stats, get_weekly_completion
from services.goal_evaluator import compute_progress_percent, evaluate_goal_progress, next_streak
from services.time_window import WEEK_SPAN, get_week_window

settings.register_profile("engine", deadline=timedelta(milliseconds=1000))
settings.load_profile("engine")

date_strategy = st.dates(min_value=date(2000, 1, 1), max_value=date(2099, 12, 31))

timezone_strategy = st.sampled_from(['UTC', 'Europe/Madrid', 'America/New_York', 'America/Bogota',
                                     'Asia/Tokyo', 'Australia/Sydney', 'Pacific/Chatham'])

number_strategy = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)

# Weeks back from the current week where the goal was checked, with days checked per week
history_strategy = st.dictionaries(st.integers(min_value=0, max_value=25), st.integers(min_value=0, max_value=7),
                                   max_size=26)


def history_checkins(current_monday, history):
    checkins = []
    for weeks_back, days in history.items():
        monday = current_monday - timedelta(weeks=weeks_back)
        for offset in range(days):
            day = monday + timedelta(days=offset)
            checkins.append(SimpleNamespace(date_key=day.isoformat(), check_date=day, done=True))
    return checkins


class TestPropertyBased:
    """A collection of property-based tests."""

    @given(reference=date_strategy, tz=timezone_strategy)
    def test_week_window_shape(self, reference, tz):
        window = get_week_window(reference, tz)

        assert window.week_end - window.week_start == WEEK_SPAN
        assert window.week_start.weekday() == 0
        assert window.week_start.date() <= reference <= window.week_end.date()

        iso_year, iso_week, _ = reference.isocalendar()
        assert window.week_key == f'{iso_year}-W{iso_week:02d}'

    @given(reference=date_strategy, tz=timezone_strategy)
    def test_utc_bounds_contain_local_week(self, reference, tz):
        window = get_week_window(reference, tz)
        local_tz = pytz.timezone(tz)

        start = local_tz.localize(window.week_start).astimezone(pytz.UTC).replace(tzinfo=None)
        assert window.start_utc == start
        assert window.start_utc < window.end_utc

    @given(actual=number_strategy, target=number_strategy, comparison=st.sampled_from(['at_least', 'at_most']))
    def test_progress_is_a_percentage(self, actual, target, comparison):
        goal = Goal(category='custom', metric_type='frequency', comparison=comparison, target_value=target,
                    filters={})
        activities = [SimpleNamespace(value=actual, goal_id=1)]

        evaluation = evaluate_goal_progress(goal, activities=activities)

        assert 0 <= evaluation.progress_percent <= 100
        assert 0 <= compute_progress_percent(actual, target, comparison, evaluation.met) <= 100
        assert evaluation.streak_after_week >= 0

    @given(met=st.booleans(), previous=st.one_of(st.none(), st.integers(min_value=0, max_value=500)))
    def test_streak_recurrence(self, met, previous):
        snapshot = None if previous is None else SimpleNamespace(streak_after_week=previous)
        streak = next_streak(met, snapshot)

        if met:
            assert streak == (previous or 0) + 1
        else:
            assert streak == 0

    @given(history=history_strategy, threshold=st.sampled_from([0.3, 0.6, 0.9]))
    def test_best_streak_never_below_current(self, history, threshold):
        current_monday = date(2025, 3, 10)
        stats = compute_streak_stats(history_checkins(current_monday, history), current_monday, threshold=threshold)

        assert stats.best_streak_weeks >= stats.current_streak_weeks
        assert 0 <= stats.current_streak_weeks <= 20
        assert stats.best_streak_weeks <= 20

    @given(history=history_strategy, reference=st.integers(min_value=0, max_value=25))
    def test_completion_counts_only_its_week(self, history, reference):
        current_monday = date(2025, 3, 10)
        checkins = history_checkins(current_monday, history)

        completion = get_weekly_completion(checkins, current_monday - timedelta(weeks=reference))

        assert completion['completed_days'] == history.get(reference, 0)
        assert 0 <= completion['completion_ratio'] <= 1
