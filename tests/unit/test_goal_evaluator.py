"""
Unit tests for the weekly goal evaluator.
"""
import pytest
from types import SimpleNamespace

from models import Goal
from services.goal_evaluator import compute_progress_percent, evaluate_comparison, evaluate_goal_progress, next_streak


def custom_goal(target, comparison='at_least'):
    return Goal(category='custom', metric_type='frequency', comparison=comparison, target_value=target, filters={})


def activities(total):
    return [SimpleNamespace(value=total, goal_id=1)]


def previous(streak):
    return SimpleNamespace(streak_after_week=streak)


class TestComparison:

    def test_at_least_and_at_most(self):
        assert evaluate_comparison(2, 2, 'at_least')
        assert not evaluate_comparison(1.99, 2, 'at_least')
        assert evaluate_comparison(2, 2, 'at_most')
        assert not evaluate_comparison(2.01, 2, 'at_most')


class TestProgressPercent:

    def test_zero_target(self):
        assert compute_progress_percent(0, 0, 'at_least', True) == 100.0
        assert compute_progress_percent(3, 0, 'at_most', False) == 0.0

    def test_at_least_is_clamped(self):
        assert compute_progress_percent(10, 5, 'at_least', True) == 100
        assert compute_progress_percent(2, 5, 'at_least', False) == pytest.approx(40)

    def test_at_most_is_headroom(self):
        assert compute_progress_percent(1, 4, 'at_most', True) == pytest.approx(75)
        assert compute_progress_percent(4, 4, 'at_most', True) == 0
        assert compute_progress_percent(6, 5, 'at_most', False) == 0


class TestStreak:

    def test_met_extends_previous(self):
        assert next_streak(True, previous(2)) == 3

    def test_unmet_resets(self):
        assert next_streak(False, previous(7)) == 0

    def test_no_previous_snapshot(self):
        assert next_streak(True, None) == 1

    def test_corrupt_previous_streak(self):
        assert next_streak(True, previous('n/a')) == 1
        assert next_streak(True, previous(-4)) == 1


class TestEvaluateGoalProgress:

    def test_average_mood_goal_met(self):
        goal = Goal(category='mood', metric_type='avg_mood', comparison='at_least', target_value=1.5, filters={})
        entries = [SimpleNamespace(emojis=['alegre'], valence=v, energy=1) for v in (2, 2, 1, 2)]

        evaluation = evaluate_goal_progress(goal, mood_entries=entries)

        assert evaluation.actual_value == 1.75
        assert evaluation.met is True
        assert evaluation.progress_percent == 100
        assert evaluation.delta == 0.25
        assert evaluation.coverage_count == 4
        assert evaluation.streak_after_week == 1

    def test_at_most_goal_exceeded(self):
        evaluation = evaluate_goal_progress(custom_goal(5, 'at_most'), activities=activities(6))

        assert evaluation.met is False
        assert evaluation.progress_percent == 0
        assert evaluation.delta == 1
        assert evaluation.streak_after_week == 0

    def test_streak_uses_previous_snapshot(self):
        evaluation = evaluate_goal_progress(custom_goal(1), activities=activities(2), previous_snapshot=previous(2))
        assert evaluation.streak_after_week == 3

        evaluation = evaluate_goal_progress(custom_goal(5), activities=activities(2), previous_snapshot=previous(2))
        assert evaluation.streak_after_week == 0

    def test_rounding(self):
        evaluation = evaluate_goal_progress(custom_goal(3), activities=activities(1))

        assert evaluation.actual_value == 1
        assert evaluation.delta == -2
        assert evaluation.progress_percent == 33.3

    def test_non_numeric_target_is_zero(self):
        goal = custom_goal('lots')
        evaluation = evaluate_goal_progress(goal)

        assert evaluation.target_value == 0
        assert evaluation.met is True
        assert evaluation.progress_percent == 100

    def test_unknown_comparison_defaults_to_at_least(self):
        goal = custom_goal(1, comparison='roughly')
        evaluation = evaluate_goal_progress(goal, activities=activities(1))
        assert evaluation.comparison == 'at_least'
        assert evaluation.met is True

    def test_to_dict(self):
        payload = evaluate_goal_progress(custom_goal(2), activities=activities(1)).to_dict()
        assert set(payload) == {'actual_value', 'coverage_count', 'met', 'comparison', 'target_value', 'delta',
                                'streak_after_week', 'progress_percent', 'details'}
