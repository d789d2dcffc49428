"""Weekly goal evaluation.

Turns an aggregated metric into a verdict for one goal and one week: whether
the target was met, by how much, how far along the user is, and the streak
after this week. Everything here is pure and never touches the database.
"""
from dataclasses import asdict, dataclass, field
from typing import Iterable, Optional

from services.metric_aggregator import aggregate_goal_metric
from services.numbers import clamp, round_to, to_number


@dataclass
class GoalEvaluation:
    actual_value: float
    coverage_count: int
    met: bool
    comparison: str
    target_value: float
    delta: float
    streak_after_week: int
    progress_percent: float
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def evaluate_comparison(actual: float, target: float, comparison: str) -> bool:
    if comparison == 'at_most':
        return actual <= target
    return actual >= target


def compute_progress_percent(actual: float, target: float, comparison: str, met: bool) -> float:
    """Progress towards the target in [0, 100].

    For ``at_most`` goals progress is the remaining headroom below the target;
    going over the target means no progress at all.
    """
    if target <= 0:
        return 100.0 if met else 0.0
    if comparison == 'at_most':
        if actual <= target:
            return clamp((target - actual) / target * 100)
        return 0.0
    return clamp(actual / target * 100)


def next_streak(met: bool, previous_snapshot=None) -> int:
    """Streak after this week, given the snapshot of the previous evaluated week."""
    if not met:
        return 0
    previous = to_number(getattr(previous_snapshot, 'streak_after_week', None))
    return int(max(previous, 0)) + 1


def evaluate_goal_progress(goal, mood_entries: Iterable = (), habit_entries: Iterable = (),
                           activities: Iterable = (), previous_snapshot: Optional[object] = None) -> GoalEvaluation:
    """
    Evaluate one goal against one week of entries.

    Args:
        goal: Goal row (category, metric_type, comparison, target_value, filters)
        mood_entries: Mood entries inside the week
        habit_entries: Habit entries inside the week
        activities: This goal's activity logs inside the week
        previous_snapshot: Snapshot of the closest earlier week, if any

    Returns:
        GoalEvaluation with rounded actual/delta (2 decimals) and progress (1 decimal)
    """
    comparison = goal.comparison if goal.comparison in ('at_least', 'at_most') else 'at_least'
    target = to_number(goal.target_value)

    metric = aggregate_goal_metric(goal, mood_entries, habit_entries, activities)
    actual = to_number(metric.actual_value)

    met = evaluate_comparison(actual, target, comparison)

    return GoalEvaluation(
        actual_value=round_to(actual),
        coverage_count=int(metric.coverage_count),
        met=met,
        comparison=comparison,
        target_value=target,
        delta=round_to(actual - target),
        streak_after_week=next_streak(met, previous_snapshot),
        progress_percent=round_to(compute_progress_percent(actual, target, comparison, met), 1),
        details=metric.details,
    )
