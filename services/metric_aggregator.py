"""Metric aggregation for weekly goals.

Reduces one week of raw entries to the single number a goal is judged on,
plus how many entries contributed to it. Malformed entries never raise: a
missing or non-numeric score simply counts as 0.
"""
from collections import namedtuple
from typing import Iterable, List, Optional

from services.goal_filters import CATEGORY_FILTER_KEYS, HabitGoalFilters, MoodGoalFilters
from services.habit_tags import habit_tag_label, normalize_habit_tag
from services.numbers import round_to, to_number

MetricResult = namedtuple('MetricResult', ['actual_value', 'coverage_count', 'details'])


def summarize_mood_entries(entries: Iterable = (), filters: Optional[MoodGoalFilters] = None) -> dict:
    """
    Count mood entries and average their valence and energy.

    Args:
        entries: MoodEntry rows (anything with ``emojis``, ``valence``, ``energy``)
        filters: Optional emoji filter; entries sharing no emoji are skipped

    Returns:
        Dict with count, average_valence and average_energy (2 decimals)
    """
    filters = filters or MoodGoalFilters()
    filtered = [entry for entry in entries or [] if filters.matches(getattr(entry, 'emojis', None))]

    if not filtered:
        return {'count': 0, 'average_valence': 0, 'average_energy': 0}

    total_valence = sum(to_number(getattr(entry, 'valence', None)) for entry in filtered)
    total_energy = sum(to_number(getattr(entry, 'energy', None)) for entry in filtered)

    return {
        'count': len(filtered),
        'average_valence': round_to(total_valence / len(filtered)),
        'average_energy': round_to(total_energy / len(filtered)),
    }


def habit_entry_tags(entry) -> List[str]:
    """Canonical tags of a habit entry, preset habits first, without duplicates."""
    tags = []
    for raw in list(getattr(entry, 'preset_habits', None) or []) + list(getattr(entry, 'categories', None) or []):
        tag = normalize_habit_tag(raw)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def summarize_habit_entries(entries: Iterable = (), filters: Optional[HabitGoalFilters] = None) -> dict:
    """
    Count habit entries matching the category filter and build a tag histogram.

    The histogram counts every tag of every matching entry and is sorted by
    count descending; ties keep the order in which tags were first seen.
    """
    filters = filters or HabitGoalFilters()
    tagged = [habit_entry_tags(entry) for entry in entries or []]
    filtered = [tags for tags in tagged if filters.matches(tags)]

    category_counts = {}
    for tags in filtered:
        for tag in tags:
            category_counts[tag] = category_counts.get(tag, 0) + 1

    ordered = sorted(category_counts.items(), key=lambda item: -item[1])
    return {
        'count': len(filtered),
        'category_counts': [
            {'category': tag, 'count': count, 'label': habit_tag_label(tag)}
            for tag, count in ordered
        ],
    }


def summarize_activities(activities: Iterable = ()) -> dict:
    """Sum activity values; an activity without a value counts as 1."""
    activities = list(activities or [])
    total = sum(to_number(getattr(activity, 'value', None), default=1.0) for activity in activities)
    return {'total': round_to(total), 'coverage_count': len(activities)}


def aggregate_goal_metric(goal, mood_entries: Iterable = (), habit_entries: Iterable = (),
                          activities: Iterable = ()) -> MetricResult:
    """Compute a goal's actual value for one week of entries."""
    if goal.category not in CATEGORY_FILTER_KEYS:
        return MetricResult(0, 0, {})
    filters = goal.typed_filters

    if goal.category == 'mood':
        summary = summarize_mood_entries(mood_entries, filters)
        if goal.metric_type == 'avg_mood':
            return MetricResult(summary['average_valence'], summary['count'], summary)
        return MetricResult(summary['count'], summary['count'], summary)

    if goal.category == 'habit':
        summary = summarize_habit_entries(habit_entries, filters)
        return MetricResult(summary['count'], summary['count'], summary)

    summary = summarize_activities(activities)
    return MetricResult(summary['total'], summary['coverage_count'], summary)
