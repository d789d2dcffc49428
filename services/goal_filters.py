"""Typed goal filters.

A goal's ``filters`` JSON is interpreted according to the goal's category:
mood goals filter by emoji, habit goals by normalized habit tag, custom goals
take no filter at all. Building the typed form once keeps invalid
category/filter combinations out of the evaluator.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping, Optional, Union

from services.exceptions import GoalValidationError
from services.habit_tags import normalize_habit_tag

CATEGORY_FILTER_KEYS = {
    'mood': {'emojis'},
    'habit': {'categories'},
    'custom': set(),
}


def _string_set(values) -> FrozenSet[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    return frozenset(value for value in values if isinstance(value, str) and value)


@dataclass(frozen=True)
class MoodGoalFilters:
    emojis: FrozenSet[str] = field(default_factory=frozenset)

    def matches(self, entry_emojis: Iterable[str]) -> bool:
        # No filter means nothing is excluded
        if not self.emojis:
            return True
        if not isinstance(entry_emojis, (list, tuple, set, frozenset)):
            return False
        return any(emoji in self.emojis for emoji in entry_emojis)

    def to_dict(self) -> dict:
        return {'emojis': sorted(self.emojis)} if self.emojis else {}


@dataclass(frozen=True)
class HabitGoalFilters:
    categories: FrozenSet[str] = field(default_factory=frozenset)

    def matches(self, entry_tags: Iterable[str]) -> bool:
        if not self.categories:
            return True
        return any(tag in self.categories for tag in entry_tags)

    def to_dict(self) -> dict:
        return {'categories': sorted(self.categories)} if self.categories else {}


@dataclass(frozen=True)
class CustomGoalFilters:

    def to_dict(self) -> dict:
        return {}


GoalFilters = Union[MoodGoalFilters, HabitGoalFilters, CustomGoalFilters]


def build_goal_filters(category: str, raw: Optional[Mapping] = None, strict: bool = True) -> GoalFilters:
    """Build the typed filters for ``category`` from the stored JSON.

    With ``strict`` set, keys that do not belong to the category and unknown
    habit tags raise GoalValidationError; otherwise they are ignored.
    """
    raw = raw or {}
    if not isinstance(raw, Mapping):
        if strict:
            raise GoalValidationError('filters must be an object')
        raw = {}

    if category not in CATEGORY_FILTER_KEYS:
        raise GoalValidationError(f'Unknown goal category: {category}')

    if strict:
        unexpected = {key for key, value in raw.items() if value} - CATEGORY_FILTER_KEYS[category]
        if unexpected:
            raise GoalValidationError(
                f'Filters {sorted(unexpected)} are not valid for {category} goals')

    if category == 'mood':
        return MoodGoalFilters(emojis=_string_set(raw.get('emojis')))

    if category == 'habit':
        requested = _string_set(raw.get('categories'))
        normalized = {normalize_habit_tag(tag) for tag in requested}
        if strict and None in normalized:
            unknown = sorted(tag for tag in requested if normalize_habit_tag(tag) is None)
            raise GoalValidationError(f'Unknown habit categories: {unknown}')
        normalized.discard(None)
        return HabitGoalFilters(categories=frozenset(normalized))

    return CustomGoalFilters()
