"""Goal-related service functions.

These helpers encapsulate operations for creating and managing weekly goals
and for logging activity against custom goals. The active-goal cap is
enforced here, at create/activate time; the evaluator never checks it.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from flask import current_app

from extensions import db
from models import Goal, GoalActivity, GoalSnapshot
from models.goal import COMPARISONS, GOAL_CATEGORIES, METRIC_TYPES, default_measurement_label
from services.exceptions import (ActiveGoalLimitError, GoalNotFoundError, GoalValidationError, SessionRequiredError,
                                 ValidationError)
from services.goal_filters import build_goal_filters
from services.numbers import to_number

DEFAULT_MAX_ACTIVE_GOALS = 3
UPDATABLE_FIELDS = ('title', 'description', 'category', 'metric_type', 'comparison',
                    'target_value', 'filters', 'measurement_label', 'is_active')


def _max_active_goals() -> int:
    return current_app.config.get('MAX_ACTIVE_GOALS', DEFAULT_MAX_ACTIVE_GOALS)


def _validate_definition(category: str, metric_type: str, comparison: str, target_value) -> float:
    if category not in GOAL_CATEGORIES:
        raise GoalValidationError(f'Unknown goal category: {category}')
    if metric_type not in METRIC_TYPES:
        raise GoalValidationError(f'Unknown metric type: {metric_type}')
    if metric_type == 'avg_mood' and category != 'mood':
        raise GoalValidationError('Average mood can only be tracked by mood goals')
    if comparison not in COMPARISONS:
        raise GoalValidationError(f'Unknown comparison: {comparison}')
    if isinstance(target_value, bool):
        raise GoalValidationError('Target value must be a number')
    try:
        return float(target_value)
    except (TypeError, ValueError):
        raise GoalValidationError('Target value must be a number')


def _require_user_id(user_id):
    if not user_id:
        raise SessionRequiredError()


def create_goal(user_id: int,
                title: str,
                category: str = 'custom',
                metric_type: str = 'frequency',
                comparison: str = 'at_least',
                target_value: float = 0,
                filters: Optional[Dict] = None,
                description: str = '',
                measurement_label: str = '',
                is_active: bool = True) -> Goal:
    """Create and persist a weekly goal for the user."""
    _require_user_id(user_id)
    target = _validate_definition(category, metric_type, comparison, target_value)
    typed_filters = build_goal_filters(category, filters)

    if is_active:
        limit = _max_active_goals()
        if len(get_active_goals(user_id)) >= limit:
            raise ActiveGoalLimitError(limit)

    goal = Goal(
        user_id=user_id,
        title=(title or '').strip() or 'Untitled goal',
        description=description or '',
        category=category,
        metric_type=metric_type,
        comparison=comparison,
        target_value=target,
        filters=typed_filters.to_dict(),
        measurement_label=(measurement_label or '').strip() or default_measurement_label(category),
        is_active=bool(is_active),
    )
    db.session.add(goal)
    db.session.commit()

    current_app.logger.info(f'Goal {goal.id} created for user {user_id}: {category}/{metric_type} {comparison} {target}')
    return goal


def get_goal(user_id: int, goal_id: int) -> Goal:
    if not goal_id:
        raise GoalNotFoundError()
    goal = Goal.query.filter_by(id=goal_id, user_id=user_id).first()
    if goal is None:
        raise GoalNotFoundError(goal_id)
    return goal


def get_active_goals(user_id: int) -> List[Goal]:
    """Retrieve all active goals for a given user."""
    return Goal.query.filter_by(user_id=user_id, is_active=True).order_by(Goal.created_at.desc(), Goal.id.desc()).all()


def get_all_goals(user_id: int) -> Iterable[Goal]:
    """Retrieve all goals for a given user, including archived ones."""
    return Goal.query.filter_by(user_id=user_id).order_by(Goal.created_at.desc(), Goal.id.desc()).all()


def update_goal(user_id: int, goal_id: int, **updates) -> Goal:
    """Apply ``updates`` to a goal, enforcing the active-goal cap on activation."""
    _require_user_id(user_id)
    goal = get_goal(user_id, goal_id)
    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f'Fields cannot be updated: {", ".join(sorted(unknown))}')

    if 'is_active' in updates:
        updates['is_active'] = bool(updates['is_active'])

    if updates.get('is_active') and not goal.is_active:
        limit = _max_active_goals()
        other_active = [g for g in get_active_goals(user_id) if g.id != goal.id]
        if len(other_active) >= limit:
            raise ActiveGoalLimitError(limit)

    category = updates.get('category', goal.category)
    metric_type = updates.get('metric_type', goal.metric_type)
    comparison = updates.get('comparison', goal.comparison)
    target = _validate_definition(category, metric_type, comparison, updates.get('target_value', goal.target_value))
    typed_filters = build_goal_filters(category, updates.get('filters', goal.filters))

    if 'title' in updates:
        goal.title = (updates['title'] or '').strip() or goal.title
    if 'description' in updates:
        goal.description = updates['description'] or ''
    goal.category = category
    goal.metric_type = metric_type
    goal.comparison = comparison
    goal.target_value = target
    goal.filters = typed_filters.to_dict()

    if 'measurement_label' in updates:
        goal.measurement_label = (updates['measurement_label'] or '').strip() or default_measurement_label(category)

    if 'is_active' in updates:
        is_active = updates['is_active']
        if goal.is_active and not is_active:
            goal.archived_at = datetime.utcnow()
        elif is_active:
            goal.archived_at = None
        goal.is_active = is_active

    db.session.commit()
    current_app.logger.info(f'Goal {goal.id} updated for user {user_id}: {sorted(updates)}')
    return goal


def archive_goal(user_id: int, goal_id: int) -> Goal:
    """Deactivate a goal; its snapshots are kept."""
    return update_goal(user_id, goal_id, is_active=False)


def log_goal_activity(user_id: int, goal_id: int, value=1, note: str = '',
                      created_at: Optional[datetime] = None) -> GoalActivity:
    """Record one manual activity counted by a custom goal."""
    _require_user_id(user_id)
    goal = get_goal(user_id, goal_id)

    activity = GoalActivity(
        user_id=user_id,
        goal_id=goal.id,
        value=to_number(value, default=1.0),
        note=note or '',
        created_at=created_at or datetime.utcnow(),
    )
    db.session.add(activity)
    db.session.commit()

    current_app.logger.info(f'Activity logged for goal {goal.id}: {activity.value}')
    return activity


def get_previous_snapshot(goal_id: int, week_key: str) -> Optional[GoalSnapshot]:
    """Snapshot of the latest ISO week strictly before ``week_key``.

    ISO keys are zero-padded, so string order is week order.
    """
    return (GoalSnapshot.query
            .filter(GoalSnapshot.goal_id == goal_id, GoalSnapshot.week_key < week_key)
            .order_by(GoalSnapshot.week_key.desc())
            .first())


def get_goal_analytics(user_id: int) -> Dict:
    """Counts of goals by state."""
    all_goals_list = get_all_goals(user_id)
    active_goals_list = [g for g in all_goals_list if g.is_active]

    return {
        "total_goals": len(all_goals_list),
        "active_goals": len(active_goals_list),
        "max_active_goals": _max_active_goals(),
    }
