from flask import Blueprint, jsonify, request

from routes.auth import current_user_id, login_required
from services import daily_goal_service
from services.time_window import get_daily_week_start, parse_date_key
from services.user_service import get_user_timezone

daily_goals_bp = Blueprint('daily_goals', __name__)


def _json_body():
    return request.get_json(silent=True) or {}


@daily_goals_bp.route('/', methods=['GET'])
@login_required
def list_daily_goals():
    include_inactive = request.args.get('include_inactive', 'false').lower() == 'true'
    goals = daily_goal_service.get_daily_goals(current_user_id(), include_inactive=include_inactive)
    return jsonify({'success': True, 'goals': [goal.to_dict() for goal in goals]})


@daily_goals_bp.route('/', methods=['POST'])
@login_required
def create_daily_goal():
    data = _json_body()
    goal = daily_goal_service.create_daily_goal(
        current_user_id(),
        title=data.get('title'),
        category=data.get('category', 'custom'),
        is_active=data.get('is_active', True),
    )
    return jsonify({'success': True, 'goal': goal.to_dict()}), 201


@daily_goals_bp.route('/<int:goal_id>', methods=['PATCH'])
@login_required
def update_daily_goal(goal_id):
    data = _json_body()
    updates = {key: data[key] for key in daily_goal_service.UPDATABLE_FIELDS if key in data}
    goal = daily_goal_service.update_daily_goal(current_user_id(), goal_id, **updates)
    return jsonify({'success': True, 'goal': goal.to_dict()})


@daily_goals_bp.route('/<int:goal_id>/deactivate', methods=['POST'])
@login_required
def deactivate_daily_goal(goal_id):
    goal = daily_goal_service.deactivate_daily_goal(current_user_id(), goal_id)
    return jsonify({'success': True, 'goal': goal.to_dict()})


@daily_goals_bp.route('/<int:goal_id>', methods=['DELETE'])
@login_required
def delete_daily_goal(goal_id):
    daily_goal_service.delete_daily_goal(current_user_id(), goal_id)
    return jsonify({'success': True})


@daily_goals_bp.route('/<int:goal_id>/toggle', methods=['POST'])
@login_required
def toggle_today(goal_id):
    """Mark the goal done for today; a second call the same day changes nothing"""
    user_id = current_user_id()
    result = daily_goal_service.toggle_goal_today(user_id, goal_id)
    goal = daily_goal_service.get_daily_goal(user_id, goal_id)
    return jsonify({'success': True, **result, 'goal': goal.to_dict()})


@daily_goals_bp.route('/<int:goal_id>/completion', methods=['GET'])
@login_required
def weekly_completion(goal_id):
    """Completion of one week (defaults to the current one)"""
    user_id = current_user_id()
    week_start = get_daily_week_start(parse_date_key(request.args.get('week_start')), get_user_timezone(user_id))

    checkins = daily_goal_service.get_goal_checkins(user_id, goal_id)
    completion = daily_goal_service.get_weekly_completion(checkins, week_start)

    return jsonify({'success': True, 'week_start': week_start.isoformat(), **completion})
