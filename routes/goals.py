from flask import Blueprint, current_app, jsonify, request

from routes.auth import current_user_id, login_required
from services import goal_service
from services.goal_service import UPDATABLE_FIELDS
from services.time_window import parse_date_key
from services.weekly_report_service import get_goal_snapshots, get_weekly_reports

goals_bp = Blueprint('goals', __name__)


def _json_body():
    return request.get_json(silent=True) or {}


@goals_bp.route('/', methods=['GET'])
@login_required
def list_goals():
    """Goals of the session user, with active ones flagged"""
    user_id = current_user_id()
    include_archived = request.args.get('include_archived', 'false').lower() == 'true'

    goals = goal_service.get_all_goals(user_id) if include_archived else goal_service.get_active_goals(user_id)

    return jsonify({
        'success': True,
        'goals': [goal.to_dict() for goal in goals],
        'analytics': goal_service.get_goal_analytics(user_id),
    })


@goals_bp.route('/', methods=['POST'])
@login_required
def create_goal():
    """Create a weekly goal"""
    data = _json_body()
    payload = {key: data[key] for key in UPDATABLE_FIELDS if key in data}

    goal = goal_service.create_goal(current_user_id(), **payload)
    return jsonify({'success': True, 'goal': goal.to_dict()}), 201


@goals_bp.route('/<int:goal_id>', methods=['PATCH'])
@login_required
def edit_goal(goal_id):
    data = _json_body()
    updates = {key: data[key] for key in UPDATABLE_FIELDS if key in data}

    goal = goal_service.update_goal(current_user_id(), goal_id, **updates)
    return jsonify({'success': True, 'goal': goal.to_dict()})


@goals_bp.route('/<int:goal_id>/archive', methods=['POST'])
@login_required
def archive_goal(goal_id):
    goal = goal_service.archive_goal(current_user_id(), goal_id)
    return jsonify({'success': True, 'goal': goal.to_dict()})


@goals_bp.route('/<int:goal_id>/activities', methods=['POST'])
@login_required
def log_activity(goal_id):
    """Log one manual activity against a custom goal"""
    data = _json_body()
    activity = goal_service.log_goal_activity(
        current_user_id(),
        goal_id,
        value=data.get('value', 1),
        note=data.get('note', ''),
    )
    return jsonify({'success': True, 'activity': activity.to_dict()}), 201


@goals_bp.route('/reports', methods=['POST'])
@login_required
def generate_report():
    """Generate the weekly report for the week containing ``reference_date``"""
    data = _json_body()
    reference_date = parse_date_key(data.get('reference_date'))
    force = data.get('force') is True

    report_service = current_app.extensions['weekly_reports']
    result = report_service.generate_weekly_report(current_user_id(), reference_date=reference_date, force=force)

    status = 200 if result.get('skipped') else 201
    return jsonify({'success': True, **result}), status


@goals_bp.route('/reports', methods=['GET'])
@login_required
def list_reports():
    limit = request.args.get('limit', 12, type=int)
    reports = get_weekly_reports(current_user_id(), limit=limit)
    return jsonify({'success': True, 'reports': [report.to_dict() for report in reports]})


@goals_bp.route('/snapshots', methods=['GET'])
@login_required
def list_snapshots():
    goal_id = request.args.get('goal_id', type=int)
    limit = request.args.get('limit', 40, type=int)
    snapshots = get_goal_snapshots(current_user_id(), goal_id=goal_id, limit=limit)
    return jsonify({'success': True, 'snapshots': [snapshot.to_dict() for snapshot in snapshots]})
