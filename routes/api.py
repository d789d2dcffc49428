from flask import Blueprint, jsonify, request

from routes.auth import current_user_id, get_current_user, login_required
from services.daily_checkin_service import fetch_daily_checkins, get_user_streak
from services.log_service import add_habit_entry, add_mood_entry
from services.user_service import update_user_timezone

api_bp = Blueprint('api', __name__)


@api_bp.route('/moods', methods=['POST'])
@login_required
def log_mood():
    data = request.get_json(silent=True) or {}
    emojis = data.get('emojis') or []
    if not isinstance(emojis, list):
        return jsonify({'success': False, 'message': 'emojis must be a list'}), 400

    entry = add_mood_entry(
        current_user_id(),
        emojis,
        valence=data.get('valence'),
        energy=data.get('energy'),
        note=data.get('note', ''),
    )
    return jsonify({'success': True, 'entry': entry.to_dict()}), 201


@api_bp.route('/habits', methods=['POST'])
@login_required
def log_habits():
    data = request.get_json(silent=True) or {}
    entry = add_habit_entry(
        current_user_id(),
        preset_habits=data.get('preset_habits') or [],
        categories=data.get('categories') or [],
        summary=data.get('summary', ''),
    )
    return jsonify({'success': True, 'entry': entry.to_dict()}), 201


@api_bp.route('/streak', methods=['GET'])
@login_required
def activity_streak():
    """Consecutive days with both a mood and habits logged"""
    user_id = current_user_id()
    checkins = fetch_daily_checkins(user_id, 7)
    return jsonify({
        'success': True,
        'streak': get_user_streak(user_id),
        'recent_checkins': [checkin.to_dict() for checkin in checkins],
    })


@api_bp.route('/update-timezone', methods=['POST'])
@login_required
def update_timezone():
    data = request.get_json(silent=True)
    if not data or 'timezone' not in data:
        return jsonify({'success': False, 'message': 'Timezone not provided'}), 400

    user = update_user_timezone(get_current_user().id, data['timezone'])
    return jsonify({'success': True, 'timezone': user.timezone})
