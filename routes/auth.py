from functools import wraps

from flask import jsonify, session

from extensions import db
from models import User


def login_required(f):
    """Decorator to require a session user for JSON routes"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'success': False, 'message': 'Session not available'}), 401
        return f(*args, **kwargs)
    return decorated_function


def get_current_user():
    """Get current logged in user"""
    if 'user_id' in session:
        return db.session.get(User, session['user_id'])
    return None


def current_user_id():
    user = get_current_user()
    return user.id if user else None
