"""User-related service functions."""
from flask import current_app

from extensions import db
from models import User
from services.exceptions import SessionRequiredError, ValidationError
from services.timezone_service import validate_timezone


def create_user(email: str, timezone: str = None, **profile_data) -> User:
    """Create a new user."""
    user = User(
        email=email,
        timezone=timezone or current_app.config.get('DEFAULT_TIMEZONE', 'UTC'),
        **{k: v for k, v in profile_data.items() if v is not None}
    )
    db.session.add(user)
    db.session.commit()
    return user


def require_user(user_id) -> User:
    """Load the session user or fail before any work is done."""
    if not user_id:
        raise SessionRequiredError()
    user = db.session.get(User, user_id)
    if user is None:
        raise SessionRequiredError()
    return user


def get_user_timezone(user_id) -> str:
    user = db.session.get(User, user_id) if user_id else None
    if user is None or not user.timezone:
        return current_app.config.get('DEFAULT_TIMEZONE', 'UTC')
    return user.timezone


def update_user_timezone(user_id, timezone: str) -> User:
    if not isinstance(timezone, str) or not validate_timezone(timezone):
        raise ValidationError(f'Invalid timezone: {timezone}')
    user = require_user(user_id)
    user.timezone = timezone
    db.session.commit()
    current_app.logger.info(f'Timezone updated for user {user_id}: {timezone}')
    return user
