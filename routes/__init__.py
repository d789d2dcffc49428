# Blueprint registration module

from .goals import goals_bp
from .daily_goals import daily_goals_bp
from .api import api_bp

__all__ = [
    'goals_bp',
    'daily_goals_bp',
    'api_bp',
]
