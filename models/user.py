"""User model definition.
Owner of every raw entry and derived record in the progress engine.
"""
from datetime import datetime

from extensions import db

class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(80))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Preferences
    timezone = db.Column(db.String(50), default='UTC')

    # Relationships
    goals = db.relationship('Goal', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    daily_goals = db.relationship('DailyGoal', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    mood_entries = db.relationship('MoodEntry', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    habit_entries = db.relationship('HabitEntry', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def timezone_name(self) -> str:
        return self.timezone or 'UTC'

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'display_name': self.display_name,
            'timezone': self.timezone,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.email}>'
