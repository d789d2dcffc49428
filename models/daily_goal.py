"""Daily goal models.

A DailyGoal is a yes/no habit checked once per day. Its streak fields are
derived from the DailyGoalCheckin rows and rewritten wholesale on every
recompute.
"""
from datetime import datetime
from extensions import db

class DailyGoal(db.Model):
    __tablename__ = 'daily_goals'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    title = db.Column(db.String(120), nullable=False, default='Daily goal')
    category = db.Column(db.String(30), nullable=False, default='custom')
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Derived streak state
    week_start = db.Column(db.Date)  # Monday of the most recently evaluated week
    current_streak_weeks = db.Column(db.Integer, default=0, nullable=False)
    best_streak_weeks = db.Column(db.Integer, default=0, nullable=False)
    last_completed_date = db.Column(db.Date)

    checkins = db.relationship('DailyGoalCheckin', backref='goal', lazy='dynamic', cascade='all, delete-orphan')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'category': self.category,
            'is_active': self.is_active,
            'week_start': self.week_start.isoformat() if self.week_start else None,
            'current_streak_weeks': self.current_streak_weeks or 0,
            'best_streak_weeks': self.best_streak_weeks or 0,
            'last_completed_date': self.last_completed_date.isoformat() if self.last_completed_date else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f'<DailyGoal {self.id} {self.title!r} streak={self.current_streak_weeks}>'


class DailyGoalCheckin(db.Model):
    __tablename__ = 'daily_goal_checkins'
    __table_args__ = (
        db.UniqueConstraint('goal_id', 'date_key', name='uq_daily_goal_checkin_day'),
    )

    id = db.Column(db.Integer, primary_key=True)
    goal_id = db.Column(db.Integer, db.ForeignKey('daily_goals.id'), nullable=False, index=True)
    date_key = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD, user's local day
    check_date = db.Column(db.Date, nullable=False, index=True)
    done = db.Column(db.Boolean, default=False, nullable=False)  # write-once true
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'goal_id': self.goal_id,
            'date_key': self.date_key,
            'date': self.check_date.isoformat() if self.check_date else None,
            'done': bool(self.done),
        }

    def __repr__(self) -> str:
        return f'<DailyGoalCheckin {self.goal_id} {self.date_key} done={self.done}>'
