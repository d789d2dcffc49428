"""Per-user daily activity check-in.
One row per local day recording whether a mood and habits were logged.
Flags only ever move from false to true.
"""
from datetime import datetime
from extensions import db

class DailyCheckin(db.Model):
    __tablename__ = 'daily_checkins'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'date_key', name='uq_daily_checkin_day'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    date_key = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    mood_logged = db.Column(db.Boolean, default=False, nullable=False)
    habits_logged = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'date': self.date_key,
            'mood_logged': bool(self.mood_logged),
            'habits_logged': bool(self.habits_logged),
        }

    def __repr__(self) -> str:
        return f'<DailyCheckin {self.user_id} {self.date_key}>'
