"""Habit entry model definition.
Preset habits chosen by the user plus the legacy categories assigned by the
journaling agent. Tags are stored raw and normalized when aggregated.
"""
from datetime import datetime
from extensions import db

class HabitEntry(db.Model):
    __tablename__ = 'habit_entries'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)  # UTC

    preset_habits = db.Column(db.JSON, default=list)
    categories = db.Column(db.JSON, default=list)
    summary = db.Column(db.Text)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'preset_habits': list(self.preset_habits or []),
            'categories': list(self.categories or []),
            'summary': self.summary,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f'<HabitEntry {self.user_id} - {self.created_at}>'
