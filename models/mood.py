"""Mood entry model definition.
A single mood log: the emojis the user picked and their valence/energy scores.
"""
from datetime import datetime
from extensions import db

class MoodEntry(db.Model):
    __tablename__ = 'mood_entries'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)  # UTC

    emojis = db.Column(db.JSON, default=list)
    valence = db.Column(db.Float)
    energy = db.Column(db.Float)
    mood_label = db.Column(db.String(30))
    note = db.Column(db.Text)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'emojis': list(self.emojis or []),
            'scores': {'valence': self.valence, 'energy': self.energy},
            'mood_label': self.mood_label,
            'note': self.note,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f'<MoodEntry {self.user_id} - {self.created_at}>'
