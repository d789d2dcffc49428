"""Goal model definition.
Weekly custom goals evaluated once per ISO week, and the manual activity
logs that feed custom goals.
"""
from datetime import datetime
from extensions import db

GOAL_CATEGORIES = ('mood', 'habit', 'custom')
METRIC_TYPES = ('avg_mood', 'frequency')
COMPARISONS = ('at_least', 'at_most')

DEFAULT_MEASUREMENT_LABELS = {
    'mood': 'points',
    'habit': 'entries',
    'custom': 'actions',
}


def default_measurement_label(category: str) -> str:
    return DEFAULT_MEASUREMENT_LABELS.get(category, DEFAULT_MEASUREMENT_LABELS['custom'])


class Goal(db.Model):
    __tablename__ = 'goals'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    archived_at = db.Column(db.DateTime)

    # Goal settings
    title = db.Column(db.String(120), nullable=False, default='Untitled goal')
    description = db.Column(db.Text, default='')
    category = db.Column(db.String(20), nullable=False, default='custom')
    metric_type = db.Column(db.String(20), nullable=False, default='frequency')
    comparison = db.Column(db.String(20), nullable=False, default='at_least')
    target_value = db.Column(db.Float, nullable=False, default=0.0)
    filters = db.Column(db.JSON, default=dict)
    measurement_label = db.Column(db.String(40))
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    activities = db.relationship('GoalActivity', backref='goal', lazy='dynamic', cascade='all, delete-orphan')
    snapshots = db.relationship('GoalSnapshot', backref='goal', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def typed_filters(self):
        """Filters interpreted for this goal's category, ignoring stray keys."""
        from services.goal_filters import build_goal_filters
        return build_goal_filters(self.category, self.filters, strict=False)

    @property
    def display_measurement_label(self) -> str:
        label = (self.measurement_label or '').strip()
        return label or default_measurement_label(self.category)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'metric_type': self.metric_type,
            'comparison': self.comparison,
            'target_value': self.target_value,
            'filters': dict(self.filters or {}),
            'measurement_label': self.display_measurement_label,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'archived_at': self.archived_at.isoformat() if self.archived_at else None,
        }

    def __repr__(self) -> str:
        return f'<Goal {self.user_id} - {self.category}/{self.metric_type}: {self.target_value}>'


class GoalActivity(db.Model):
    __tablename__ = 'goal_activities'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    goal_id = db.Column(db.Integer, db.ForeignKey('goals.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)  # UTC

    value = db.Column(db.Float, default=1.0)
    note = db.Column(db.Text, default='')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'goal_id': self.goal_id,
            'value': self.value,
            'note': self.note,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f'<GoalActivity {self.goal_id}: {self.value}>'
