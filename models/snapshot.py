"""Derived weekly records.

GoalSnapshot and WeeklyReport rows are written only by the weekly report
generator. Their primary keys are derived from the goal/user and the ISO
week key, so regenerating a week overwrites the same rows.
"""
from datetime import datetime
from extensions import db


def snapshot_key(goal_id, week_key: str) -> str:
    return f'{goal_id}_{week_key}'


def report_key(user_id, week_key: str) -> str:
    return f'{user_id}_{week_key}'


class GoalSnapshot(db.Model):
    __tablename__ = 'goal_snapshots'
    __table_args__ = (
        db.UniqueConstraint('goal_id', 'week_key', name='uq_goal_snapshot_week'),
    )

    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    goal_id = db.Column(db.Integer, db.ForeignKey('goals.id'), nullable=False, index=True)

    # Denormalized goal fields at evaluation time
    goal_title = db.Column(db.String(120))
    goal_category = db.Column(db.String(20))
    metric_type = db.Column(db.String(20))
    measurement_label = db.Column(db.String(40))

    # Evaluation
    comparison = db.Column(db.String(20), nullable=False)
    target_value = db.Column(db.Float, nullable=False)
    actual_value = db.Column(db.Float, nullable=False)
    delta = db.Column(db.Float, nullable=False)
    coverage_count = db.Column(db.Integer, nullable=False, default=0)
    met = db.Column(db.Boolean, nullable=False)
    streak_after_week = db.Column(db.Integer, nullable=False, default=0)
    progress_percent = db.Column(db.Float, nullable=False)
    details = db.Column(db.JSON, default=dict)

    # Week
    week_key = db.Column(db.String(10), nullable=False, index=True)
    week_start = db.Column(db.DateTime, nullable=False, index=True)  # UTC
    week_end = db.Column(db.DateTime, nullable=False)  # UTC
    generated_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'goal_id': self.goal_id,
            'goal_title': self.goal_title,
            'goal_category': self.goal_category,
            'metric_type': self.metric_type,
            'measurement_label': self.measurement_label,
            'comparison': self.comparison,
            'target_value': self.target_value,
            'actual_value': self.actual_value,
            'delta': self.delta,
            'coverage_count': self.coverage_count,
            'met': self.met,
            'streak_after_week': self.streak_after_week,
            'progress_percent': self.progress_percent,
            'details': self.details or {},
            'week_key': self.week_key,
            'week_start': self.week_start.isoformat() if self.week_start else None,
            'week_end': self.week_end.isoformat() if self.week_end else None,
            'generated_at': self.generated_at.isoformat() if self.generated_at else None,
        }

    def __repr__(self) -> str:
        return f'<GoalSnapshot {self.id} met={self.met} streak={self.streak_after_week}>'


class WeeklyReport(db.Model):
    __tablename__ = 'weekly_reports'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'week_key', name='uq_weekly_report_week'),
    )

    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    week_key = db.Column(db.String(10), nullable=False)
    week_start = db.Column(db.DateTime, nullable=False, index=True)  # UTC
    week_end = db.Column(db.DateTime, nullable=False)  # UTC
    generated_at = db.Column(db.DateTime, default=datetime.utcnow)

    goals = db.Column(db.JSON, default=list)
    mood_overview = db.Column(db.JSON, default=dict)
    habit_overview = db.Column(db.JSON, default=dict)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'week_key': self.week_key,
            'week_start': self.week_start.isoformat() if self.week_start else None,
            'week_end': self.week_end.isoformat() if self.week_end else None,
            'generated_at': self.generated_at.isoformat() if self.generated_at else None,
            'goals': list(self.goals or []),
            'mood_overview': self.mood_overview or {},
            'habit_overview': self.habit_overview or {},
        }

    def __repr__(self) -> str:
        return f'<WeeklyReport {self.id}>'
