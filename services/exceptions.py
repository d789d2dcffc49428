"""Typed errors raised by the progress engine.

Precondition errors are raised before anything is written, so a caller can
always retry with the same arguments.
"""


class WellbeingError(Exception):
    """Base class for errors reported back to the caller."""


class SessionRequiredError(WellbeingError):
    def __init__(self, message='Session not available'):
        super().__init__(message)


class GoalNotFoundError(WellbeingError):
    def __init__(self, goal_id=None):
        self.goal_id = goal_id
        super().__init__(f'Goal {goal_id} not found' if goal_id else 'goal_id is required')


class ValidationError(WellbeingError, ValueError):
    pass


class GoalValidationError(ValidationError):
    pass


class ActiveGoalLimitError(WellbeingError):
    def __init__(self, limit):
        self.limit = limit
        super().__init__(f'You can only have up to {limit} active goals.')


class NoActiveGoalsError(WellbeingError):
    def __init__(self, message='You need at least one active goal to generate a report.'):
        super().__init__(message)
