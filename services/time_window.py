"""Week boundary calculations.

Weeks run Monday 00:00:00.000 to Sunday 23:59:59.999 in the user's local
time. Weekly goals identify a week by its ISO key (``2025-W03``); daily goals
identify it by the date of its Monday (``2025-01-13``). The two schemes are
separate identifier spaces and are never compared with each other.
"""
from collections import namedtuple
from datetime import date, datetime, time, timedelta
from typing import NewType, Optional, Union

from services.exceptions import ValidationError
from services.timezone_service import convert_utc_to_user_time, get_current_user_time, local_to_utc_naive

IsoWeekKey = NewType('IsoWeekKey', str)
DailyWeekKey = NewType('DailyWeekKey', str)

DAYS_PER_WEEK = 7
WEEK_SPAN = timedelta(days=DAYS_PER_WEEK) - timedelta(milliseconds=1)

WeekWindow = namedtuple('WeekWindow', ['week_start', 'week_end', 'week_key', 'start_utc', 'end_utc'])
WeekWindow.__doc__ = """Boundaries of one local week.

``week_start``/``week_end`` are naive local datetimes, ``start_utc``/``end_utc``
the naive UTC instants used to query stored timestamps.
"""

Reference = Optional[Union[date, datetime]]


def resolve_local_date(reference: Reference = None, user_timezone: str = 'UTC') -> date:
    """Return the user's local calendar date for a reference value.

    ``None`` means now. Aware datetimes are converted to the user's timezone,
    naive datetimes are taken as already local.
    """
    if reference is None:
        _, local_date, _ = get_current_user_time(user_timezone)
        return local_date
    if isinstance(reference, datetime):
        if reference.tzinfo is not None:
            _, local_date, _ = convert_utc_to_user_time(user_timezone, reference)
            return local_date
        return reference.date()
    return reference


def start_of_week(value: date) -> date:
    """Monday of the week containing ``value``."""
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.weekday())


def format_date_key(value: Union[date, datetime]) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime('%Y-%m-%d')


def format_iso_week_key(week_start: date) -> IsoWeekKey:
    iso_year, iso_week, _ = week_start.isocalendar()
    return IsoWeekKey(f'{iso_year}-W{iso_week:02d}')


def format_daily_week_key(week_start: date) -> DailyWeekKey:
    return DailyWeekKey(format_date_key(start_of_week(week_start)))


def get_week_window(reference: Reference = None, user_timezone: str = 'UTC') -> WeekWindow:
    """Compute the local week containing ``reference`` and its ISO week key."""
    monday = start_of_week(resolve_local_date(reference, user_timezone))
    week_start = datetime.combine(monday, time.min)
    week_end = week_start + WEEK_SPAN

    return WeekWindow(
        week_start=week_start,
        week_end=week_end,
        week_key=format_iso_week_key(monday),
        start_utc=local_to_utc_naive(user_timezone, week_start),
        end_utc=local_to_utc_naive(user_timezone, week_end),
    )


def get_daily_week_start(reference: Reference = None, user_timezone: str = 'UTC') -> date:
    """Monday (as a date) used by the daily-goal engine."""
    return start_of_week(resolve_local_date(reference, user_timezone))


def iter_week_days(week_start: date):
    """Yield the seven dates of the week starting at ``week_start``."""
    for offset in range(DAYS_PER_WEEK):
        yield week_start + timedelta(days=offset)


def parse_date_key(value: Optional[str]) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string; empty values give ``None``."""
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid date: {value!r}, expected YYYY-MM-DD')
