"""Timezone handling service.

Raw entries are stored with naive UTC timestamps; every week and day boundary
is reasoned about in the user's own timezone. These helpers are the only
place where the two meet.
"""
from datetime import datetime, date, time
from typing import Optional, Tuple
import pytz
from pytz import timezone as pytz_timezone


def get_timezone_object(timezone_str: Optional[str]) -> pytz.BaseTzInfo:
    """Get timezone object from timezone string."""
    if not timezone_str:
        return pytz.UTC
    try:
        return pytz_timezone(timezone_str)
    except pytz.exceptions.UnknownTimeZoneError:
        # Fallback to UTC if timezone is invalid
        return pytz.UTC


def local_to_utc_naive(user_timezone: str, local_datetime: datetime) -> datetime:
    """
    Convert a naive local datetime in the user's timezone to a naive UTC datetime.

    Naive UTC is the storage format for every timestamp column.
    """
    user_tz = get_timezone_object(user_timezone)
    localized = user_tz.localize(local_datetime)
    return localized.astimezone(pytz.UTC).replace(tzinfo=None)


def convert_utc_to_user_time(user_timezone: str, utc_datetime: datetime) -> Tuple[datetime, date, time]:
    """
    Convert UTC datetime to user's local time.

    Args:
        user_timezone: User's timezone string
        utc_datetime: UTC datetime (naive values are taken as UTC)

    Returns:
        Tuple of (local_datetime, local_date, local_time)
    """
    # Ensure UTC datetime is timezone-aware
    if utc_datetime.tzinfo is None:
        utc_datetime = pytz.UTC.localize(utc_datetime)
    elif utc_datetime.tzinfo != pytz.UTC:
        utc_datetime = utc_datetime.astimezone(pytz.UTC)

    user_tz = get_timezone_object(user_timezone)
    local_datetime = utc_datetime.astimezone(user_tz)

    return local_datetime, local_datetime.date(), local_datetime.time()


def get_current_user_time(user_timezone: str) -> Tuple[datetime, date, time]:
    """
    Get current time in user's timezone.

    Returns:
        Tuple of (local_datetime, local_date, local_time)
    """
    utc_now = datetime.now(pytz.UTC)
    return convert_utc_to_user_time(user_timezone, utc_now)


def validate_timezone(timezone_str: str) -> bool:
    """
    Validate if timezone string is valid.

    Returns:
        True if valid, False otherwise
    """
    try:
        pytz_timezone(timezone_str)
        return True
    except pytz.exceptions.UnknownTimeZoneError:
        return False
