"""Date and time utilities for the booking calendar engine."""

from datetime import date, datetime, timedelta
from typing import Union

import pytz


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is in UTC.

    Args:
        dt: Datetime to convert

    Returns:
        UTC datetime
    """
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def parse_timestamp(value: Union[str, date, datetime]) -> datetime:
    """
    Parse a store timestamp into a UTC datetime.

    Accepts full ISO-8601 strings (with or without offset, including a
    trailing "Z"), date-only strings and date/datetime objects. Naive values
    are taken as UTC.

    Args:
        value: Timestamp value as returned by the record store

    Returns:
        UTC datetime
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return pytz.utc.localize(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        return ensure_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    raise ValueError(f"Unsupported timestamp value: {value!r}")


def _timezone(tz_name: str):
    return pytz.timezone(tz_name)


def start_of_day(dt: datetime, tz_name: str = "UTC") -> datetime:
    """Return local midnight of the day containing dt, expressed in UTC."""
    tz = _timezone(tz_name)
    local = ensure_utc(dt).astimezone(tz)
    midnight = tz.localize(datetime(local.year, local.month, local.day))
    return midnight.astimezone(pytz.utc)


def end_of_day(dt: datetime, tz_name: str = "UTC") -> datetime:
    """Return the last microsecond of the day containing dt, expressed in UTC."""
    tz = _timezone(tz_name)
    local = ensure_utc(dt).astimezone(tz)
    last = tz.localize(datetime(local.year, local.month, local.day, 23, 59, 59, 999999))
    return last.astimezone(pytz.utc)


def get_stats_window(
    now: datetime,
    lookahead_days: int = 30,
    tz_name: str = "UTC",
) -> tuple[datetime, datetime]:
    """
    Get the default statistics window (start, end) in UTC.

    Args:
        now: Current time
        lookahead_days: Days to look ahead from today
        tz_name: Business timezone used for day boundaries

    Returns:
        Tuple of (start_of_day(now), end_of_day(now + lookahead_days))
    """
    return (
        start_of_day(now, tz_name),
        end_of_day(now + timedelta(days=lookahead_days), tz_name),
    )


def to_date_string(dt: datetime) -> str:
    """Format a datetime as a YYYY-MM-DD string in UTC."""
    return ensure_utc(dt).strftime("%Y-%m-%d")
