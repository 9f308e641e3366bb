"""
Timezone and datetime utilities.

Readings are stored in UTC and entered/displayed in local wall-clock time.
Local values use the ``datetime-local`` form shape (``YYYY-MM-DDTHH:MM``).
"""

from collections.abc import Callable
from datetime import datetime, timezone

import pytz
from dateutil import parser

Clock = Callable[[], datetime]

LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def make_timezone_aware(
    dt: datetime, timezone_str: str = "Europe/Berlin", assume_local: bool = False
) -> datetime:
    """
    Make a datetime object timezone-aware.

    Args:
        dt: Datetime object (may be naive or aware).
        timezone_str: Timezone string (e.g., "Europe/Berlin").
        assume_local: If True and dt is naive, assume it's in timezone_str.

    Returns:
        Timezone-aware datetime object.
    """
    tz = pytz.timezone(timezone_str)

    if dt.tzinfo is None:
        if assume_local:
            return tz.localize(dt)
        else:
            return pytz.utc.localize(dt).astimezone(tz)
    else:
        return dt.astimezone(tz)


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision, which the ISO form does not carry."""
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def local_to_utc(value: str | datetime, timezone_str: str) -> datetime:
    """
    Convert a local wall-clock value to an aware UTC datetime.

    Args:
        value: Local date/time string or datetime. Values that already carry
            an offset are converted as-is.
        timezone_str: Timezone the wall-clock value belongs to.

    Returns:
        Aware datetime in UTC.

    Raises:
        ValueError: If the string cannot be parsed as a date.
    """
    dt = value if isinstance(value, datetime) else parser.parse(value)

    if dt.tzinfo is None:
        dt = make_timezone_aware(dt, timezone_str, assume_local=True)

    return dt.astimezone(timezone.utc)


def utc_to_local(dt: datetime, timezone_str: str) -> datetime:
    """Convert an aware (or naive UTC) datetime to the given timezone."""
    return make_timezone_aware(dt, timezone_str, assume_local=False)


def format_local_input(dt: datetime, timezone_str: str) -> str:
    """Format a stored timestamp for a local date/time input field."""
    return utc_to_local(dt, timezone_str).strftime(LOCAL_INPUT_FORMAT)


def current_local_input(timezone_str: str, clock: Clock = utc_now) -> str:
    """Current instant as a local input value, minute precision."""
    return format_local_input(clock(), timezone_str)


def parse_iso_utc(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken to be UTC already.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = parser.isoparse(value.strip())
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_iso_utc(dt: datetime) -> str:
    """Format a timestamp as ISO-8601 UTC with milliseconds and ``Z`` suffix."""
    utc_dt = parse_iso_utc(dt)
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_dt.microsecond // 1000:03d}Z"
