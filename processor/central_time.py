"""Conversion of US Central civil date/time values to UTC instants.

Only the current US rule is implemented: daylight time runs from 02:00 on the
second Sunday of March until 02:00 on the first Sunday of November. Years
with different historical rules are converted with the same rule.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

STANDARD_OFFSET_HOURS = -6
DAYLIGHT_OFFSET_HOURS = -5

DST_START_MONTH = 3
DST_START_SUNDAY = 2
DST_END_MONTH = 11
DST_END_SUNDAY = 1
DST_TRANSITION_HOUR = 2

SUNDAY = 6  # date.weekday()


def nth_sunday(year: int, month: int, n: int) -> date:
    """
    Return the nth Sunday of a month.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        n: 1-based Sunday ordinal

    Returns:
        Date of the requested Sunday
    """
    first = date(year, month, 1)
    days_until_sunday = (SUNDAY - first.weekday()) % 7
    first_sunday = first + timedelta(days=days_until_sunday)
    return first_sunday + timedelta(weeks=n - 1)


def dst_window(year: int) -> Tuple[datetime, datetime]:
    """Return the half-open daylight window for a year as civil datetimes."""
    start = datetime.combine(
        nth_sunday(year, DST_START_MONTH, DST_START_SUNDAY),
        datetime.min.time()
    ).replace(hour=DST_TRANSITION_HOUR)
    end = datetime.combine(
        nth_sunday(year, DST_END_MONTH, DST_END_SUNDAY),
        datetime.min.time()
    ).replace(hour=DST_TRANSITION_HOUR)
    return start, end


def utc_offset_hours(civil: datetime) -> int:
    """
    Offset from UTC in effect at a Central civil datetime.

    The civil value is compared directly against the civil transition
    instants, so the skipped and repeated hours are not disambiguated.
    """
    start, end = dst_window(civil.year)
    if start <= civil < end:
        return DAYLIGHT_OFFSET_HOURS
    return STANDARD_OFFSET_HOURS


def _to_ints(parts: List[str]) -> Optional[Tuple[int, ...]]:
    try:
        return tuple(int(part) for part in parts)
    except ValueError:
        return None


def parse_civil_date(value: str) -> Optional[Tuple[int, ...]]:
    """Parse ``YYYY-MM-DD`` into integer parts, or None if malformed."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split('-')
    if len(parts) != 3:
        return None
    return _to_ints(parts)


def parse_civil_time(value: str) -> Optional[Tuple[int, ...]]:
    """Parse ``HH:MM:SS`` (or ``HH:MM``) into integer parts, or None."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(':')
    if len(parts) not in (2, 3):
        return None
    if len(parts) == 2:
        parts.append('0')
    return _to_ints(parts)


def parse_civil_datetime(date_str: str, time_str: str) -> Optional[datetime]:
    """
    Combine a civil date and time string into a naive datetime.

    Returns:
        Naive datetime, or None if either part is malformed or out of range
    """
    date_parts = parse_civil_date(date_str)
    time_parts = parse_civil_time(time_str)
    if date_parts is None or time_parts is None:
        return None

    try:
        return datetime(*date_parts, *time_parts)
    except (ValueError, OverflowError):
        return None


def central_to_utc(date_str: str, time_str: str) -> Optional[datetime]:
    """
    Convert a Central civil date and time to a naive UTC datetime.

    Args:
        date_str: Civil date (YYYY-MM-DD)
        time_str: Civil time (HH:MM:SS)

    Returns:
        Naive datetime in UTC, or None if the inputs cannot be parsed
    """
    civil = parse_civil_datetime(date_str, time_str)
    if civil is None:
        logger.debug(f"Unparsable civil date/time: {date_str!r} {time_str!r}")
        return None

    offset = utc_offset_hours(civil)
    # timedelta carries overflowed hours into the next day/month/year
    try:
        return civil - timedelta(hours=offset)
    except OverflowError:
        return None


def format_utc_iso(instant: datetime) -> str:
    """Render a naive UTC datetime as ISO-8601 with milliseconds and 'Z'."""
    return instant.isoformat(timespec='milliseconds') + 'Z'
