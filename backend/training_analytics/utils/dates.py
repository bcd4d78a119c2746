"""
Date helpers for Zoezi timestamps and query parameters.

Zoezi sends local wall-clock times as "YYYY-MM-DD HH:MM:SS". Dates are
also accepted in compact "YYYYMMDD" form and as ISO 8601 strings. Parsed
values keep the wall-clock time as sent; no timezone conversion happens.
"""
import re
from datetime import date, datetime
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"

_COMPACT_DATE = re.compile(r"^\d{8}$")
_DATE_STRING = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[str, date, datetime]


def parse_datetime(value: object) -> Optional[datetime]:
    """
    Parse a Zoezi timestamp.

    Returns None for anything that is not a valid date, never raises.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if _COMPACT_DATE.match(text):
        text = f"{text[0:4]}-{text[4:6]}-{text[6:8]}"

    if "T" in text:
        return _parse_iso(text)

    parts = text.split(" ")
    try:
        year, month, day = (int(p) for p in parts[0].split("-"))
        hour = minute = second = 0
        if len(parts) > 1 and parts[1]:
            time_parts = parts[1].split(":")
            hour = int(time_parts[0])
            if len(time_parts) > 1:
                minute = int(time_parts[1])
            if len(time_parts) > 2:
                second = int(float(time_parts[2]))
        return datetime(year, month, day, hour, minute, second)
    except (ValueError, TypeError, OverflowError):
        return _parse_iso(text)


def _parse_iso(text: str) -> Optional[datetime]:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except (ValueError, OverflowError):
        return None


def parse_date(value: object) -> Optional[date]:
    """Parse the date portion of a value."""
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def format_date(value: Union[date, datetime]) -> str:
    """YYYY-MM-DD"""
    return value.strftime(DATE_FORMAT)


def format_time(value: datetime) -> str:
    """HH:MM"""
    return value.strftime("%H:%M")


def format_datetime(value: datetime) -> str:
    """YYYY-MM-DD HH:MM:SS, the form Zoezi uses."""
    return value.strftime("%Y-%m-%d %H:%M:%S")


def is_date_string(value: Optional[str]) -> bool:
    """True for a real calendar date written as YYYY-MM-DD."""
    if not value or not _DATE_STRING.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def date_range_days(start: DateLike, end: DateLike) -> int:
    """Number of calendar days in an inclusive range, 0 if reversed."""
    first, last = parse_date(start), parse_date(end)
    if first is None or last is None or last < first:
        return 0
    return (last - first).days + 1
