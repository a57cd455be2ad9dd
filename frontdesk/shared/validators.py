"""Shared parsing and validation utilities

All date/time values are local wall-clock. Nothing here attaches or
converts a timezone.
"""

from datetime import date, datetime, time
from typing import Optional, Union

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse a YYYY-MM-DD calendar date.

    Accepts a datetime-like string too ("2025-12-16 09:00:00" or
    "2025-12-16T09:00:00"), keeping only the date part.

    Raises:
        ValueError: If the value is not a valid date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip().replace("T", " ").split(" ")[0]
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid date '{value}'. Use YYYY-MM-DD") from None


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse a local wall-clock datetime.

    "2025-12-16 09:30:00", "2025-12-16T09:30:00", "2025-12-16 09:30" and
    values with a trailing zone suffix are accepted; anything past the
    seconds field is dropped and the result is always naive.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None, microsecond=0)

    raw = str(value).strip().replace("T", " ")[:19]
    for fmt in (DATETIME_FORMAT, "%Y-%m-%d %H:%M"):
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid datetime '{value}'. Use YYYY-MM-DD HH:mm:ss")


def parse_time(value: Union[str, time, None]) -> Optional[time]:
    """Parse HH:MM, HH:MM:SS or 12h "HH:MM AM" into a time"""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value

    raw = str(value).strip()
    for fmt in ("%H:%M:%S", "%H:%M", "%I:%M %p"):
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time '{value}'. Use HH:MM or HH:MM:SS")


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(DATETIME_FORMAT)


def format_date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(DATE_FORMAT)


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%H:%M:%S")


def parse_int(value, field: str) -> int:
    """Coerce an id-like value ("3", 3, 3.0) to int"""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be an integer, got '{value}'") from None

