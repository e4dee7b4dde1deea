"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def coerce_date(value: object) -> date:
    """Convert a raw column value (ISO text, date or datetime) into a date.

    Raises:
        ValueError: If the value is missing or not an ISO date
    """
    if value is None:
        raise ValueError("Missing date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date type {type(value).__name__}")
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")


def coerce_datetime(value: object) -> datetime:
    """Convert a raw timestamp column value into a datetime.

    Raises:
        ValueError: If the value is missing or not an ISO timestamp
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported timestamp {value!r}")
    try:
        return date_parser.isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{value}': {e}")
