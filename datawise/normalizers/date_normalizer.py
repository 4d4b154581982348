"""
Date normalization

Accepted input shapes:
- M/D/YYYY or M-D-YYYY (one or two digit month/day)
- YYYY-MM-DD
- ISO-8601 timestamps containing 'T', as read by datetime.fromisoformat
  (e.g. 2024-03-01T09:30:00Z, 2024-03-01T09:30:00.5Z, 20240301T093000)

Every shape is checked against the calendar, so 2024-02-30 is rejected
while 2024-02-29 is accepted.
"""

import re
from datetime import date, datetime
from typing import Optional


US_DATE = re.compile(r'^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})$')
ISO_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')


def _calendar_date(year: int, month: int, day: int) -> Optional[date]:
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_timestamp(value: str) -> Optional[datetime]:
    if 'T' not in value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def parse_date(value: str) -> Optional[date]:
    """
    Parse a date string in one of the accepted shapes.

    Returns:
        The calendar date, or None if the string is not a valid date
    """
    if not value or not isinstance(value, str):
        return None

    match = US_DATE.match(value)
    if match:
        month, day, year = (int(part) for part in match.groups())
        return _calendar_date(year, month, day)

    match = ISO_DATE.match(value)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _calendar_date(year, month, day)

    timestamp = _parse_timestamp(value)
    if timestamp is not None:
        return timestamp.date()

    return None


def is_valid_date_string(value: str) -> bool:
    return parse_date(value) is not None


def to_iso_date(value: str) -> str:
    """
    Normalize a date string to YYYY-MM-DD.

    YYYY-MM-DD input passes through unchanged, ISO timestamps (extended or
    basic format) are reduced to their calendar date, and anything
    unparseable is returned as given.

    Examples:
        >>> to_iso_date("2/9/2024")
        "2024-02-09"

        >>> to_iso_date("2024-03-01T09:30:00Z")
        "2024-03-01"

        >>> to_iso_date("next tuesday")
        "next tuesday"
    """
    if not value:
        return value

    if ISO_DATE.match(value):
        return value

    match = US_DATE.match(value)
    if match:
        parsed = parse_date(value)
        return parsed.isoformat() if parsed else value

    timestamp = _parse_timestamp(value)
    if timestamp is not None:
        return timestamp.date().isoformat()

    return value
