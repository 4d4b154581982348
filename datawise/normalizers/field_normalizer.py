"""
Basic field normalization

Handles common value cleaning shared by validation and transformation:
- None/empty -> ''
- Trim whitespace
- Column name comparison keys
- Email shape check
"""

import re
from typing import Any


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

_NAME_STRIP = re.compile(r'[\s_]+')


def clean_value(value: Any) -> str:
    """
    Convert a raw cell value to its trimmed string form.

    Args:
        value: Raw cell value (str, number, bool, None)

    Returns:
        '' for None, otherwise str(value).strip()

    Examples:
        >>> clean_value("  Acme ")
        "Acme"

        >>> clean_value(None)
        ""

        >>> clean_value(True)
        "true"
    """
    if value is None:
        return ''

    # Match how the values were displayed when the data was loaded
    if isinstance(value, bool):
        return 'true' if value else 'false'

    if isinstance(value, float):
        if value != value:  # NaN
            return ''
        if value.is_integer():
            return str(int(value))

    return str(value).strip()


def normalize_column_name(name: str) -> str:
    """
    Comparison key for column/field names: lowercase, no whitespace or underscores.

    Examples:
        >>> normalize_column_name("Customer Name")
        "customername"

        >>> normalize_column_name("customer_name")
        "customername"
    """
    if not name:
        return ''
    return _NAME_STRIP.sub('', str(name).lower())


def is_valid_email(value: str) -> bool:
    """Check for a simple local@domain.tld shape with no whitespace."""
    if not value or not isinstance(value, str):
        return False
    return bool(EMAIL_PATTERN.match(value))


def truncate(value: str, limit: int = 50) -> str:
    return value[:limit]
