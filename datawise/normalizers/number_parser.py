"""
Lenient number parsing

Reads the longest leading numeric prefix of a string, the way spreadsheet
values typed as "12 kg" or "3.5%" are usually meant:

    "42"      -> 42.0
    " -1.5e3" -> -1500.0
    "12abc"   -> 12.0
    "abc"     -> None
"""

import math
import re
from typing import Optional


_NUMBER_PREFIX = re.compile(
    r'^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)'
)


def parse_number(value: str) -> Optional[float]:
    """
    Parse the leading number in a string.

    Returns:
        The float value, or None when the string does not start with a number
    """
    if value is None:
        return None

    match = _NUMBER_PREFIX.match(str(value).strip())
    if not match:
        return None

    text = match.group(0)
    if text.lstrip('+-') == 'Infinity':
        return -math.inf if text.startswith('-') else math.inf

    return float(text)


def format_number(value: float) -> str:
    """Render a parsed number without a trailing .0 for integral values."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)
