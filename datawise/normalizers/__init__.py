"""
Value normalizers for Datawise
"""

from .field_normalizer import clean_value, normalize_column_name, is_valid_email, truncate
from .number_parser import parse_number, format_number
from .date_normalizer import parse_date, is_valid_date_string, to_iso_date

__all__ = [
    'clean_value',
    'normalize_column_name',
    'is_valid_email',
    'truncate',
    'parse_number',
    'format_number',
    'parse_date',
    'is_valid_date_string',
    'to_iso_date',
]
