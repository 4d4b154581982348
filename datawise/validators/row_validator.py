"""
Row validator

Checks one source row against every target field of an entity, in field
order. Problems are returned as ValidationError entries, never raised; a
single field can produce several errors on the same row.
"""

import logging
import re
from functools import lru_cache
from typing import List, Mapping, Optional, Pattern, Sequence

from core.models import (
    BooleanField,
    DateField,
    EmailField,
    FieldMapping,
    NumberField,
    SourceRow,
    TargetField,
    TextField,
    ValidationError,
    is_mapped,
)
from ..normalizers import clean_value, is_valid_date_string, is_valid_email, parse_number, format_number, truncate
from .lookup_validator import check_lookup

logger = logging.getLogger(__name__)

BOOLEAN_VALUES = {'true', 'false', '1', '0', ''}


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Optional[Pattern]:
    """Compile a configured pattern; invalid patterns mean no constraint."""
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug("Ignoring invalid pattern %r: %s", pattern, e)
        return None


class _RowErrors:
    """Collects errors for one (row, field) pair with a shared message prefix."""

    def __init__(self, row_index: int, target_field: TargetField, source_column: Optional[str]):
        self.row_index = row_index
        self.target_field = target_field
        self.source_column = source_column
        self.errors: List[ValidationError] = []

    @property
    def prefix(self) -> str:
        row = f"Row {self.row_index + 1}"
        if self.source_column:
            return f'{row}, "{self.target_field.name}" (from "{self.source_column}")'
        return f'{row}, Target "{self.target_field.name}"'

    def add(self, detail: str) -> None:
        self.errors.append(ValidationError(
            row_index=self.row_index,
            target_field=self.target_field.name,
            source_column=self.source_column or None,
            message=f"{self.prefix}: {detail}",
        ))


def _check_text(target_field, value: str, errors: _RowErrors) -> None:
    shown = truncate(value)
    if target_field.min_length is not None and len(value) < target_field.min_length:
        errors.add(f'min length {target_field.min_length}, got {len(value)}. Value: "{shown}"')
    if target_field.max_length is not None and len(value) > target_field.max_length:
        errors.add(f'max length {target_field.max_length}, got {len(value)}. Value: "{shown}"')
    if target_field.pattern:
        regex = compile_pattern(target_field.pattern)
        if regex is not None and not regex.search(value):
            errors.add(f'does not match pattern "{target_field.pattern}". Value: "{shown}"')
    if isinstance(target_field, EmailField) and not is_valid_email(value):
        errors.add(f'not a valid email. Value: "{shown}"')


def _check_number(target_field: NumberField, value: str, errors: _RowErrors) -> None:
    number = parse_number(value)
    if number is None:
        errors.add(f'should be a number. Found "{truncate(value)}".')
        return
    if target_field.min_value is not None and number < target_field.min_value:
        errors.add(f"min value {target_field.min_value}, got {format_number(number)}.")
    if target_field.max_value is not None and number > target_field.max_value:
        errors.add(f"max value {target_field.max_value}, got {format_number(number)}.")


def _check_boolean(value: str, errors: _RowErrors) -> None:
    if value.lower() not in BOOLEAN_VALUES:
        errors.add(f'should be boolean (true/false, 1/0). Found "{truncate(value)}".')


def _check_date(value: str, errors: _RowErrors) -> None:
    if not is_valid_date_string(value):
        errors.add(f'not a valid date. Examples: YYYY-MM-DD, MM/DD/YYYY. Found "{truncate(value)}".')


def check_value(target_field: TargetField, value: str, errors: _RowErrors) -> None:
    """Apply the type-specific checks for a non-empty value."""
    if isinstance(target_field, TextField):
        _check_text(target_field, value, errors)
    elif isinstance(target_field, NumberField):
        _check_number(target_field, value, errors)
    elif isinstance(target_field, BooleanField):
        _check_boolean(value, errors)
    elif isinstance(target_field, DateField):
        _check_date(value, errors)


def validate_row(
    row: SourceRow,
    row_index: int,
    fields: Sequence[TargetField],
    mapping: FieldMapping,
    lookups: Optional[Mapping[str, object]] = None,
) -> List[ValidationError]:
    """
    Validate a single row.

    Args:
        row: Source record
        row_index: 0-based position of the row in the dataset
        fields: Target fields in entity order
        mapping: Target field name -> source column ('' / None = unmapped)
        lookups: Optional loaded lookup tables by lookup id; when None,
            lookup references are not checked

    Returns:
        Errors in field order (empty list when the row is valid)
    """
    found: List[ValidationError] = []

    for target_field in fields:
        source_column = mapping.get(target_field.name)
        errors = _RowErrors(row_index, target_field, source_column)

        if not is_mapped(source_column):
            if target_field.required:
                errors.add("required by API but not mapped.")
                found.extend(errors.errors)
            continue

        value = clean_value(row.get(source_column))

        if target_field.required and value == '':
            errors.add("required by API but source data is empty.")

        if value != '':
            check_value(target_field, value, errors)
            if lookups is not None and target_field.lookup_validation is not None:
                check_lookup(target_field.lookup_validation, value, lookups, errors)

        found.extend(errors.errors)

    return found
