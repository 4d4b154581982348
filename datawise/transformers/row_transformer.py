"""
Row transformer

Builds target-shaped records from source rows. The output keys are exactly
the entity's field names in field order. Coercions never raise: every
type has a fallback (None or the original string), since validation is
what gates an export.
"""

import math
from typing import Any, Dict, List, Sequence

from core.models import (
    BooleanField,
    DateField,
    FieldMapping,
    NumberField,
    SourceRow,
    TargetField,
    is_mapped,
)
from ..normalizers import clean_value, parse_number, to_iso_date


def coerce_value(target_field: TargetField, value: str) -> Any:
    """Convert a trimmed, non-empty (or required) string to the field's type."""
    if isinstance(target_field, BooleanField):
        return value.lower() in ('true', '1')

    if isinstance(target_field, NumberField):
        number = parse_number(value)
        # payloads are JSON, which has no Infinity
        if number is None or not math.isfinite(number):
            return None
        return number

    if isinstance(target_field, DateField):
        return to_iso_date(value)

    return value


def transform_row(row: SourceRow, fields: Sequence[TargetField], mapping: FieldMapping) -> Dict[str, Any]:
    """
    Transform one source row into the target entity shape.

    Args:
        row: Source record
        fields: Target fields in entity order
        mapping: Target field name -> source column

    Returns:
        Dict keyed by target field name, in field order
    """
    record: Dict[str, Any] = {}

    for target_field in fields:
        source_column = mapping.get(target_field.name)

        if not is_mapped(source_column) or source_column not in row:
            record[target_field.name] = None
            continue

        value = clean_value(row[source_column])
        if value == '' and not target_field.required:
            record[target_field.name] = None
        else:
            record[target_field.name] = coerce_value(target_field, value)

    return record


def transform_rows(
    rows: Sequence[SourceRow],
    fields: Sequence[TargetField],
    mapping: FieldMapping
) -> List[Dict[str, Any]]:
    """Transform every row, preserving row order."""
    return [transform_row(row, fields, mapping) for row in rows]
