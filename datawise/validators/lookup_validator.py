"""
Lookup validation

Checks a field value against a column of a loaded lookup table.
"""

from typing import Mapping

from core.models import LookupReference


def check_lookup(reference: LookupReference, value: str, lookups: Mapping, errors) -> None:
    """
    Record an error when value is not present in the referenced lookup column.

    A lookup table that is not loaded, or that lacks the referenced column,
    counts as a failed check for the value.
    """
    table = lookups.get(reference.lookup_id)
    if table is None:
        errors.add(
            f'lookup "{reference.lookup_id}" is not loaded, cannot check value "{value[:50]}".'
        )
        return

    if not table.has_column(reference.lookup_field):
        errors.add(
            f'lookup column "{reference.lookup_field}" not found in "{reference.lookup_id}" data.'
        )
        return

    if not table.contains(reference.lookup_field, value):
        errors.add(
            f'Value "{value[:50]}" not found in "{reference.lookup_id}" lookup data.'
        )
