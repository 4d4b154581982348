"""
Dataset validator

Runs the row validator over every row, in order, and folds the results
into a ValidationReport.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from core.config import DEFAULT_MAX_VALIDATION_ERRORS
from core.models import FieldMapping, SourceRow, TargetField, ValidationError, ValidationReport
from .row_validator import validate_row

logger = logging.getLogger(__name__)


def validate_dataset(
    rows: Sequence[SourceRow],
    fields: Sequence[TargetField],
    mapping: FieldMapping,
    max_errors: Optional[int] = DEFAULT_MAX_VALIDATION_ERRORS,
    lookups: Optional[Mapping[str, object]] = None,
) -> ValidationReport:
    """
    Validate every row of a dataset.

    Only the first max_errors errors are kept for display, but every row
    is still checked so the report's error_count is the true total.

    Args:
        rows: Source records in dataset order
        fields: Target fields in entity order
        mapping: Target field name -> source column
        max_errors: Cap on retained errors (None = keep all)
        lookups: Optional loaded lookup tables by id

    Returns:
        ValidationReport (is_valid iff no errors at all)
    """
    kept: List[ValidationError] = []
    total = 0

    for row_index, row in enumerate(rows):
        row_errors = validate_row(row, row_index, fields, mapping, lookups)
        if not row_errors:
            continue
        total += len(row_errors)
        if max_errors is None:
            kept.extend(row_errors)
        elif len(kept) < max_errors:
            kept.extend(row_errors[:max_errors - len(kept)])

    logger.info("Validated %d row(s): %d error(s)", len(rows), total)

    return ValidationReport(
        errors=tuple(kept),
        error_count=total,
        row_count=len(rows),
        max_errors=max_errors,
    )
