"""
Validators for Datawise
"""

from .row_validator import validate_row, compile_pattern
from .dataset_validator import validate_dataset
from .lookup_validator import check_lookup

__all__ = [
    'validate_row',
    'validate_dataset',
    'compile_pattern',
    'check_lookup',
]
