"""
Row transformers for Datawise
"""

from .row_transformer import transform_row, transform_rows, coerce_value

__all__ = ['transform_row', 'transform_rows', 'coerce_value']
