"""
Auto field mapper

Maps target entity fields to source columns by comparing normalized names
(lowercase, whitespace and underscores removed). Only exact normalized
matches are taken; anything fuzzier is left to the AI suggestion service
or to the user.
"""

from typing import Dict, Iterable, List, Sequence

from core.models import FieldMapping, TargetField, is_mapped
from ..normalizers import normalize_column_name


def auto_map(source_columns: Sequence[str], fields: Iterable[TargetField]) -> FieldMapping:
    """
    Build a fresh mapping for every target field.

    Args:
        source_columns: Source column names in dataset order
        fields: Target fields in entity order

    Returns:
        Mapping with one key per target field; unmapped fields map to ''

    Example:
        >>> auto_map(["Customer Name", "email_address"], [customer_name, email])
        {"customer_name": "Customer Name", "email": ""}
    """
    normalized = [(normalize_column_name(column), column) for column in source_columns]

    mapping: FieldMapping = {}
    for target_field in fields:
        key = normalize_column_name(target_field.name)
        mapping[target_field.name] = next(
            (column for norm, column in normalized if norm == key), ''
        )
    return mapping


class AutoMapper:
    """
    Automatically detect field mappings for a target entity.

    Example:
        mapper = AutoMapper(entity.fields)
        mapping = mapper.auto_map(headers)
        print(mapper.get_coverage(mapping))
    """

    def __init__(self, fields: Sequence[TargetField]):
        """
        Initialize auto mapper.

        Args:
            fields: Target fields of the selected entity
        """
        self.fields = list(fields)

    def auto_map(self, source_columns: Sequence[str]) -> FieldMapping:
        return auto_map(source_columns, self.fields)

    def get_coverage(self, mapping: FieldMapping) -> Dict[str, int]:
        """
        Count mapped fields.

        Returns:
            Dict with total/mapped/required/required_mapped counts
        """
        required = [f for f in self.fields if f.required]
        return {
            'total': len(self.fields),
            'mapped': sum(1 for f in self.fields if is_mapped(mapping.get(f.name))),
            'required': len(required),
            'required_mapped': sum(1 for f in required if is_mapped(mapping.get(f.name))),
        }

    def get_unmapped_required(self, mapping: FieldMapping) -> List[str]:
        return [f.name for f in self.fields if f.required and not is_mapped(mapping.get(f.name))]

    def get_mapping_summary(self, mapping: FieldMapping) -> Dict[str, str]:
        """
        Get a summary of the field mapping.

        Returns:
            Dict of {target_field: source_column} for mapped fields
        """
        return {
            f.name: mapping[f.name]
            for f in self.fields
            if is_mapped(mapping.get(f.name))
        }
