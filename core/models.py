"""
Datawise Data Models

Target entity schemas, field definitions and validation results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class FieldType(str, Enum):
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    EMAIL = 'email'
    DATE = 'date'


@dataclass(frozen=True)
class LookupReference:
    """Points a field at a column of an externally cached lookup table."""
    lookup_id: str
    lookup_field: str


@dataclass(frozen=True)
class BaseField:
    """Attributes shared by every target field."""
    name: str
    required: bool = False
    lookup_validation: Optional[LookupReference] = None

    field_type = FieldType.STRING


@dataclass(frozen=True)
class StringField(BaseField):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    field_type = FieldType.STRING


@dataclass(frozen=True)
class EmailField(BaseField):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    field_type = FieldType.EMAIL


@dataclass(frozen=True)
class NumberField(BaseField):
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    field_type = FieldType.NUMBER


@dataclass(frozen=True)
class BooleanField(BaseField):
    field_type = FieldType.BOOLEAN


@dataclass(frozen=True)
class DateField(BaseField):
    field_type = FieldType.DATE


TargetField = Union[StringField, EmailField, NumberField, BooleanField, DateField]
TextField = (StringField, EmailField)

FIELD_CLASSES = {
    FieldType.STRING: StringField,
    FieldType.EMAIL: EmailField,
    FieldType.NUMBER: NumberField,
    FieldType.BOOLEAN: BooleanField,
    FieldType.DATE: DateField,
}


@dataclass(frozen=True)
class TargetEntity:
    """An external system's expected record shape."""
    id: str
    name: str
    url: str = ''
    fields: Tuple[TargetField, ...] = ()

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def required_fields(self) -> List[TargetField]:
        return [f for f in self.fields if f.required]

    def get_field(self, name: str) -> Optional[TargetField]:
        for target_field in self.fields:
            if target_field.name == name:
                return target_field
        return None


@dataclass(frozen=True)
class ExportConfig:
    """All configured entities plus the shared API base URL."""
    base_url: str = ''
    entities: Tuple[TargetEntity, ...] = ()

    def get_entity(self, entity_id: str) -> Optional[TargetEntity]:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    @property
    def is_empty(self) -> bool:
        return not self.entities


# Target field name -> source column name. '' or None means unmapped.
FieldMapping = Dict[str, Optional[str]]
SourceRow = Dict[str, Any]


def is_mapped(source_column: Optional[str]) -> bool:
    return bool(source_column)


@dataclass(frozen=True)
class ValidationError:
    """A single data-quality problem found in one row."""
    row_index: int
    target_field: str
    source_column: Optional[str]
    message: str

    @property
    def row_number(self) -> int:
        return self.row_index + 1

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationReport:
    """
    Result of validating a whole dataset.

    errors holds at most max_errors entries for display; error_count is the
    untruncated total and decides validity.
    """
    errors: Tuple[ValidationError, ...] = ()
    error_count: int = 0
    row_count: int = 0
    max_errors: Optional[int] = None

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0

    @property
    def truncated(self) -> bool:
        return self.error_count > len(self.errors)

    def summary(self) -> str:
        if self.is_valid:
            return f"{self.row_count} row(s) valid and ready for export"
        prefix = 'More than ' if self.truncated else ''
        shown = len(self.errors) if self.truncated else self.error_count
        return f"{prefix}{shown} error(s) found in {self.row_count} row(s)"


@dataclass(frozen=True)
class MappingSuggestion:
    """AI-suggested source column for one target field."""
    target_field: str
    source_column: Optional[str]
    confidence: float = 0.0
    reasoning: str = ''
