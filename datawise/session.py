"""
Export state

Immutable snapshot of one (dataset, entity) export in progress. Every
mapping change returns a new state with the previous validation result
dropped, so a stale report can never unlock an export.

    state = ExportState.start(entity, headers)
    state = state.with_mapping_change("email", "E-mail")
    state = state.validate(rows)
    if state.is_export_eligible:
        payload = state.transform(rows)
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.config import DEFAULT_MAX_VALIDATION_ERRORS
from core.models import FieldMapping, MappingSuggestion, SourceRow, TargetEntity, ValidationReport
from .mappers.auto_mapper import auto_map
from .transformers import transform_rows
from .validators import validate_dataset


class ExportNotAllowed(RuntimeError):
    """Raised when transforming for export without a passing validation."""


@dataclass(frozen=True)
class ExportState:
    entity: TargetEntity
    source_columns: Tuple[str, ...]
    mapping: Tuple[Tuple[str, str], ...]
    report: Optional[ValidationReport] = None
    confidences: Tuple[Tuple[str, MappingSuggestion], ...] = field(default=())

    @classmethod
    def start(cls, entity: TargetEntity, source_columns: Sequence[str]) -> 'ExportState':
        """Fresh state with an automatic mapping; any earlier overrides are gone."""
        columns = tuple(source_columns)
        mapping = auto_map(columns, entity.fields)
        return cls(
            entity=entity,
            source_columns=columns,
            mapping=tuple((name, mapping[name]) for name in entity.field_names),
        )

    @property
    def field_mapping(self) -> FieldMapping:
        return dict(self.mapping)

    @property
    def suggestions(self) -> Dict[str, MappingSuggestion]:
        return dict(self.confidences)

    @property
    def is_export_eligible(self) -> bool:
        return self.report is not None and self.report.is_valid

    def _check_column(self, column: Optional[str]) -> str:
        column = column or ''
        if column and column not in self.source_columns:
            raise ValueError(f"Unknown source column: {column!r}")
        return column

    def with_mapping_change(self, target_field: str, source_column: Optional[str]) -> 'ExportState':
        """Point one target field at a source column ('' / None unmaps it)."""
        if self.entity.get_field(target_field) is None:
            raise KeyError(f"Entity {self.entity.id!r} has no field {target_field!r}")
        column = self._check_column(source_column)

        mapping = tuple(
            (name, column if name == target_field else current)
            for name, current in self.mapping
        )
        confidences = tuple((name, s) for name, s in self.confidences if name != target_field)
        return replace(self, mapping=mapping, report=None, confidences=confidences)

    def with_mapping(self, mapping: Mapping[str, Optional[str]]) -> 'ExportState':
        """Replace the whole mapping; fields not in mapping become unmapped."""
        for name in mapping:
            if self.entity.get_field(name) is None:
                raise KeyError(f"Entity {self.entity.id!r} has no field {name!r}")
        new_mapping = tuple(
            (name, self._check_column(mapping.get(name)))
            for name in self.entity.field_names
        )
        return replace(self, mapping=new_mapping, report=None, confidences=())

    def with_suggestions(self, suggestions: Sequence[MappingSuggestion]) -> 'ExportState':
        """Apply AI suggestions as a full reset of the mapping."""
        by_field = {s.target_field: s for s in suggestions}
        new_mapping = tuple(
            (name, self._check_column(by_field[name].source_column) if name in by_field else '')
            for name in self.entity.field_names
        )
        confidences = tuple(
            (name, by_field[name])
            for name in self.entity.field_names
            if name in by_field and by_field[name].source_column
        )
        return replace(self, mapping=new_mapping, report=None, confidences=confidences)

    def validate(
        self,
        rows: Sequence[SourceRow],
        max_errors: Optional[int] = DEFAULT_MAX_VALIDATION_ERRORS,
        lookups: Optional[Mapping[str, Any]] = None,
    ) -> 'ExportState':
        report = validate_dataset(rows, self.entity.fields, self.field_mapping, max_errors, lookups)
        return replace(self, report=report)

    def transform(self, rows: Sequence[SourceRow]) -> List[Dict[str, Any]]:
        """
        Build the export payload.

        Raises:
            ExportNotAllowed: If the current mapping has not passed validation
        """
        if not self.is_export_eligible:
            raise ExportNotAllowed("Validate the data successfully before exporting")
        return transform_rows(rows, self.entity.fields, self.field_mapping)
