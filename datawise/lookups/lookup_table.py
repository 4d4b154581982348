"""
Lookup tables

In-memory reference data (e.g. a list of valid owners) that target field
values can be checked against.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from ..normalizers import clean_value


@dataclass
class LookupTable:
    """Rows of reference data fetched from an external source."""
    lookup_id: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    fetched_at: str = ''  # ISO timestamp

    def __post_init__(self):
        self._index: Dict[str, Set[str]] = {}

    @property
    def columns(self) -> List[str]:
        return list(self.rows[0].keys()) if self.rows else []

    def has_column(self, column: str) -> bool:
        return bool(self.rows) and column in self.rows[0]

    def values(self, column: str) -> Set[str]:
        """Trimmed string values of one column (cached per column)."""
        if column not in self._index:
            self._index[column] = {
                clean_value(row.get(column)) for row in self.rows if column in row
            }
        return self._index[column]

    def contains(self, column: str, value: Any) -> bool:
        return clean_value(value) in self.values(column)

    def __len__(self) -> int:
        return len(self.rows)
