"""
CSV exporter

Serializes transformed records to CSV text and files. The header row is the
entity's field names in field order; values are only quoted when they
contain a comma, newline or quote.
"""

import csv
import io
import re
from typing import Any, Dict, List, Optional, Sequence
from pathlib import Path

from core.models import TargetEntity
from ..normalizers import format_number


def format_cell(value: Any) -> str:
    """Render a transformed value as CSV cell text."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    return str(value)


def to_csv(headers: Sequence[str], records: Sequence[Dict[str, Any]]) -> str:
    """
    Serialize records to CSV text.

    Args:
        headers: Column names, in output order
        records: Records keyed by header name

    Returns:
        CSV text, lines joined by '\\n', no trailing newline
    """
    if not headers:
        if not records:
            return ''
        headers = list(records[0].keys())

    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(headers),
        extrasaction='ignore',
        lineterminator='\n',
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writeheader()
    for record in records:
        writer.writerow({h: format_cell(record.get(h)) for h in headers})

    text = buffer.getvalue()
    return text[:-1] if text.endswith('\n') else text


class CSVExporter:
    """
    Export transformed records to CSV files.

    Example:
        exporter = CSVExporter()
        exporter.export(records, entity, "output/customers.csv")
    """

    def export(
        self,
        records: List[Dict[str, Any]],
        entity: TargetEntity,
        output_path: str
    ) -> int:
        """
        Write records in the entity's field order.

        Args:
            records: Transformed records
            entity: Target entity (defines the columns)
            output_path: Path to output CSV file

        Returns:
            Number of records exported
        """
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            f.write(to_csv(entity.field_names, records))

        return len(records)

    @staticmethod
    def generate_filename(
        entity_name: str,
        source_name: Optional[str] = None,
        base_dir: Optional[str] = None
    ) -> str:
        """
        Generate the export filename for an entity.

        Format: {base_dir}/{source stem}_{Entity_Name}.csv
                {base_dir}/{Entity_Name}_export.csv (no source file)
        Example: output/orders_Customer_Accounts.csv

        Args:
            entity_name: Display name of the target entity
            source_name: Name of the uploaded source file, if any
            base_dir: Base directory for output (default: uses centralized config)

        Returns:
            Full path to output file
        """
        # Use centralized config if base_dir not provided
        if base_dir is None:
            from core.config import get_config
            output_dir = get_config().get_output_dir()
        else:
            output_dir = Path(base_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

        entity_slug = re.sub(r'\s+', '_', entity_name.strip())

        if source_name:
            stem = Path(source_name).name.split('.')[0]
            filename = f"{stem}_{entity_slug}.csv"
        else:
            filename = f"{entity_slug}_export.csv"

        return str(output_dir / filename)
