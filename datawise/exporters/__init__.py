"""
Exporters for Datawise
"""

from .csv_exporter import CSVExporter, to_csv, format_cell
from .api_exporter import APIExporter, ExportSubmissionError, build_url, build_json_payload

__all__ = [
    'CSVExporter', 'to_csv', 'format_cell',
    'APIExporter', 'ExportSubmissionError', 'build_url', 'build_json_payload',
]
