"""
Pick a loader from the file extension
"""

from pathlib import Path
from typing import Optional, Union

from .base import DataLoader
from .csv_loader import CSVLoader
from .excel_loader import ExcelLoader

EXCEL_SUFFIXES = {'.xlsx', '.xlsm', '.xls'}
TEXT_SUFFIXES = {'.csv', '.tsv', '.txt'}


def get_loader(file_path: str, sheet: Optional[Union[str, int]] = None) -> DataLoader:
    """
    Return the loader for a data file.

    Raises:
        ValueError: If the extension is not supported
    """
    suffix = Path(file_path).suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        return ExcelLoader(file_path, sheet=sheet)
    if suffix in TEXT_SUFFIXES or not suffix:
        return CSVLoader(file_path)
    raise ValueError(f"Unsupported file type '{suffix}'. Use CSV or Excel files.")
