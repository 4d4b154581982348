"""
Excel loader

Loads one worksheet of an .xlsx/.xls workbook through pandas. All values are
read as text so that IDs with leading zeros and dates survive untouched.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd

from .base import DataLoader


class ExcelLoader(DataLoader):
    """
    Load data from a workbook sheet.

    Example:
        loader = ExcelLoader("orders.xlsx", sheet="March")
        records, headers = loader.load()
    """

    def __init__(self, file_path: str, sheet: Optional[Union[str, int]] = None):
        """
        Initialize Excel loader.

        Args:
            file_path: Path to workbook
            sheet: Sheet name or 0-based index (default: first sheet)
        """
        self.file_path = Path(file_path)
        self.sheet = sheet if sheet is not None else 0

        if not self.file_path.exists():
            raise FileNotFoundError(f"Excel file not found: {file_path}")

    def sheet_names(self) -> List[str]:
        with pd.ExcelFile(self.file_path) as workbook:
            return [str(name) for name in workbook.sheet_names]

    def load(self) -> Tuple[List[dict], List[str]]:
        """
        Read the selected sheet.

        Returns:
            Tuple of (records, headers)

        Raises:
            ValueError: If the sheet does not exist or has no header row
        """
        try:
            df = pd.read_excel(self.file_path, sheet_name=self.sheet, dtype=str)
        except (ValueError, IndexError) as e:
            raise ValueError(f"Cannot read sheet {self.sheet!r} from {self.file_path}: {e}") from e

        df = df.dropna(how='all')
        # Unnamed columns are pandas placeholders for empty header cells
        df = df.loc[:, ~df.columns.astype(str).str.startswith('Unnamed:')]

        headers = [str(column).strip() for column in df.columns]
        if not headers:
            raise ValueError(f"Sheet {self.sheet!r} in {self.file_path} has no headers")

        df.columns = headers
        df = df.fillna('')

        records = [
            {header: str(value).strip() for header, value in row.items()}
            for row in df.to_dict(orient='records')
        ]
        return records, headers
