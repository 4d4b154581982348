"""
CSV loader with auto-detection

Loads CSV files with automatic detection of:
- Delimiter (comma, tab, pipe, semicolon)
- Encoding (UTF-8, latin1, etc.)
- Header row (title/blank lines above the real header are skipped)
"""

import csv
import io
import logging
from typing import List, Optional, Tuple
from pathlib import Path
from .base import DataLoader

logger = logging.getLogger(__name__)

# How many contentful rows to consider when looking for the header row
HEADER_SEARCH_DEPTH = 10


def _is_blank(cells: List[str]) -> bool:
    return all(not cell.strip() for cell in cells)


def _is_number(text: str) -> bool:
    try:
        float(text)
        return True
    except ValueError:
        return False


def _looks_like_header(cells: List[str], next_cells: Optional[List[str]]) -> bool:
    """
    Score a candidate header row.

    Column count: more than one column, and roughly as wide as the next row.
    Content: at least 60% of non-empty cells are non-numeric.
    """
    col_score = 0
    if len(cells) > 1:
        col_score += 1
    if next_cells:
        if abs(len(cells) - len(next_cells)) <= max(2, len(cells) * 0.3):
            col_score += 2
        elif len(next_cells) >= len(cells) * 0.5:
            col_score += 1
    elif len(cells) > 1:
        col_score += 1

    non_empty = [cell.strip() for cell in cells if cell.strip()]
    text_cells = [cell for cell in non_empty if not _is_number(cell)]
    content_score = 0
    if non_empty and len(text_cells) / len(non_empty) >= 0.6:
        content_score += 2
    elif non_empty:
        content_score += 1

    return col_score >= 2 and content_score >= 2


def find_header_row(rows: List[List[str]], max_search_depth: int = HEADER_SEARCH_DEPTH) -> Tuple[int, List[str]]:
    """
    Locate the header row in raw CSV rows.

    Returns:
        Tuple of (header row index, header cells); index == len(rows) and
        no headers when every row is blank
    """
    first = next((i for i, cells in enumerate(rows) if not _is_blank(cells)), None)
    if first is None:
        return len(rows), []

    if first == len(rows) - 1:
        return first, rows[first]

    end = min(first + max_search_depth, len(rows) - 1)
    for i in range(first, end + 1):
        cells = rows[i]
        if not cells or _is_blank(cells):
            continue
        next_cells = rows[i + 1] if i + 1 < len(rows) else None
        if _looks_like_header(cells, next_cells):
            return i, cells

    return first, rows[first]


def rows_to_records(headers: List[str], rows: List[List[str]]) -> List[dict]:
    """
    Build trimmed records, skipping blank rows and sparse footer rows.
    """
    records = []
    for cells in rows:
        if _is_blank(cells):
            continue

        filled = sum(1 for cell in cells if cell.strip())
        if len(headers) > 2 and filled < len(headers) * 0.5 and filled < 2:
            continue

        records.append({
            header: (cells[index].strip() if index < len(cells) else '')
            for index, header in enumerate(headers)
        })
    return records


class CSVLoader(DataLoader):
    """
    Load a delimited text file, sniffing its encoding, delimiter and header row.

    Example:
        loader = CSVLoader("orders.csv")
        records, headers = loader.load()
        print(loader.delimiter, loader.encoding)
    """

    # utf-8-sig first so a BOM never ends up in the first header
    ENCODINGS = ('utf-8-sig', 'cp1252', 'latin1')
    DELIMITERS = ',\t|;'
    SNIFF_LINES = 5

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self.encoding: Optional[str] = None
        self.delimiter: Optional[str] = None

        if not self.file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {file_path}")

    def load(self) -> Tuple[List[dict], List[str]]:
        """
        Read the file into trimmed records keyed by header.

        Raises:
            ValueError: If no header row can be found
        """
        text = self._read_text()
        self.delimiter = self._sniff_delimiter(text)

        rows = list(csv.reader(io.StringIO(text, newline=''), delimiter=self.delimiter))

        header_index, raw_headers = find_header_row(rows)
        headers = [header.strip() for header in raw_headers]
        if not any(headers):
            raise ValueError(f"CSV file has no headers: {self.file_path}")

        records = rows_to_records(headers, rows[header_index + 1:])
        logger.debug(
            "%s: encoding=%s delimiter=%r header row=%d",
            self.file_path.name, self.encoding, self.delimiter, header_index,
        )
        return records, headers

    def _read_text(self) -> str:
        raw = self.file_path.read_bytes()
        for encoding in self.ENCODINGS:
            try:
                text = raw.decode(encoding)
            except UnicodeDecodeError:
                continue
            self.encoding = encoding
            return text
        # unreachable while latin1 is listed
        raise ValueError(f"Cannot decode {self.file_path}")

    def _sniff_delimiter(self, text: str) -> str:
        sample = '\n'.join(text.splitlines()[:self.SNIFF_LINES])
        try:
            return csv.Sniffer().sniff(sample, delimiters=self.DELIMITERS).delimiter
        except csv.Error:
            # Sniffer gives up on single-column or irregular samples
            counts = {d: sample.count(d) for d in self.DELIMITERS}
            return max(counts, key=counts.get)

    def get_info(self) -> dict:
        """File metadata plus what was detected while loading."""
        records, headers = self.load()
        return {
            'file_path': str(self.file_path),
            'file_size': self.file_path.stat().st_size,
            'row_count': len(records),
            'column_count': len(headers),
            'delimiter': self.delimiter,
            'encoding': self.encoding,
            'headers': headers,
        }
