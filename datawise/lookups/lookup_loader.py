"""
Lookup loading

Reads lookup tables from local files (CSV or JSON array of objects) or
fetches them from an API endpoint returning a JSON array.
"""

import json
from pathlib import Path
from typing import Optional

import requests

from ..loaders import get_loader
from .lookup_table import LookupTable


def load_lookup_file(file_path: str, lookup_id: Optional[str] = None) -> LookupTable:
    """
    Load a lookup table from disk.

    Args:
        file_path: .json (array of objects) or any file the data loaders accept
        lookup_id: Id to register the table under (default: file stem)

    Raises:
        ValueError: If a JSON file is not an array of objects
    """
    path = Path(file_path)
    lookup_id = lookup_id or path.stem

    if path.suffix.lower() == '.json':
        with open(path, 'r', encoding='utf-8') as f:
            rows = json.load(f)
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise ValueError(f"Lookup file {path} must contain a JSON array of objects")
        return LookupTable(lookup_id=lookup_id, rows=rows)

    records, _ = get_loader(str(path)).load()
    return LookupTable(lookup_id=lookup_id, rows=records)


def fetch_lookup(url: str, lookup_id: str, token: Optional[str] = None, timeout: float = 30) -> LookupTable:
    """
    Fetch lookup rows from an API endpoint.

    Raises:
        requests.HTTPError: If API request fails
        ValueError: If the response is not a JSON array of objects
    """
    headers = {'Accept': 'application/json'}
    if token:
        headers['Authorization'] = f'Bearer {token}'

    response = requests.get(url, headers=headers, timeout=timeout)
    response.raise_for_status()

    rows = response.json()
    if not isinstance(rows, list):
        raise ValueError(f"Invalid lookup response format (expected list, got {type(rows).__name__})")

    return LookupTable(lookup_id=lookup_id, rows=[r for r in rows if isinstance(r, dict)])
