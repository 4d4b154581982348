"""
Lookup tables for Datawise
"""

from .lookup_table import LookupTable
from .lookup_loader import load_lookup_file, fetch_lookup
from .lookup_cache import (
    get_cached_lookup,
    store_lookup,
    load_cached_lookups,
    clear_cache,
    get_cache_stats,
)

__all__ = [
    'LookupTable',
    'load_lookup_file',
    'fetch_lookup',
    'get_cached_lookup',
    'store_lookup',
    'load_cached_lookups',
    'clear_cache',
    'get_cache_stats',
]
