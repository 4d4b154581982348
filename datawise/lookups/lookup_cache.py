"""
Lookup Cache - File-based caching for lookup tables

Uses a JSON file for simplicity. 24-hour TTL.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone

from .lookup_table import LookupTable

logger = logging.getLogger(__name__)

# Cache settings
CACHE_TTL_HOURS = 24


def _cache_file(cache_file: Optional[Path]) -> Path:
    if cache_file is not None:
        return Path(cache_file)
    from core.config import get_config
    return get_config().lookup_cache_file


def load_cache(cache_file: Optional[Path] = None) -> Dict[str, LookupTable]:
    """Load cache from file"""
    path = _cache_file(cache_file)
    if not path.exists():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable lookup cache %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring lookup cache %s: expected an object, got %s", path, type(data).__name__)
        return {}

    cache = {}
    for lookup_id, value in data.items():
        rows = value.get('rows', []) if isinstance(value, dict) else None
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            logger.warning("Skipping malformed lookup cache entry %r", lookup_id)
            continue
        cache[lookup_id] = LookupTable(
            lookup_id=lookup_id,
            rows=rows,
            fetched_at=value.get('fetched_at', ''),
        )
    return cache


def save_cache(cache: Dict[str, LookupTable], cache_file: Optional[Path] = None) -> None:
    """Save cache to file"""
    path = _cache_file(cache_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        lookup_id: {'rows': table.rows, 'fetched_at': table.fetched_at}
        for lookup_id, table in cache.items()
    }

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)


def is_cache_stale(fetched_at: str, ttl_hours: int = CACHE_TTL_HOURS) -> bool:
    """Check if cache entry is older than the TTL"""
    try:
        fetched_time = datetime.fromisoformat(fetched_at.replace('Z', '+00:00'))
    except (AttributeError, ValueError):
        return True  # Treat invalid timestamps as stale
    if fetched_time.tzinfo is None:
        fetched_time = fetched_time.replace(tzinfo=timezone.utc)
    age = datetime.now(timezone.utc) - fetched_time
    return age > timedelta(hours=ttl_hours)


def get_cached_lookup(lookup_id: str, cache_file: Optional[Path] = None) -> Optional[LookupTable]:
    """Return a cached lookup table if present and fresh."""
    table = load_cache(cache_file).get(lookup_id)
    if table is None or is_cache_stale(table.fetched_at):
        return None
    return table


def store_lookup(table: LookupTable, cache_file: Optional[Path] = None) -> None:
    """Store a lookup table, stamping it with the current time."""
    if not table.fetched_at:
        table.fetched_at = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')

    cache = load_cache(cache_file)
    cache[table.lookup_id] = table
    save_cache(cache, cache_file)


def load_cached_lookups(cache_file: Optional[Path] = None) -> Dict[str, LookupTable]:
    """All fresh lookup tables, keyed by lookup id."""
    return {
        lookup_id: table
        for lookup_id, table in load_cache(cache_file).items()
        if not is_cache_stale(table.fetched_at)
    }


def clear_cache(cache_file: Optional[Path] = None) -> None:
    """Clear the entire lookup cache"""
    path = _cache_file(cache_file)
    if path.exists():
        path.unlink()


def get_cache_stats(cache_file: Optional[Path] = None) -> Dict[str, Any]:
    """Get cache statistics"""
    cache = load_cache(cache_file)

    total = len(cache)
    stale = sum(1 for t in cache.values() if is_cache_stale(t.fetched_at))

    return {
        'total': total,
        'fresh': total - stale,
        'stale': stale,
        'rows': {lookup_id: len(table) for lookup_id, table in cache.items()},
        'cache_file': str(_cache_file(cache_file)),
    }
