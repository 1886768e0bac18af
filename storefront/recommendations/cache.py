"""
In-process TTL cache for related-product lists.

Entries are keyed by ``(product_id, limit)`` and hold the fully built
response. Any catalog write calls ``invalidate()`` since a single price or
flag change can reorder every list.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Tuple

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

RELATED_CACHE_TTL = float(os.getenv("RELATED_CACHE_TTL", "300"))  # seconds

_Key = Tuple[str, int]

_entries: dict[_Key, tuple[float, Any]] = {}
_hits: int = 0
_misses: int = 0


def cache_get(product_id: str, limit: int) -> Any | None:
    global _hits, _misses
    key = (product_id, limit)
    found = _entries.get(key)
    if found is not None:
        expires_at, value = found
        if time.time() < expires_at:
            _hits += 1
            return value
        del _entries[key]
    _misses += 1
    return None


def cache_set(product_id: str, limit: int, value: Any) -> None:
    _entries[(product_id, limit)] = (time.time() + RELATED_CACHE_TTL, value)


def invalidate() -> None:
    """Forget cached lists after the catalog changes; counters are kept."""
    _entries.clear()


def get_cache_stats() -> dict[str, Any]:
    lookups = _hits + _misses
    return {
        "size": len(_entries),
        "ttl_seconds": RELATED_CACHE_TTL,
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(100 * _hits / lookups, 1) if lookups else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    invalidate()
    _hits = _misses = 0
