"""
Short-lived response cache for idempotent reads.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..common.utils import canonical_json, hash_string, monotonic_ms

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 300_000


@dataclass
class CacheEntry:
    """Cached response value and the moment it stops being valid."""
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


def make_cache_key(method: str, url: str, params: Optional[Dict[str, Any]] = None, body: Any = None) -> str:
    """
    Build a deterministic cache key for a logical request.

    Identical method, URL, params and body always give the same key;
    any difference in them gives a different key.
    """
    payload = {
        "method": method.upper(),
        "url": url,
        "params": params or {},
        "body": body,
    }
    return hash_string(canonical_json(payload))


class ResponseCache:
    """
    Key -> (value, expiry) map with lazy TTL eviction.

    Entries are only checked for expiry when they are read, so an expired
    entry may remain in the map until the next ``get`` or ``clear_expired``.
    It is never returned.
    """

    def __init__(self, default_ttl_ms: int = DEFAULT_TTL_MS, clock: Optional[Callable[[], float]] = None):
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock or monotonic_ms
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug(f"Cache entry {key[:12]} expired")
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> None:
        """Store a value for ``ttl_ms`` milliseconds (default TTL when omitted)."""
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        if ttl <= 0:
            return
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry."""
        if self._entries:
            logger.debug(f"Clearing {len(self._entries)} cached responses")
        self._entries.clear()

    def clear_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]

        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Removed {len(expired)} expired cache entries")

        return len(expired)
