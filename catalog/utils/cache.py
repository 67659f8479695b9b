"""
In-process TTL cache for catalog responses.

Responses from the remote catalog are memoized for a short time so repeated
navigation (back to Categories, re-opening a recipe) doesn't hit the API again.

The cache is process-local and in-memory with automatic expiration based on TTL.
It is unbounded: it lives for one app session and entries expire on their own.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import quote, urlencode

# TTL in seconds - five minutes keeps browsing snappy while data stays fresh
DEFAULT_CACHE_TTL_SECONDS = 300.0


def make_request_cache_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Create a deterministic cache key for a catalog request.

    The key is the endpoint path plus its query string with parameters sorted by
    name and percent-encoded, so two logically identical requests share a key.

    Args:
        endpoint: Endpoint path relative to the API base (e.g., "search.php")
        params: Query parameters (values are converted to str)

    Returns:
        Cache key string, e.g. "filter.php?c=Seafood"
    """
    if not params:
        return endpoint
    items = sorted((str(name), "" if value is None else str(value)) for name, value in params.items())
    return f"{endpoint}?{urlencode(items, quote_via=quote)}"


@dataclass(frozen=True)
class CacheEntry:
    """A cached value with the time it was stored and how long it stays readable."""

    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now >= self.stored_at + self.ttl


class ResponseCache:
    """
    Time-bounded memoization keyed by request identity.

    Writes are whole-value replacements. An entry is readable only while
    `now < stored_at + ttl`; a stale entry is evicted by the read that finds it.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a cached value if it exists and hasn't expired.

        Returns:
            Cached value, or None if not found or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            # Expired - remove from cache
            self._entries.pop(key, None)
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Store a value, replacing any previous entry under the same key.

        Args:
            key: Cache key from make_request_cache_key()
            value: JSON-compatible payload
            ttl: Lifetime in seconds (defaults to the cache's default_ttl)
        """
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=lifetime)

    def clear(self) -> None:
        """Clear all cached responses."""
        self._entries.clear()

    def size(self) -> int:
        """Get the current number of stored entries, expired ones included."""
        return len(self._entries)
