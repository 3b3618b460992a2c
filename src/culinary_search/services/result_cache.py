"""In-process result cache with a fixed time-to-live.

Entries are keyed by a signature of (collection, query text, limit, filter)
and expire lazily: a read compares the entry's age with the TTL and evicts it
when stale. There are no per-entry timers.
"""

import copy
import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from culinary_search.entities import SearchResult
from culinary_search.services.ranker import normalize_filter

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300  # 5 minutes


@dataclass(frozen=True)
class CachedResults:
    """A stored result set and when it was computed."""

    collection: str
    results: tuple[SearchResult, ...]
    created_at: float


def make_key(
    collection: str,
    query: str,
    limit: int,
    filter: Mapping[str, Any] | None = None,
) -> str:
    """Build the cache signature for a search request.

    The filter is canonicalized first, so key order and unset attributes
    do not produce distinct keys.
    """
    signature = json.dumps(
        {
            "collection": collection,
            "query": query,
            "limit": limit,
            "filter": normalize_filter(filter),
        },
        sort_keys=True,
        default=str,
    )
    digest = hashlib.sha256(signature.encode("utf-8")).hexdigest()
    return f"{collection}:{digest}"


class ResultCache:
    """TTL cache of formatted search results.

    Safe to share between concurrent requests: every operation holds a lock
    for the duration of its dictionary access. Racing writers to the same key
    simply overwrite each other. Results are copied on the way in and out,
    so callers never hold the stored objects.

    Example:
        ```python
        cache = ResultCache(ttl=300)
        key = make_key("recipes", "fruity tropical drinks", 10)
        if (hit := cache.get(key)) is None:
            cache.put(key, "recipes", results)
        ```
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid.
            enabled: When False, ``get`` always misses and ``put`` is a no-op.
            clock: Time source (seconds); injectable for tests.
        """
        if ttl < 0:
            raise ValueError("ttl must not be negative")
        self._ttl = ttl
        self._enabled = enabled
        self._clock = clock
        self._entries: dict[str, CachedResults] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _is_fresh(self, entry: CachedResults, now: float) -> bool:
        return now - entry.created_at < self._ttl

    def get(self, key: str) -> list[SearchResult] | None:
        """Return the cached results for ``key``, or None on a miss or expiry."""
        if not self._enabled:
            return None

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry, self._clock()):
                self._hits += 1
                return copy.deepcopy(list(entry.results))
            if entry is not None:
                del self._entries[key]
            self._misses += 1
            return None

    def put(self, key: str, collection: str, results: list[SearchResult]) -> None:
        """Store results under ``key``, replacing any previous entry."""
        if not self._enabled:
            return

        with self._lock:
            self._entries[key] = CachedResults(
                collection=collection,
                results=tuple(copy.deepcopy(results)),
                created_at=self._clock(),
            )

    def clear(self) -> int:
        """Remove every entry regardless of age.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("Result cache cleared (%d entries)", count)
        return count

    def purge_expired(self) -> int:
        """Evict all stale entries.

        Returns:
            Number of entries evicted
        """
        with self._lock:
            now = self._clock()
            stale = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def occupancy(self) -> dict[str, int]:
        """Count live entries per collection."""
        self.purge_expired()
        counts: dict[str, int] = {}
        with self._lock:
            for entry in self._entries.values():
                counts[entry.collection] = counts.get(entry.collection, 0) + 1
        return counts

    def __len__(self) -> int:
        self.purge_expired()
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        occupancy = self.occupancy()
        with self._lock:
            total = self._hits + self._misses
            return {
                "enabled": self._enabled,
                "ttl_seconds": self._ttl,
                "size": sum(occupancy.values()),
                "entries": occupancy,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }
