"""
Request/response cache keyed by query parameters.

Each list view session owns its own caches. Entries expire after a TTL and the
cache is bounded, evicting the oldest entry first.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

QueryKey = FrozenSet[Tuple[str, str]]


def query_key(query: Mapping[str, object]) -> QueryKey:
    """
    Canonical, hashable key for a request's parameters.

    Parameter order does not matter; an absent parameter and a parameter set
    to 'false' produce different keys.
    """
    return frozenset((str(k), str(v)) for k, v in query.items())


class ResponseCache:
    """Thread-safe TTL cache for fetch responses."""

    def __init__(self, ttl_seconds: float = 60, max_entries: int = 128):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: 'OrderedDict[QueryKey, Dict[str, Any]]' = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def get(self, key: QueryKey) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            if time.monotonic() > entry['expires_at']:
                del self._entries[key]
                self.misses += 1
                return None

            self.hits += 1
            return entry['value']

    def set(self, key: QueryKey, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = {
                'value': value,
                'expires_at': time.monotonic() + self.ttl_seconds,
            }
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cache entry {sorted(evicted)}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                'entries': len(self._entries),
                'hits': self.hits,
                'misses': self.misses,
                'ttl_seconds': self.ttl_seconds,
            }
