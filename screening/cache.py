"""
REPORT CACHE

In-memory cache for source payloads so repeated screens of the same mint
inside the TTL do not hit RugCheck / GMGN again.
"""

from typing import Any, Callable, Dict, Optional
import threading
import time


class ReportCache:
    """
    Thread-safe in-memory cache keyed by mint (or source:mint).

    Features:
    - TTL-based expiration
    - Size limit with LRU eviction
    - Hit/miss statistics
    """

    def __init__(self, config: Dict = None, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            config: dict with 'ttl_seconds' (default 1800) and 'max_size' (default 1000)
            clock: time source, seconds
        """
        self.config = config or {}

        self.ttl_seconds = self.config.get('ttl_seconds', 1800)
        self.max_size = self.config.get('max_size', 1000)
        self._clock = clock

        self._cache: Dict[str, Dict] = {}
        self._lock = threading.Lock()

        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self.misses += 1
                return None

            if self._is_expired(entry):
                del self._cache[key]
                self.misses += 1
                return None

            entry['last_accessed'] = self._clock()
            self.hits += 1
            return entry['value']

    def set(self, key: str, value: Any):
        if self.max_size <= 0 or self.ttl_seconds <= 0:
            return

        with self._lock:
            if key not in self._cache and len(self._cache) >= self.max_size:
                self._evict_lru()

            now = self._clock()
            self._cache[key] = {
                'value': value,
                'last_accessed': now,
                'expires_at': now + self.ttl_seconds,
            }

    def delete(self, key: str):
        with self._lock:
            self._cache.pop(key, None)

    def clear(self):
        """Clear all entries and reset stats."""
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def _is_expired(self, entry: Dict) -> bool:
        return self._clock() >= entry['expires_at']

    def _evict_lru(self):
        if not self._cache:
            return
        lru_key = min(self._cache, key=lambda k: self._cache[k]['last_accessed'])
        del self._cache[lru_key]
        self.evictions += 1

    def cleanup_expired(self) -> int:
        """Remove all expired entries, returning how many were dropped."""
        with self._lock:
            expired_keys = [key for key, entry in self._cache.items() if self._is_expired(entry)]
            for key in expired_keys:
                del self._cache[key]
            return len(expired_keys)

    def __len__(self):
        return len(self._cache)

    def get_stats(self) -> Dict:
        with self._lock:
            total_requests = self.hits + self.misses
            hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

            return {
                'size': len(self._cache),
                'max_size': self.max_size,
                'hits': self.hits,
                'misses': self.misses,
                'hit_rate_pct': hit_rate,
                'evictions': self.evictions,
                'ttl_seconds': self.ttl_seconds,
            }
