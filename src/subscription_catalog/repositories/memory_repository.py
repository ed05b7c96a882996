"""In-process implementation of CacheStore.

Suitable for tests, local development and single-process deployments
without Redis (``CACHE_BACKEND=memory``).
"""

import copy
import heapq
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryCacheRepository:
    """Dictionary-backed cache with per-entry expiry.

    Values are deep-copied on the way in and out so callers can never
    mutate what is cached. Every write also evicts entries whose TTL has
    passed, so keys that are never read again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, _CacheEntry] = {}
        # (expires_at, key); may hold stale pairs for keys overwritten since
        self._expiry_heap: list[tuple[float, str]] = []
        self._clock = clock
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                self._entries.pop(key, None)
                return None
            return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return
        now = self._clock()
        entry = _CacheEntry(value=copy.deepcopy(value), expires_at=now + ttl)
        with self._lock:
            self._evict_expired(now)
            self._entries[key] = entry
            heapq.heappush(self._expiry_heap, (entry.expires_at, key))

    def delete(self, *keys: str) -> int:
        with self._lock:
            return sum(1 for key in keys if self._entries.pop(key, None) is not None)

    def health_check(self) -> bool:
        return True

    def keys(self) -> list[str]:
        """Currently stored keys, including expired ones not yet evicted."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._expiry_heap.clear()

    def _evict_expired(self, now: float) -> None:
        # caller holds the lock
        while self._expiry_heap and self._expiry_heap[0][0] <= now:
            _, key = heapq.heappop(self._expiry_heap)
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(now):
                del self._entries[key]
