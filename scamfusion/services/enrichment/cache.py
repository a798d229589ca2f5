"""
ScamFusion Reputation Cache

Size-bounded (LRU) and age-bounded (TTL) cache for registry verdicts.
An entry older than the TTL is treated as absent even while still resident;
LRU eviction bounds memory regardless of TTL.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[K, V]):
    key: K
    value: V
    inserted_at: float


class ReputationCache(Generic[K, V]):
    """
    Thread-safe LRU cache with per-entry TTL.

    Args:
        max_entries: Maximum resident entries before least-recently-used eviction
        ttl_seconds: Age after which an entry counts as a miss
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[K, CacheEntry[K, V]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: K) -> Optional[V]:
        """Return the cached value, or None on miss or expiry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if self._clock() - entry.inserted_at >= self.ttl_seconds:
                del self._entries[key]
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and self._clock() - entry.inserted_at < self.ttl_seconds
