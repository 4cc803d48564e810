"""In-Process TTL Cache

Per-collection memoization of full-table reads. Each store owns its own
instance; entries are process-local and never shared across instances.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

V = TypeVar("V")


@dataclass
class CacheStats:
    hits: int
    misses: int
    size: int


class TTLCache(Generic[V]):
    """
    Key/value cache with per-entry TTL and a size bound

    Expired entries are dropped when touched; once ``max_size`` is reached
    the oldest inserted entry is evicted.
    """

    def __init__(
        self,
        default_ttl: float = 300.0,
        max_size: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[Any, float]]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self._misses += 1
            return None
        self._hits += 1
        return value

    def set(self, key: str, value: V, ttl: Optional[float] = None) -> None:
        if key in self._entries:
            del self._entries[key]
        while len(self._entries) >= self.max_size:
            self._entries.popitem(last=False)
        expires_at = self._clock() + (self.default_ttl if ttl is None else ttl)
        self._entries[key] = (value, expires_at)

    def has(self, key: str) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        if self._clock() >= entry[1]:
            del self._entries[key]
            return False
        return True

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> None:
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Drop all expired entries and return how many were removed"""
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    @property
    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))
