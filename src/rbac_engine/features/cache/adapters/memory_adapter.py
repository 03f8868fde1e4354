"""In-process cache backend."""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ....core.clock import Clock, monotonic_clock


logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with its expiry on the backend clock."""
    value: bytes
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class MemoryCacheBackend:
    """Dictionary cache guarded by a lock, with lazy expiry on read.

    Args:
        clock: Monotonic time source in seconds, replaceable in tests
        max_entries: Optional bound; the oldest entries are evicted first
    """

    def __init__(self, clock: Clock = monotonic_clock, max_entries: Optional[int] = None):
        self._clock = clock
        self._max_entries = max_entries
        self._store: "OrderedDict[str, MemoryCacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._evictions = 0

    async def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._store[key]
                return None
            return entry.value

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        now = self._clock()
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = MemoryCacheEntry(
                value=value, created_at=now, expires_at=now + ttl_seconds
            )
            if self._max_entries is not None:
                while len(self._store) > self._max_entries:
                    evicted, _ = self._store.popitem(last=False)
                    self._evictions += 1
                    logger.debug(f"Evicted cache entry {evicted}")

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    async def delete_many(self, keys: Iterable[str]) -> int:
        deleted = 0
        with self._lock:
            for key in keys:
                if self._store.pop(key, None) is not None:
                    deleted += 1
        return deleted

    async def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry; return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._store.items() if e.is_expired(now)]
            for key in expired:
                del self._store[key]
        return len(expired)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"entries": len(self._store), "evictions": self._evictions}
