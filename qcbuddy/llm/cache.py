"""TTL + size bounded response cache for generation calls."""

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional


class ResponseCache:
    """
    Insertion-ordered cache with a time-to-live.

    Expired entries are dropped on read. When the cache is full the oldest
    insertion is evicted.
    """

    def __init__(
        self,
        ttl_sec: float = 600.0,
        max_entries: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_sec = ttl_sec
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, tuple[float, str]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at > self.ttl_sec:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str) -> None:
        if self.max_entries <= 0 or self.ttl_sec <= 0:
            return
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (self._clock(), value)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
