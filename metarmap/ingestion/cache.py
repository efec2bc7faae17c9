# metarmap/ingestion/cache.py
"""
In-process cache of upstream responses with a freshness window.

Keys come from request parameters, including free-form bounding boxes,
so the cache is bounded: expired entries are swept on every `put` and
the oldest entry is evicted once `max_entries` is reached.
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

DEFAULT_MAX_ENTRIES = 512


class ResponseCache:
    """
    Thread-safe TTL cache keyed by request parameters.

    Only values explicitly `put` are cached, so callers store successful
    responses and never failures.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        # Insertion order doubles as expiry order: every entry gets the same TTL
        self._entries: "OrderedDict[Hashable, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key_for(params: Dict[str, Any]) -> Hashable:
        return tuple(sorted((k, str(v)) for k, v in params.items()))

    def get(self, params: Dict[str, Any]) -> Optional[Any]:
        key = self.key_for(params)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, params: Dict[str, Any], value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        key = self.key_for(params)
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
            self._entries[key] = (now + self.ttl_seconds, value)

    def _sweep(self, now: float) -> None:
        """Drop expired entries from the front. Caller holds the lock."""
        while self._entries:
            key, (expires_at, _) = next(iter(self._entries.items()))
            if now < expires_at:
                break
            del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
