"""A thread-safe LRU cache of byte views."""

from __future__ import annotations

import threading
from typing import Optional

from geecache.byteview import ByteView
from geecache.lru import Cache


class ConcurrentCache:
    """An LRU cache guarded by a lock, created on first insertion."""

    def __init__(self, cache_bytes: int = 0) -> None:
        self.cache_bytes = cache_bytes
        self._lock = threading.Lock()
        self._lru: Optional[Cache] = None

    def add(self, key: str, value: ByteView) -> None:
        """Store ``value`` under ``key``."""
        with self._lock:
            if self._lru is None:
                self._lru = Cache(self.cache_bytes, None)
            self._lru.add(key, value)

    def get(self, key: str) -> Optional[ByteView]:
        """Return the view stored under ``key``, or None."""
        with self._lock:
            if self._lru is None:
                return None
            value = self._lru.get(key)
            if isinstance(value, ByteView):
                return value
            return None