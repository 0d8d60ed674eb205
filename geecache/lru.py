"""A byte-bounded least-recently-used cache."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable, Sized
from typing import Optional

EvictionCallback = Callable[[str, Sized], None]


class Cache:
    """LRU cache whose size is the sum of key and value lengths in bytes.

    A ``max_bytes`` of 0 means the cache is unbounded. Values may be any
    object supporting ``len()``. When entries are evicted, ``on_evicted``
    (if given) is called with the key and the value.
    """

    def __init__(
        self, max_bytes: int = 0, on_evicted: Optional[EvictionCallback] = None
    ) -> None:
        self.max_bytes = max_bytes
        self.on_evicted = on_evicted
        self._nbytes = 0
        # Oldest entries sit at the front, most recently used at the end.
        self._entries: OrderedDict[str, Sized] = OrderedDict()

    @staticmethod
    def _key_size(key: str) -> int:
        return len(key.encode("utf-8"))

    def get(self, key: str) -> Optional[Sized]:
        """Return the value for ``key`` and mark it as recently used, or None."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def remove_oldest(self) -> None:
        """Evict the least recently used entry, if there is one."""
        if not self._entries:
            return
        key, value = self._entries.popitem(last=False)
        self._nbytes -= self._key_size(key) + len(value)
        if self.on_evicted is not None:
            self.on_evicted(key, value)

    def add(self, key: str, value: Sized) -> None:
        """Insert or update ``key``, then evict until within ``max_bytes``."""
        if key in self._entries:
            self._entries.move_to_end(key)
            self._nbytes += len(value) - len(self._entries[key])
            self._entries[key] = value
        else:
            self._entries[key] = value
            self._nbytes += self._key_size(key) + len(value)

        while self.max_bytes != 0 and self._nbytes > self.max_bytes:
            self.remove_oldest()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries