"""Consistent hashing with virtual nodes."""

from __future__ import annotations

import bisect
import zlib
from collections.abc import Callable
from typing import Optional

HashFunc = Callable[[bytes], int]


class HashRing:
    """A hash ring mapping keys to nodes through virtual replicas.

    Each node added is placed on the ring ``replicas`` times, at the hashes
    of ``"<i><node>"`` for ``i`` in ``range(replicas)``. A key belongs to the
    first virtual node whose hash is at or after the key's hash, wrapping
    around to the start of the ring. The default hash is CRC-32 (IEEE).
    """

    def __init__(self, replicas: int, hash_fn: Optional[HashFunc] = None) -> None:
        self.replicas = replicas
        self._hash: HashFunc = hash_fn if hash_fn is not None else zlib.crc32
        self._ring: list[int] = []
        self._owners: dict[int, str] = {}

    def add(self, *nodes: str) -> None:
        """Place each of ``nodes`` on the ring with its virtual replicas."""
        for node in nodes:
            for i in range(self.replicas):
                point = self._hash(f"{i}{node}".encode("utf-8"))
                self._ring.append(point)
                self._owners[point] = node
        self._ring.sort()

    def get(self, key: str) -> str:
        """Return the node owning ``key``, or an empty string if the ring is empty."""
        if not self._ring:
            return ""
        point = self._hash(key.encode("utf-8"))
        idx = bisect.bisect_left(self._ring, point)
        return self._owners[self._ring[idx % len(self._ring)]]