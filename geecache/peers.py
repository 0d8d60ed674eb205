"""Interfaces for locating and querying peer nodes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class PeerGetter(ABC):
    """A client able to fetch a value from a remote peer."""

    @abstractmethod
    def get(self, group: str, key: str) -> bytes:
        """Return the value for ``key`` in ``group``; raise on failure."""


class PeerPicker(ABC):
    """Chooses the peer that owns a key."""

    @abstractmethod
    def pick_peer(self, key: str) -> Optional[PeerGetter]:
        """Return the remote peer owning ``key``, or None if it is local."""