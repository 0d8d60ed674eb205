"""Named cache groups that load missing values from peers or a data source."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Optional, Union

from geecache.byteview import ByteView
from geecache.cache import ConcurrentCache
from geecache.peers import PeerGetter, PeerPicker
from geecache.singleflight import CallGroup

logger = logging.getLogger(__name__)


class Getter(ABC):
    """Loads the value for a key from the underlying data source."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the bytes for ``key``; raise if the key cannot be loaded."""


class GetterFunc(Getter):
    """Adapts a plain function to the :class:`Getter` interface."""

    def __init__(self, fn: Callable[[str], bytes]) -> None:
        self.fn = fn

    def get(self, key: str) -> bytes:
        return self.fn(key)


GetterLike = Union[Getter, Callable[[str], bytes]]


class Group:
    """A cache namespace with its own data source and size limit."""

    def __init__(self, name: str, cache_bytes: int, getter: GetterLike) -> None:
        if getter is None:
            raise ValueError("nil Getter")
        if not isinstance(getter, Getter):
            if not callable(getter):
                raise TypeError("getter must be a Getter or a callable")
            getter = GetterFunc(getter)
        self.name = name
        self.getter: Getter = getter
        self._main_cache = ConcurrentCache(cache_bytes)
        self._peers: Optional[PeerPicker] = None
        self._loader = CallGroup()

    def register_peers(self, peers: PeerPicker) -> None:
        """Attach the picker used to find remote owners of keys."""
        if self._peers is not None:
            raise RuntimeError("RegisterPeerPicker called more than once!")
        self._peers = peers

    def get(self, key: str) -> ByteView:
        """Return the value for ``key`` from cache, a peer, or the data source."""
        if not key:
            raise ValueError("key is required")
        cached = self._main_cache.get(key)
        if cached is not None:
            logger.info("[GeeCache] hit")
            return cached
        logger.info("[GeeCache] not hit, go to Getter")
        return self._load(key)

    def _load(self, key: str) -> ByteView:
        return self._loader.do(key, lambda: self._fetch(key))

    def _fetch(self, key: str) -> ByteView:
        if self._peers is not None:
            peer = self._peers.pick_peer(key)
            if peer is not None:
                try:
                    return self._get_from_peer(peer, key)
                except Exception as exc:
                    logger.warning("[GeeCache] Failed to get from peer %s", exc)
        return self._get_locally(key)

    def _get_from_peer(self, peer: PeerGetter, key: str) -> ByteView:
        return ByteView(peer.get(self.name, key))

    def _get_locally(self, key: str) -> ByteView:
        value = ByteView(self.getter.get(key))
        self._main_cache.add(key, value)
        return value


_registry_lock = threading.Lock()
_groups: dict[str, Group] = {}


def new_group(name: str, cache_bytes: int, getter: GetterLike) -> Group:
    """Create a group and register it under ``name``, replacing any previous one."""
    group = Group(name, cache_bytes, getter)
    with _registry_lock:
        _groups[name] = group
    return group


def get_group(name: str) -> Optional[Group]:
    """Return the group registered under ``name``, or None."""
    with _registry_lock:
        return _groups.get(name)