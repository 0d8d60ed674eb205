"""HTTP transport between cache nodes: a WSGI server side and a client side."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any, Optional
from urllib.error import HTTPError
from urllib.parse import quote
from urllib.request import urlopen

from geecache.consistenthash import HashRing
from geecache.group import get_group
from geecache.peers import PeerGetter, PeerPicker

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = "/_geecache"
DEFAULT_REPLICAS = 50

StartResponse = Callable[..., Any]


def _http_error(
    start_response: StartResponse, status: str, message: str
) -> list[bytes]:
    """Send a plain-text error response and return its body."""
    body = (message + "\n").encode("utf-8")
    start_response(
        status,
        [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
            ("Content-Length", str(len(body))),
        ],
    )
    return [body]


def _octet_stream(start_response: StartResponse, body: bytes) -> list[bytes]:
    start_response(
        "200 OK",
        [
            ("Content-Type", "application/octet-stream"),
            ("Content-Length", str(len(body))),
        ],
    )
    return [body]


def _request_path(environ: dict) -> str:
    """Return the decoded request path as text."""
    raw = environ.get("PATH_INFO", "")
    try:
        return raw.encode("latin-1").decode("utf-8", errors="replace")
    except UnicodeEncodeError:
        return raw


class HTTPGetter(PeerGetter):
    """Fetches values from one remote node over HTTP."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url

    def get(self, group: str, key: str) -> bytes:
        """Return the value of ``key`` in ``group`` held by the remote node."""
        url = f"{self.base_url}/{quote(group, safe='')}/{quote(key, safe='')}"
        try:
            with urlopen(url) as response:
                if response.status != 200:
                    raise RuntimeError(
                        f"server returned: {response.status} {response.reason}"
                    )
                try:
                    return response.read()
                except OSError as exc:
                    raise RuntimeError(f"reading response body: {exc}") from exc
        except HTTPError as exc:
            raise RuntimeError(f"server returned: {exc.code} {exc.reason}") from exc


class HTTPPool(PeerPicker):
    """A pool of HTTP peers; also the WSGI application that serves this node.

    Requests take the form ``<base path>/<group name>/<key>``.
    """

    def __init__(self, self_addr: str) -> None:
        self.self_addr = self_addr
        self.base_path = DEFAULT_BASE_PATH
        self._lock = threading.Lock()
        self._ring: Optional[HashRing] = None
        self._getters: dict[str, HTTPGetter] = {}

    def log(self, message: str) -> None:
        """Log ``message`` tagged with this node's address."""
        logger.info("[Server %s] %s", self.self_addr, message)

    def __call__(
        self, environ: dict, start_response: StartResponse
    ) -> Iterable[bytes]:
        path = _request_path(environ)
        if not path.startswith(self.base_path):
            raise RuntimeError("HTTPPool serving unexpected path: " + path)
        self.log(f"{environ.get('REQUEST_METHOD', 'GET')} {path}")

        parts = path[len(self.base_path) + 1 :].split("/", 1)
        if len(parts) != 2:
            return _http_error(start_response, "400 Bad Request", "bad request")

        group_name, key = parts
        logger.info("groupName: %s, key: %s", group_name, key)
        group = get_group(group_name)
        if group is None:
            return _http_error(
                start_response, "404 Not Found", "no such group: " + group_name
            )

        try:
            view = group.get(key)
        except Exception as exc:
            return _http_error(start_response, "500 Internal Server Error", str(exc))

        return _octet_stream(start_response, view.byte_slice())

    def set(self, *peers: str) -> None:
        """Replace the set of known peers, given by their base URLs."""
        with self._lock:
            ring = HashRing(DEFAULT_REPLICAS)
            ring.add(*peers)
            self._ring = ring
            self._getters = {
                peer: HTTPGetter(peer + self.base_path) for peer in peers
            }

    def pick_peer(self, key: str) -> Optional[HTTPGetter]:
        """Return the getter of the remote peer owning ``key``, or None if local."""
        with self._lock:
            if self._ring is None:
                return None
            peer = self._ring.get(key)
            if peer and peer != self.self_addr:
                self.log(f"Pick peer {peer}")
                return self._getters[peer]
            return None