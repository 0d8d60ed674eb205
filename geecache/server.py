"""Command-line entry point: run a cache node and optionally an API front end."""

from __future__ import annotations

import argparse
import logging
import threading
from collections.abc import Callable, Iterable
from socketserver import ThreadingMixIn
from typing import Any
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from geecache.group import Group, new_group
from geecache.httppool import HTTPPool, _http_error, _octet_stream

logger = logging.getLogger(__name__)

DB = {
    "Tom": "630",
    "Jack": "589",
    "Sam": "567",
}

API_ADDR = "http://localhost:9999"
ADDR_MAP = {
    8001: "http://localhost:8001",
    8002: "http://localhost:8002",
    8003: "http://localhost:8003",
}

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _LoggingHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(format, *args)


def _serve(app: WSGIApp, hostport: str) -> None:
    """Serve ``app`` on ``host:port`` until the process ends."""
    host, _, port = hostport.rpartition(":")
    with make_server(
        host,
        int(port),
        app,
        server_class=_ThreadingWSGIServer,
        handler_class=_LoggingHandler,
    ) as httpd:
        httpd.serve_forever()


def _slow_db(key: str) -> bytes:
    logger.info("[SlowDB] search key %s", key)
    if key in DB:
        return DB[key].encode("utf-8")
    raise LookupError(f"{key} not exist")


def create_group() -> Group:
    """Create the ``scores`` group backed by the sample database."""
    return new_group("scores", 2 << 10, _slow_db)


def api_app(group: Group) -> WSGIApp:
    """Return a WSGI app answering ``/api?key=<key>`` from ``group``."""

    def app(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        if environ.get("PATH_INFO", "") != "/api":
            return _http_error(start_response, "404 Not Found", "404 page not found")
        query = parse_qs(environ.get("QUERY_STRING", ""))
        key = query.get("key", [""])[0]
        try:
            view = group.get(key)
        except Exception as exc:
            return _http_error(start_response, "500 Internal Server Error", str(exc))
        return _octet_stream(start_response, view.byte_slice())

    return app


def start_cache_server(addr: str, addrs: list[str], group: Group) -> None:
    """Serve ``group`` to peers at ``addr``, knowing all nodes in ``addrs``."""
    peers = HTTPPool(addr)
    peers.set(*addrs)
    group.register_peers(peers)
    logger.info("geecache is running at %s", addr)
    _serve(peers, addr[len("http://") :])


def start_api_server(api_addr: str, group: Group) -> None:
    """Serve the user-facing API for ``group`` at ``api_addr``."""
    logger.info("frontend server is running at %s", api_addr)
    _serve(api_app(group), api_addr[len("http://") :])


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="geecache", description="Run a cache node.")
    parser.add_argument(
        "-port", "--port", type=int, default=8001, help="Geecache server port"
    )
    parser.add_argument(
        "-api", "--api", action="store_true", help="Start a api server?"
    )
    args = parser.parse_args(argv)
    if args.port not in ADDR_MAP:
        choices = ", ".join(str(port) for port in ADDR_MAP)
        parser.error(f"unknown port {args.port}; choose one of {choices}")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    group = create_group()
    if args.api:
        threading.Thread(
            target=start_api_server, args=(API_ADDR, group), daemon=True
        ).start()
    start_cache_server(ADDR_MAP[args.port], list(ADDR_MAP.values()), group)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())