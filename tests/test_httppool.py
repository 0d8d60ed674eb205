import threading
from wsgiref.simple_server import WSGIRequestHandler, make_server
from wsgiref.util import setup_testing_defaults

import pytest

from geecache.group import new_group
from geecache.httppool import DEFAULT_BASE_PATH, HTTPGetter, HTTPPool

DB = {"Tom": "630", "Jack": "589", "Sam": "567"}


def db_getter(key):
    if key in DB:
        return DB[key].encode()
    raise LookupError(f"{key} not exist")


def call_app(app, path):
    environ = {}
    setup_testing_defaults(environ)
    environ["PATH_INFO"] = path
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        pass


@pytest.fixture
def served_pool():
    pool = HTTPPool("http://127.0.0.1")
    httpd = make_server("127.0.0.1", 0, pool, handler_class=_QuietHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{httpd.server_port}"
    finally:
        httpd.shutdown()
        httpd.server_close()


def test_serves_value_of_group():
    new_group("pool-serve", 2 << 10, db_getter)
    status, headers, body = call_app(HTTPPool("http://a"), "/_geecache/pool-serve/Tom")
    assert status.startswith("200")
    assert headers["Content-Type"] == "application/octet-stream"
    assert body == b"630"


def test_unknown_group_is_not_found():
    status, _, body = call_app(HTTPPool("http://a"), "/_geecache/no-such-group/Tom")
    assert status.startswith("404")
    assert body == b"no such group: no-such-group\n"


def test_missing_key_part_is_bad_request():
    status, _, body = call_app(HTTPPool("http://a"), "/_geecache/onlygroup")
    assert status.startswith("400")
    assert body == b"bad request\n"


def test_getter_error_is_internal_error():
    new_group("pool-error", 2 << 10, db_getter)
    status, _, body = call_app(HTTPPool("http://a"), "/_geecache/pool-error/unknown")
    assert status.startswith("500")
    assert body == b"unknown not exist\n"


def test_unexpected_path_raises():
    with pytest.raises(RuntimeError, match="unexpected path: /elsewhere"):
        call_app(HTTPPool("http://a"), "/elsewhere")


def test_pick_peer_without_peers_is_local():
    assert HTTPPool("http://a").pick_peer("Tom") is None


def test_pick_peer_never_returns_self():
    pool = HTTPPool("http://a")
    pool.set("http://a")
    assert all(pool.pick_peer(f"key{i}") is None for i in range(50))


def test_pick_peer_returns_remote_getter():
    pool = HTTPPool("http://a")
    pool.set("http://b")
    getter = pool.pick_peer("Tom")
    assert isinstance(getter, HTTPGetter)
    assert getter.base_url == "http://b" + DEFAULT_BASE_PATH


def test_pick_peer_splits_keys_between_self_and_remote():
    pool = HTTPPool("http://a")
    pool.set("http://a", "http://b")
    picks = [pool.pick_peer(f"key{i}") for i in range(200)]
    remote = [p for p in picks if p is not None]
    assert remote
    assert len(remote) < len(picks)
    assert {p.base_url for p in remote} == {"http://b" + DEFAULT_BASE_PATH}


def test_http_getter_round_trip(served_pool):
    new_group("pool-remote", 2 << 10, db_getter)
    getter = HTTPGetter(served_pool + DEFAULT_BASE_PATH)
    assert getter.get("pool-remote", "Jack") == b"589"


def test_http_getter_key_with_space(served_pool):
    new_group("pool-echo", 2 << 10, lambda key: key.encode())
    getter = HTTPGetter(served_pool + DEFAULT_BASE_PATH)
    assert getter.get("pool-echo", "a b/c") == b"a b/c"


def test_http_getter_reports_status(served_pool):
    getter = HTTPGetter(served_pool + DEFAULT_BASE_PATH)
    with pytest.raises(RuntimeError, match="server returned: 404"):
        getter.get("pool-absent", "Tom")


def test_group_falls_back_to_local_when_peer_unreachable():
    group = new_group("pool-fallback", 2 << 10, db_getter)
    pool = HTTPPool("http://a")
    pool.set("http://127.0.0.1:1")
    group.register_peers(pool)
    assert str(group.get("Sam")) == "567"