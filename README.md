# geecache

A small distributed in-memory cache. Each node keeps a size-bounded LRU cache
of byte values, picks the node that owns a key with a consistent-hash ring,
asks that peer over HTTP, and falls back to a loader function of your own when
no peer has the value. Concurrent misses for the same key are coalesced into a
single load. It needs nothing beyond the standard library.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Building blocks

### LRU cache

`geecache.lru.Cache(max_bytes, on_evicted)` bounds its contents by bytes: every
entry costs the UTF-8 length of its key plus `len()` of its value. A
`max_bytes` of `0` means no limit. The optional callback receives each evicted
key and value.

```python
from geecache.lru import Cache

evicted = []
cache = Cache(10, lambda key, value: evicted.append(key))
cache.add("key1", "123456")
cache.add("k2", "k2")
cache.add("k3", "k3")
cache.add("k4", "k4")

print(evicted)        # ['key1', 'k2']
print(len(cache))     # 2
print("k4" in cache)  # True
```

`get(key)` returns the value and marks the entry as most recently used, or
returns `None` on a miss; `remove_oldest()` drops the least recently used entry.

### Read-only values

`geecache.byteview.ByteView` is a frozen holder of the bytes kept in the cache.
It copies its input on construction, `byte_slice()` (and `bytes(view)`) hands
out a copy, `len()` gives the size in bytes, and `str()` decodes the value as
UTF-8.

### Thread-safe cache

`geecache.cache.ConcurrentCache(cache_bytes)` wraps an LRU `Cache` of
`ByteView` values behind a lock. `add(key, value)` stores a view; `get(key)`
returns it or `None`.

### Consistent hashing

`geecache.consistenthash.HashRing(replicas, hash_fn)` places `replicas` virtual
nodes on a ring for each real node. Pass `None` as the hash function to use
CRC-32. `get()` returns an empty string while the ring is empty.

```python
from geecache.consistenthash import HashRing

ring = HashRing(50, None)
ring.add("http://localhost:8001", "http://localhost:8002")
owner = ring.get("Tom")
```

### Request coalescing

`geecache.singleflight.CallGroup().do(key, fn)` runs `fn` once for all callers
that ask for the same key at the same time; every caller receives the same
result, or the same exception. Once a call finishes it is forgotten, so the
next call runs `fn` again.

### Peers

`geecache.peers` defines two abstract classes: `PeerPicker`, whose
`pick_peer(key)` returns the remote peer owning a key or `None` when it is
local, and `PeerGetter`, whose `get(group, key)` returns the bytes held by that
peer.

## Groups

A group is a named cache with a loader that is called on a miss. The loader is
a `Getter` subclass, a `GetterFunc` wrapping a function, or a plain callable
taking a key and returning bytes.

```python
from geecache.group import GetterFunc, new_group, get_group

db = {"Tom": "630", "Jack": "589", "Sam": "567"}

def load(key):
    if key not in db:
        raise KeyError(f"{key} not exist")
    return db[key].encode()

scores = new_group("scores", 2 << 10, GetterFunc(load))
print(str(scores.get("Tom")))               # 630, loaded through the getter
print(str(get_group("scores").get("Tom")))  # 630, served from the cache
```

`get` raises `ValueError` for an empty key and lets the loader's exception
through for a key the loader cannot find. `new_group` registers the group by
name, replacing any earlier group of that name; `get_group` returns `None` for
an unknown name.

After `register_peers(picker)` (allowed once; a second call raises
`RuntimeError`), a miss is first sent to the peer the picker chooses. If that
peer fails, the failure is logged and the value is loaded locally. Values from
peers are not stored in the local cache.

## Serving peers over HTTP

`geecache.httppool.HTTPPool(self_addr)` is a WSGI application that answers
`/_geecache/<group>/<key>` with the raw value as `application/octet-stream`. It
replies 400 for a path without both parts, 404 for an unknown group and 500
when loading fails.

It is also the `PeerPicker` a group uses to reach the other nodes: `set()` takes
the base URLs of every node, and `pick_peer()` returns an `HTTPGetter` for the
node that owns a key, or `None` when the key belongs to this node or no peers
are set.

```python
from wsgiref.simple_server import make_server
from geecache.httppool import HTTPPool

pool = HTTPPool("http://localhost:8001")
pool.set("http://localhost:8001", "http://localhost:8002", "http://localhost:8003")
scores.register_peers(pool)

make_server("localhost", 8001, pool).serve_forever()
```

`HTTPGetter(base_url).get(group, key)` fetches a value from one node and raises
`RuntimeError` when the node answers with an error status.

## Running a cluster

The `geecache` command starts one cache node of a three-node cluster on ports
8001, 8002 and 8003 of `localhost`, backed by a small built-in table of scores
(`Tom`, `Jack`, `Sam`). Any other port is rejected.

```
geecache --port 8001
geecache --port 8002
geecache --port 8003 --api
```

With `--api`, the node also serves a front end at `http://localhost:9999`:

```
curl "http://localhost:9999/api?key=Tom"
```

The same pieces are available from Python in `geecache.server`:
`create_group()`, `api_app(group)`, `start_cache_server(addr, addrs, group)`,
`start_api_server(api_addr, group)` and `main(argv)`.

## What it does not do

- Nodes talk plain HTTP and send values as raw bytes; there is no other wire
  format.
- Entries never expire and cannot be deleted one by one; they leave the cache
  only through LRU eviction.
- Nothing is written to disk.
- The `geecache` command knows only its fixed three local nodes and its
  built-in table; for other peers or data sources, build the group and
  `HTTPPool` yourself as shown above.