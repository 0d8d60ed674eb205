"""Collapse concurrent calls for the same key into one."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Optional


class _Call:
    """A call that is in flight or has finished."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Any = None
        self.error: Optional[BaseException] = None

    def result(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class CallGroup:
    """Runs a function once per key among concurrent callers.

    While a call for a key is in progress, other callers for the same key
    wait for it and receive its result, or the exception it raised.
    Finished calls are forgotten, so a later call runs the function again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: dict[str, _Call] = {}

    def do(self, key: str, fn: Callable[[], Any]) -> Any:
        """Return ``fn()``, sharing one execution among concurrent callers."""
        with self._lock:
            call = self._calls.get(key)
            if call is not None:
                leader = False
            else:
                call = _Call()
                self._calls[key] = call
                leader = True

        if not leader:
            call.done.wait()
            return call.result()

        try:
            call.value = fn()
        except BaseException as exc:
            call.error = exc
        finally:
            call.done.set()
            with self._lock:
                del self._calls[key]

        return call.result()