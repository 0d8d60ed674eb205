"""An immutable view over cached bytes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ByteView:
    """Read-only holder of a cached value.

    The bytes are copied on construction, so later changes to a mutable
    source (such as a ``bytearray``) do not reach the cache.
    """

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def byte_slice(self) -> bytes:
        """Return a copy of the underlying bytes."""
        return bytes(self.data)

    def __bytes__(self) -> bytes:
        return self.byte_slice()

    def __str__(self) -> str:
        return self.data.decode("utf-8", errors="replace")