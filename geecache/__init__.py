"""Distributed in-memory cache: LRU storage, consistent hashing, request coalescing and HTTP peers."""

__version__ = "0.1.0"