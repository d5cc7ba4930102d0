# club_dashboard/cache.py
"""
Simple in-memory TTL cache for upstream payloads.

Only used when the freshness policy is "ttl". This is a per-process cache: with
several gunicorn workers, each worker holds its own copy.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cached payload and the monotonic time it was stored."""
    ts: float
    value: Optional[T]


class TTLCache:
    """A small key/value TTL cache with lazy loading."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str, ttl_seconds: int) -> Optional[T]:
        """Return a fresh cached value, or None when missing/expired."""
        with self._lock:
            entry = self._store.get(key)
        if entry is None or entry.value is None:
            return None
        if (self._clock() - entry.ts) >= ttl_seconds:
            return None
        return entry.value

    def get_or_set(self, key: str, ttl_seconds: int, loader: Callable[[], T]) -> T:
        """
        Retrieve a cached value if not expired, otherwise load & store a new value.

        The loader runs outside the lock. If it raises, nothing is stored and the
        exception propagates, so failures are never cached.
        """
        cached = self.get(key, ttl_seconds)
        if cached is not None:
            return cached

        value = loader()
        with self._lock:
            self._store[key] = CacheEntry(ts=self._clock(), value=value)
        return value

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._store.clear()
