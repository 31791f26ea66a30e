"""Per-wallet report cache with a time-to-live."""

from __future__ import annotations

import time
from typing import Generic, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Small dict-backed cache; entries expire after *ttl_seconds*.

    Not thread-safe. When full, the oldest insertion is evicted first.
    """

    def __init__(self, ttl_seconds: float = 60.0, max_entries: int = 256) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._store: dict[str, tuple[float, V]] = {}

    def get(self, key: str) -> V | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if time.monotonic() - stored_at > self._ttl:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: V) -> None:
        self._store.pop(key, None)
        while len(self._store) >= self._max_entries:
            del self._store[next(iter(self._store))]
        self._store[key] = (time.monotonic(), value)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
