"""
adapters/memory_cache.py
──────────────────────────────────────────────────────────────────────────────
Implements CachePort with a process-local dict.

Default store (GEOCODER_CACHE_STORE=memory).  Each worker process has its own
cache; use RedisCacheStore to share results across processes.
"""
from __future__ import annotations

import threading
import time
from typing import Callable

from geobridge.domain.models import Address


class InMemoryCacheStore:
    """Dict-backed store with per-entry expiry.

    Args:
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[float, list[Address]]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> list[Address] | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return [address.model_copy(deep=True) for address in value]

    def put(self, key: str, value: list[Address], ttl: int) -> None:
        with self._lock:
            self._entries[key] = (
                self._clock() + ttl,
                [address.model_copy(deep=True) for address in value],
            )

    def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
