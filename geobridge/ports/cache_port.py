"""
ports/cache_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the geocode result cache store.

The store only has to be a key → value box with TTL support.  All caching
*policy* (key derivation, what is worth storing) lives in services/cache.py.

Implementations: InMemoryCacheStore (default), RedisCacheStore.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from geobridge.domain.models import Address


@runtime_checkable
class CachePort(Protocol):
    """Contract for a key/value store with per-entry TTL."""

    def has(self, key: str) -> bool:
        """Return True if a non-expired entry exists under ``key``."""
        ...

    def get(self, key: str) -> list[Address] | None:
        """Return the stored result set, or None on miss / expiry.

        Raises:
            CacheError: On store I/O failure.
        """
        ...

    def put(self, key: str, value: list[Address], ttl: int) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds.

        Raises:
            CacheError: On store I/O failure.
        """
        ...
