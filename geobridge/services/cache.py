"""
services/cache.py
──────────────────────────────────────────────────────────────────────────────
Caching decorator for provider lookups.

Policy:
  • Key   = "geocoder-" + slug(lower(urlencode(query.cache_text)))
  • Hit   → returned verbatim, the provider is never called
  • Miss  → provider called; non-empty results stored with the configured TTL
  • Empty results are NEVER stored
  • Provider exceptions propagate and nothing is stored

The store is best-effort.  Any exception raised by ``get`` / ``put`` is logged
as a warning and treated as a miss / skipped write — a broken cache must never
turn into a failed geocode.

Key derivation is a pure function (cache_key) so tests can assert exact keys
without touching a store.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, TypeVar
from urllib.parse import quote_plus

from geobridge.domain.models import Address, GeocodeQuery, ReverseQuery
from geobridge.ports.cache_port import CachePort

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "geocoder-"

_NON_SLUG_CHARS = re.compile(r"[^-a-z0-9\s]+")
_SEPARATOR_RUNS = re.compile(r"[-\s]+")

Q = TypeVar("Q", GeocodeQuery, ReverseQuery)


# ── Pure functions: key derivation ─────────────────────────────────────────

def urlencode(text: str) -> str:
    """Form-encode ``text`` (UTF-8, spaces as '+', everything else escaped).

    Matches PHP's ``urlencode``: only alphanumerics and ``-_.`` survive,
    so ``~`` is escaped as well.
    """
    return quote_plus(text, safe="").replace("~", "%7E")


def slugify(text: str, separator: str = "-") -> str:
    """Reduce ``text`` to lower-case alphanumerics joined by ``separator``.

    Characters outside ``[a-z0-9]``, whitespace and the separator are
    dropped (not replaced), then separator/whitespace runs collapse into a
    single separator and leading/trailing separators are trimmed.

    Examples:
        >>> slugify("1600+pennsylvania+ave")
        '1600pennsylvaniaave'
        >>> slugify("foo_bar  baz")
        'foo-bar-baz'
    """
    text = text.replace("_", separator).lower()
    text = _NON_SLUG_CHARS.sub("", text)
    text = _SEPARATOR_RUNS.sub(separator, text)
    return text.strip(separator)


def cache_key(query: GeocodeQuery | ReverseQuery) -> str:
    """Derive the deterministic cache key for a query.

    Examples:
        >>> cache_key(GeocodeQuery(text="Seattle, WA"))
        'geocoder-seattle2cwa'
    """
    return CACHE_NAMESPACE + slugify(urlencode(query.cache_text).lower())


# ── Decorator ──────────────────────────────────────────────────────────────

class QueryCache:
    """Wraps a provider lookup with a get-or-compute-and-store cache policy.

    Args:
        store: Any object satisfying CachePort.
        ttl:   Entry lifetime in seconds.
    """

    def __init__(self, store: CachePort, ttl: int) -> None:
        self._store = store
        self._ttl = ttl

    @property
    def store(self) -> CachePort:
        return self._store

    @property
    def ttl(self) -> int:
        return self._ttl

    def fetch(
        self,
        query: Q,
        resolver: Callable[[Q], list[Address]],
    ) -> list[Address]:
        """Return cached results for ``query`` or compute them via ``resolver``.

        Args:
            query:    Frozen GeocodeQuery or ReverseQuery.
            resolver: The selected provider's lookup for this query type.

        Returns:
            The cached or freshly computed result set.
        """
        key = cache_key(query)

        cached = self._read(key)
        if cached is not None:
            logger.debug("Cache hit | key=%s results=%d", key, len(cached))
            return cached

        results = resolver(query)

        if results:
            self._write(key, results)
        else:
            logger.debug("Empty result set not cached | key=%s", key)
        return results

    # ── Private helpers ────────────────────────────────────────────────────

    def _read(self, key: str) -> list[Address] | None:
        try:
            return self._store.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s, treating as miss: %s", key, exc)
            return None

    def _write(self, key: str, results: list[Address]) -> None:
        try:
            self._store.put(key, results, self._ttl)
            logger.debug("Cached %d results | key=%s ttl=%d", len(results), key, self._ttl)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
