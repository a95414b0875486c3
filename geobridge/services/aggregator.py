"""
services/aggregator.py
──────────────────────────────────────────────────────────────────────────────
The single entry point for all callers (CLI, web handlers, scripts).

    geocoder = get_geocoder()
    results = geocoder.using("google_maps").limit(3).geocode("Wien").get()
    features = geocoder.geocode("Wien").dump("geojson")

Builder semantics:
  using() and limit() never mutate the aggregator they are called on — each
  returns a new aggregator sharing the same registry, cache and dumpers.  A
  shared process-wide instance can therefore be handed to concurrent callers
  without one caller's provider choice leaking into another's request.

  geocode() / reverse() / geocode_query() / reverse_query() stage a
  GeocodeRequest; nothing is executed until get(), all() or dump().

Failure semantics:
  ProviderNotFound / InvalidDumper are raised before any lookup.  Provider
  errors propagate unmodified — no retries, no suppression.  Only the cache
  layer degrades silently (see services/cache.py).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from geobridge.domain.models import (
    Address,
    GeocodeQuery,
    ProviderDescriptor,
    ReverseQuery,
)
from geobridge.ports.provider_port import ProviderPort
from geobridge.services.cache import QueryCache
from geobridge.services.dumpers import DumperRegistry
from geobridge.services.registry import ProviderRegistry

logger = logging.getLogger(__name__)

AGGREGATOR_NAME = "provider_aggregator"


# ── Staged request ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GeocodeRequest:
    """A query bound to a provider and limit, ready to execute.

    Each call to get() re-executes the lookup; only the cache layer
    remembers results between calls.
    """

    query: GeocodeQuery | ReverseQuery
    provider: ProviderPort
    limit: int | None
    cache: QueryCache
    dumpers: DumperRegistry

    def get(self) -> list[Address]:
        """Execute the query (cache-aware) and apply the result limit."""
        logger.info(
            "lookup | provider=%s query=%r limit=%s",
            self.provider.name,
            self.query.cache_text[:80],
            self.limit,
        )
        if isinstance(self.query, ReverseQuery):
            results = self.cache.fetch(self.query, self.provider.reverse_query)
        else:
            results = self.cache.fetch(self.query, self.provider.geocode_query)

        if self.limit is not None:
            return list(results[: self.limit])
        return list(results)

    def all(self) -> list[Address]:
        """Alias of get(): the full (already limited) result sequence."""
        return self.get()

    def dump(self, fmt: str) -> list[str]:
        """Execute the query and serialise every result with ``fmt``.

        Raises:
            InvalidDumper: If ``fmt`` is unknown (checked before the lookup).
        """
        self.dumpers.resolve(fmt)
        return self.dumpers.dump(fmt, self.get())


# ── Aggregator ─────────────────────────────────────────────────────────────

class ProviderAndDumperAggregator:
    """Routes queries to the selected provider through the result cache.

    Build via services/container.py — do not instantiate directly in
    application code.

    Args:
        registry:      Configured ProviderRegistry.
        cache:         QueryCache wrapping the configured store.
        dumpers:       DumperRegistry of available output formats.
        provider_name: Selected provider; empty means the registry default.
        limit:         Max results per lookup; None means unbounded.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: QueryCache,
        dumpers: DumperRegistry,
        provider_name: str = "",
        limit: int | None = None,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._dumpers = dumpers
        self._provider_name = provider_name
        self._limit = _validate_limit(limit) if limit is not None else None

    # ── Builder ────────────────────────────────────────────────────────────

    def using(self, name: str) -> "ProviderAndDumperAggregator":
        """Return an aggregator that dispatches to provider ``name``.

        Raises:
            ProviderNotFound: If ``name`` is not registered.
        """
        self._registry.resolve(name)
        return self._replace(provider_name=name)

    def limit(self, limit: int) -> "ProviderAndDumperAggregator":
        """Return an aggregator capping every result set at ``limit``.

        Raises:
            ValueError: If ``limit`` is not a positive integer.
        """
        return self._replace(limit=_validate_limit(limit))

    def get_limit(self) -> int | None:
        return self._limit

    # ── Staging ────────────────────────────────────────────────────────────

    def geocode(self, text: str) -> GeocodeRequest:
        return self.geocode_query(GeocodeQuery(text=text))

    def reverse(self, latitude: float, longitude: float) -> GeocodeRequest:
        return self.reverse_query(ReverseQuery.from_coordinates(latitude, longitude))

    def geocode_query(self, query: GeocodeQuery) -> GeocodeRequest:
        return self._stage(query)

    def reverse_query(self, query: ReverseQuery) -> GeocodeRequest:
        return self._stage(query)

    # ── Dumping ────────────────────────────────────────────────────────────

    def dump(self, fmt: str, results: list[Address]) -> list[str]:
        """Serialise an already-fetched result set.

        Raises:
            InvalidDumper: If ``fmt`` is unknown.
        """
        return self._dumpers.dump(fmt, results)

    # ── Registration & introspection ──────────────────────────────────────

    def register_provider(
        self,
        provider: ProviderPort,
        arguments: Iterable[Any] = (),
    ) -> "ProviderAndDumperAggregator":
        """Register a ready-built provider under its own name.

        The registry is shared, so the provider becomes visible to every
        aggregator derived from the same container.
        """
        logger.info("Registering provider %s", provider.name)
        self._registry.register(provider.name, provider, arguments)
        return self

    def register_providers(
        self,
        providers: Iterable[ProviderPort],
    ) -> "ProviderAndDumperAggregator":
        for provider in providers:
            self.register_provider(provider)
        return self

    def get_name(self) -> str:
        return AGGREGATOR_NAME

    def get_provider(self) -> ProviderPort:
        """Return the currently selected provider (registry default if none).

        Raises:
            ProviderNotFound: If the selection is no longer registered.
        """
        if self._provider_name:
            return self._registry.resolve(self._provider_name)
        return self._registry.default()

    def get_providers(self) -> dict[str, ProviderDescriptor]:
        return self._registry.list()

    @property
    def cache(self) -> QueryCache:
        return self._cache

    @property
    def dumpers(self) -> DumperRegistry:
        return self._dumpers

    # ── Private helpers ────────────────────────────────────────────────────

    def _stage(self, query: GeocodeQuery | ReverseQuery) -> GeocodeRequest:
        return GeocodeRequest(
            query=query,
            provider=self.get_provider(),
            limit=self._limit,
            cache=self._cache,
            dumpers=self._dumpers,
        )

    def _replace(self, **changes: Any) -> "ProviderAndDumperAggregator":
        params = {
            "registry": self._registry,
            "cache": self._cache,
            "dumpers": self._dumpers,
            "provider_name": self._provider_name,
            "limit": self._limit,
        }
        params.update(changes)
        return ProviderAndDumperAggregator(**params)


def _validate_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit
