"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Dependency Injection container.

THIS IS THE ONLY FILE THAT NAMES CONCRETE ADAPTER CLASSES.

Provider wiring is driven entirely by environment variables — no code
changes are needed to add, remove or reorder backends:

  GEOCODER_PROVIDERS=chain,google_maps,bing_maps
      → registered in that order; the first is the default unless
        GEOCODER_DEFAULT_PROVIDER names another
  GEOCODER_CHAIN=google_maps,geo_plugin
      → members of the "chain" provider, tried in that order

  GEOCODER_CACHE_STORE=memory  (default) → InMemoryCacheStore
  GEOCODER_CACHE_STORE=redis             → RedisCacheStore(REDIS_URL)

Lifecycle:
  @lru_cache(maxsize=1) makes get_geocoder() return the same aggregator
  for the whole process.  Call get_geocoder.cache_clear() after changing
  configuration (or between tests) to build a fresh registry on next use.
  Concurrent callers may share the instance: using()/limit() never mutate it.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from geobridge.adapters.dumpers import default_dumpers
from geobridge.adapters.transport import mask_key
from geobridge.config.settings import Settings, get_settings
from geobridge.domain.exceptions import ConfigurationError
from geobridge.ports.cache_port import CachePort
from geobridge.ports.provider_port import ProviderPort
from geobridge.services.aggregator import ProviderAndDumperAggregator
from geobridge.services.cache import QueryCache
from geobridge.services.dumpers import DumperRegistry
from geobridge.services.registry import ProviderRegistry

logger = logging.getLogger(__name__)

_VALID_PROVIDERS = (
    "chain",
    "google_maps",
    "bing_maps",
    "nominatim",
    "geo_plugin",
    "gazetteer",
)


def _build_provider(
    name: str,
    settings: Settings,
) -> tuple[ProviderPort, tuple[Any, ...]]:
    """Instantiate one provider by name.

    Returns:
        (provider, constructor arguments) — arguments are kept on the
        registry descriptor for introspection, with credentials masked.
    """
    if name == "google_maps":
        from geobridge.adapters.google_maps import GoogleMapsAdapter
        args = (
            settings.google_maps_locale,
            settings.google_maps_region,
            mask_key(settings.google_maps_api_key),
        )
        return GoogleMapsAdapter(settings), args
    if name == "bing_maps":
        from geobridge.adapters.bing_maps import BingMapsAdapter
        args = (settings.bing_maps_locale, mask_key(settings.bing_maps_api_key))
        return BingMapsAdapter(settings), args
    if name == "nominatim":
        from geobridge.adapters.nominatim import NominatimAdapter
        return NominatimAdapter(settings), (settings.nominatim_root_url,)
    if name == "geo_plugin":
        from geobridge.adapters.geo_plugin import GeoPluginAdapter
        return GeoPluginAdapter(settings), ()
    if name == "gazetteer":
        from geobridge.adapters.gazetteer import GazetteerAdapter
        if not settings.gazetteer_path:
            raise ConfigurationError(
                "GAZETTEER_PATH must be set to register the gazetteer provider."
            )
        return GazetteerAdapter(settings.gazetteer_path), (settings.gazetteer_path,)
    if name == "chain":
        from geobridge.adapters.chain import ChainProvider
        if "chain" in settings.chain_providers:
            raise ConfigurationError("GEOCODER_CHAIN must not contain 'chain'.")
        members = [_build_provider(m, settings)[0] for m in settings.chain_providers]
        return ChainProvider(members), tuple(settings.chain_providers)
    raise ConfigurationError(
        f"Unknown geocoding provider '{name}'. "
        f"Valid values: {', '.join(repr(p) for p in _VALID_PROVIDERS)}."
    )


def _build_cache_store(settings: Settings) -> CachePort:
    """Instantiate the correct CachePort adapter based on GEOCODER_CACHE_STORE."""
    store = settings.cache_store.lower()
    if store == "memory":
        from geobridge.adapters.memory_cache import InMemoryCacheStore
        logger.info("Cache store: in-memory")
        return InMemoryCacheStore()
    if store == "redis":
        from geobridge.adapters.redis_cache import RedisCacheStore
        logger.info("Cache store: Redis")
        return RedisCacheStore.from_url(settings.redis_url)
    raise ConfigurationError(
        f"Unknown GEOCODER_CACHE_STORE '{settings.cache_store}'. "
        "Valid values: 'memory', 'redis'."
    )


def build_registry(settings: Settings) -> ProviderRegistry:
    registry = ProviderRegistry(default=settings.default_provider)
    for name in settings.providers:
        provider, args = _build_provider(name, settings)
        registry.register(name, provider, args)
        logger.info("Registered provider %s", name)
    if settings.default_provider and settings.default_provider not in registry:
        raise ConfigurationError(
            f"GEOCODER_DEFAULT_PROVIDER '{settings.default_provider}' "
            "is not listed in GEOCODER_PROVIDERS."
        )
    return registry


def build_geocoder(
    settings: Settings,
    cache_store: CachePort | None = None,
) -> ProviderAndDumperAggregator:
    """Build a fully wired aggregator from explicit settings.

    Args:
        settings:    Application settings.
        cache_store: Overrides the store chosen by GEOCODER_CACHE_STORE.

    Raises:
        ConfigurationError: If a provider or cache store name is unknown.
    """
    logger.info(
        "Building geocoder | providers=%s default=%s cache=%s ttl=%d",
        ",".join(settings.providers),
        settings.default_provider or "(first)",
        settings.cache_store,
        settings.cache_duration,
    )

    registry = build_registry(settings)
    store = cache_store if cache_store is not None else _build_cache_store(settings)
    cache = QueryCache(store, ttl=settings.cache_duration)
    dumpers = DumperRegistry(default_dumpers())

    return ProviderAndDumperAggregator(
        registry=registry,
        cache=cache,
        dumpers=dumpers,
        limit=settings.default_limit or None,
    )


@lru_cache(maxsize=1)
def get_geocoder() -> ProviderAndDumperAggregator:
    """Build and return the process-wide aggregator singleton.

    Returns:
        Fully initialised ProviderAndDumperAggregator.

    Raises:
        ConfigurationError: If an unknown provider or cache store is configured.
    """
    return build_geocoder(get_settings())
