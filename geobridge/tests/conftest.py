"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Shared pytest fixtures and mock adapter implementations.

Mock adapters implement the Port Protocols via structural subtyping — they do
NOT inherit from any base class.  pytest uses them to test service logic
without any network access or Redis server.

Fixture hierarchy:
  settings          → Settings with test credentials, in-memory cache
  chain_provider    → MockProvider("chain")       (two results, the default)
  google_provider   → MockProvider("google_maps") (one result)
  bing_provider     → MockProvider("bing_maps")   (one result)
  registry          → ProviderRegistry with the three mocks, chain first
  store             → InMemoryCacheStore
  geocoder          → ProviderAndDumperAggregator wired with all of the above
"""
from __future__ import annotations

import pytest

from geobridge.adapters.dumpers import default_dumpers
from geobridge.adapters.memory_cache import InMemoryCacheStore
from geobridge.config.settings import Settings
from geobridge.domain.exceptions import CacheError, ProviderError
from geobridge.domain.models import (
    Address,
    AdminLevel,
    Bounds,
    Coordinates,
    Country,
    GeocodeQuery,
    ReverseQuery,
)
from geobridge.services.aggregator import ProviderAndDumperAggregator
from geobridge.services.cache import QueryCache
from geobridge.services.dumpers import DumperRegistry
from geobridge.services.registry import ProviderRegistry

WHITE_HOUSE_TEXT = "1600 Pennsylvania Ave NW, Washington, DC 20500, USA"


# ── Settings fixture ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Return a Settings instance with sane test defaults."""
    return Settings(
        providers=("chain", "google_maps", "bing_maps"),
        default_provider="",
        chain_providers=("google_maps", "geo_plugin"),
        default_limit=0,
        cache_duration=999999999,
        cache_store="memory",
        redis_url="redis://localhost:6379/15",
        http_timeout=5,
        https_proxy="",
        user_agent="geobridge-tests/1.0",
        google_maps_api_key="test-google-key",
        google_maps_locale="en-US",
        google_maps_region="us",
        bing_maps_api_key="test-bing-key",
        bing_maps_locale="en-US",
        nominatim_root_url="https://nominatim.example.test",
        gazetteer_path="",
    )


# ── Canned addresses ───────────────────────────────────────────────────────

def make_address(provided_by: str = "google_maps", **overrides) -> Address:
    fields = dict(
        provided_by=provided_by,
        coordinates=Coordinates(latitude=38.8976763, longitude=-77.0365298),
        bounds=Bounds(south=38.8963, west=-77.0379, north=38.8990, east=-77.0352),
        street_number="1600",
        street_name="Pennsylvania Avenue Northwest",
        locality="Washington",
        postal_code="20500",
        admin_levels=[AdminLevel(level=1, name="District of Columbia", code="DC")],
        country=Country(name="United States", code="US"),
        formatted_address="1600 Pennsylvania Avenue NW, Washington, DC 20500, USA",
    )
    fields.update(overrides)
    return Address(**fields)


# ── Mock adapters ──────────────────────────────────────────────────────────

class MockProvider:
    """Canned-response provider that records every query it receives.

    ``"_"`` always yields no results, like a real backend given junk input.
    """

    def __init__(
        self,
        name: str,
        results: list[Address],
        reverse_results: list[Address] | None = None,
    ) -> None:
        self._name = name
        self._results = results
        self._reverse_results = reverse_results if reverse_results is not None else results
        self.calls: list[GeocodeQuery | ReverseQuery] = []

    @property
    def name(self) -> str:
        return self._name

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        self.calls.append(query)
        if query.text == "_":
            return []
        return list(self._results)

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        self.calls.append(query)
        return list(self._reverse_results)


class FailingProvider:
    """Raises ProviderError on every lookup."""

    def __init__(self, name: str = "failing") -> None:
        self._name = name
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        self.calls += 1
        raise ProviderError(f"{self._name} is down")

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        self.calls += 1
        raise ProviderError(f"{self._name} is down")


class BrokenCacheStore:
    """Simulates an unreachable cache backend."""

    def has(self, key: str) -> bool:
        raise CacheError("cache unavailable")

    def get(self, key: str) -> list[Address] | None:
        raise CacheError("cache unavailable")

    def put(self, key: str, value: list[Address], ttl: int) -> None:
        raise CacheError("cache unavailable")


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def chain_provider():
    return MockProvider(
        "chain",
        [
            make_address("chain"),
            make_address(
                "chain",
                street_name="Pennsylvania Avenue Southeast",
                formatted_address="1600 Pennsylvania Avenue SE, Washington, DC 20003, USA",
                postal_code="20003",
            ),
        ],
    )


@pytest.fixture
def google_provider():
    return MockProvider("google_maps", [make_address("google_maps")])


@pytest.fixture
def bing_provider():
    return MockProvider(
        "bing_maps",
        [make_address("bing_maps", street_number=None, street_name="1600 Pennsylvania Ave NW")],
    )


@pytest.fixture
def registry(chain_provider, google_provider, bing_provider):
    reg = ProviderRegistry()
    reg.register("chain", chain_provider, ("google_maps", "geo_plugin"))
    reg.register("google_maps", google_provider, ("en-US", "us"))
    reg.register("bing_maps", bing_provider, ("en-US",))
    return reg


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.fixture
def geocoder(registry, store, settings):
    return ProviderAndDumperAggregator(
        registry=registry,
        cache=QueryCache(store, ttl=settings.cache_duration),
        dumpers=DumperRegistry(default_dumpers()),
    )
