"""
tests/unit/test_registry.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for ProviderRegistry and DumperRegistry.
"""
from __future__ import annotations

import pytest

from geobridge.adapters.dumpers import default_dumpers
from geobridge.domain.exceptions import InvalidDumper, ProviderNotFound
from geobridge.services.dumpers import DumperRegistry
from geobridge.services.registry import ProviderRegistry
from geobridge.tests.conftest import MockProvider, make_address


class TestProviderRegistry:
    def test_resolve_registered(self):
        reg = ProviderRegistry()
        provider = MockProvider("google_maps", [])
        reg.register("google_maps", provider)
        assert reg.resolve("google_maps") is provider

    def test_resolve_unknown_raises(self):
        reg = ProviderRegistry()
        reg.register("chain", MockProvider("chain", []))
        with pytest.raises(ProviderNotFound, match="Registered providers: chain"):
            reg.resolve("bing_maps")

    def test_default_is_first_registered(self):
        reg = ProviderRegistry()
        first = MockProvider("chain", [])
        reg.register("chain", first)
        reg.register("google_maps", MockProvider("google_maps", []))
        assert reg.default() is first

    def test_explicit_default(self):
        reg = ProviderRegistry(default="google_maps")
        google = MockProvider("google_maps", [])
        reg.register("chain", MockProvider("chain", []))
        reg.register("google_maps", google)
        assert reg.default() is google

    def test_empty_registry_has_no_default(self):
        with pytest.raises(ProviderNotFound):
            ProviderRegistry().default()

    def test_register_overwrites(self):
        reg = ProviderRegistry()
        reg.register("chain", MockProvider("chain", []))
        replacement = MockProvider("chain", [make_address("chain")])
        reg.register("chain", replacement)
        assert reg.resolve("chain") is replacement
        assert len(reg) == 1

    def test_list_preserves_insertion_order(self):
        reg = ProviderRegistry()
        for name in ("chain", "google_maps", "bing_maps"):
            reg.register(name, MockProvider(name, []), (name.upper(),))
        listing = reg.list()
        assert list(listing) == ["chain", "google_maps", "bing_maps"]
        assert listing["bing_maps"].arguments == ("BING_MAPS",)
        assert listing["bing_maps"].name == "bing_maps"

    def test_list_is_a_copy(self):
        reg = ProviderRegistry()
        reg.register("chain", MockProvider("chain", []))
        reg.list().clear()
        assert "chain" in reg


class TestDumperRegistry:
    def test_known_formats(self):
        dumpers = DumperRegistry(default_dumpers())
        assert set(dumpers.names) == {"geojson", "wkt", "kml"}

    def test_resolve_is_case_insensitive(self):
        dumpers = DumperRegistry(default_dumpers())
        assert dumpers.resolve("GeoJSON").name == "geojson"

    @pytest.mark.parametrize("fmt", ["not-a-real-format", "test", ""])
    def test_unknown_format_raises(self, fmt):
        with pytest.raises(InvalidDumper):
            DumperRegistry(default_dumpers()).dump(fmt, [make_address()])

    def test_one_string_per_address(self):
        dumpers = DumperRegistry(default_dumpers())
        out = dumpers.dump("wkt", [make_address(), make_address(coordinates=None)])
        assert out == ["POINT(-77.0365298 38.8976763)", "POINT EMPTY"]
