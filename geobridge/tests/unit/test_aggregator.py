"""
tests/unit/test_aggregator.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for ProviderAndDumperAggregator and GeocodeRequest using fully
mocked providers.

Verifies:
  • Default provider dispatch and using() override
  • Unknown provider / dump format fail before any lookup
  • limit() truncation and get_limit()
  • get() / all() equivalence
  • Cache use through the aggregator (stored value == returned value)
  • Builder immutability: using()/limit() never mutate the receiver
  • Runtime provider registration
"""
from __future__ import annotations

import json

import pytest

from geobridge.domain.exceptions import InvalidDumper, ProviderError, ProviderNotFound
from geobridge.domain.models import GeocodeQuery, ReverseQuery
from geobridge.services.aggregator import GeocodeRequest
from geobridge.services.cache import cache_key
from geobridge.tests.conftest import (
    WHITE_HOUSE_TEXT,
    FailingProvider,
    MockProvider,
    make_address,
)


class TestDispatch:
    def test_default_provider_is_first_registered(self, geocoder, chain_provider):
        results = geocoder.geocode(WHITE_HOUSE_TEXT).get()
        assert len(chain_provider.calls) == 1
        assert all(r.provided_by == "chain" for r in results)

    def test_using_dispatches_to_named_provider(self, geocoder, chain_provider, google_provider):
        results = geocoder.using("google_maps").geocode(WHITE_HOUSE_TEXT).get()
        assert len(google_provider.calls) == 1
        assert chain_provider.calls == []
        assert results[0].provided_by == "google_maps"

    def test_using_unknown_provider_raises(self, geocoder, chain_provider):
        with pytest.raises(ProviderNotFound, match="not-a-real-provider"):
            geocoder.using("not-a-real-provider")
        assert chain_provider.calls == []

    def test_reverse_calls_reverse_query(self, geocoder, chain_provider):
        geocoder.reverse(38.897957, -77.036560).get()
        assert isinstance(chain_provider.calls[0], ReverseQuery)
        assert chain_provider.calls[0].coordinates.latitude == pytest.approx(38.897957)

    def test_geocode_query_accepts_prebuilt_query(self, geocoder, chain_provider):
        query = GeocodeQuery(text=WHITE_HOUSE_TEXT, locale="en-GB")
        results = geocoder.geocode_query(query).get()
        assert results
        assert chain_provider.calls[0] is query

    def test_reverse_query_accepts_prebuilt_query(self, geocoder):
        query = ReverseQuery.from_coordinates(38.8791981, -76.9818437)
        results = geocoder.reverse_query(query).get()
        assert isinstance(results, list)
        assert results

    def test_staging_does_not_execute(self, geocoder, chain_provider):
        request = geocoder.geocode(WHITE_HOUSE_TEXT)
        assert isinstance(request, GeocodeRequest)
        assert chain_provider.calls == []

    def test_provider_errors_propagate(self, geocoder):
        failing = FailingProvider()
        geocoder.register_provider(failing)
        with pytest.raises(ProviderError, match="failing is down"):
            geocoder.using("failing").geocode(WHITE_HOUSE_TEXT).get()
        assert failing.calls == 1


class TestLimit:
    def test_limit_truncates_results(self, geocoder):
        limited = geocoder.limit(1)
        results = limited.using("chain").geocode(WHITE_HOUSE_TEXT).get()
        assert limited.get_limit() == 1
        assert len(results) == 1

    def test_default_limit_is_unbounded(self, geocoder):
        assert geocoder.get_limit() is None
        assert len(geocoder.geocode(WHITE_HOUSE_TEXT).get()) == 2

    def test_limit_larger_than_results(self, geocoder):
        assert len(geocoder.limit(50).geocode(WHITE_HOUSE_TEXT).get()) == 2

    @pytest.mark.parametrize("bad", [0, -1, 1.5, "3", True])
    def test_invalid_limit_rejected(self, geocoder, bad):
        with pytest.raises(ValueError):
            geocoder.limit(bad)

    def test_limited_read_keeps_full_cache_entry(self, geocoder, store):
        geocoder.limit(1).geocode(WHITE_HOUSE_TEXT).get()
        cached = store.get(cache_key(GeocodeQuery(text=WHITE_HOUSE_TEXT)))
        assert len(cached) == 2


class TestBuilderImmutability:
    def test_using_returns_new_aggregator(self, geocoder):
        derived = geocoder.using("google_maps")
        assert derived is not geocoder
        assert geocoder.get_provider().name == "chain"
        assert derived.get_provider().name == "google_maps"

    def test_limit_returns_new_aggregator(self, geocoder):
        derived = geocoder.limit(1)
        assert derived.get_limit() == 1
        assert geocoder.get_limit() is None

    def test_chaining_preserves_both_settings(self, geocoder):
        derived = geocoder.limit(1).using("bing_maps")
        assert derived.get_limit() == 1
        assert derived.get_provider().name == "bing_maps"

    def test_staged_request_keeps_provider(self, geocoder, google_provider):
        request = geocoder.using("google_maps").geocode(WHITE_HOUSE_TEXT)
        geocoder.using("bing_maps")
        request.get()
        assert len(google_provider.calls) == 1


class TestGetAndAll:
    def test_get_and_all_are_equal(self, geocoder):
        expected = geocoder.geocode(WHITE_HOUSE_TEXT).get()
        actual = geocoder.geocode(WHITE_HOUSE_TEXT).all()
        assert expected == actual

    def test_get_reexecutes_through_cache(self, geocoder, chain_provider):
        request = geocoder.geocode(WHITE_HOUSE_TEXT)
        first = request.get()
        second = request.get()
        assert first == second
        # second call is served by the cache
        assert len(chain_provider.calls) == 1


class TestCaching:
    def test_cache_is_used(self, geocoder, store):
        results = geocoder.geocode(WHITE_HOUSE_TEXT).get()
        key = cache_key(GeocodeQuery(text=WHITE_HOUSE_TEXT))
        assert store.has(key)
        assert store.get(key) == results

    def test_japanese_address_is_cached(self, geocoder, store):
        text = "108-0075 東京都港区港南２丁目１６－３"
        geocoder.geocode(text).get()
        assert store.has(
            "geocoder-108-0075e69db1e4baace983bde6b8afe58cbae6b8afe58d97"
            "efbc92e4b881e79baeefbc91efbc96efbc8defbc93"
        )

    def test_empty_results_are_not_cached(self, geocoder, store):
        assert geocoder.geocode("_").get() == []
        assert not store.has(cache_key(GeocodeQuery(text="_")))

    def test_editing_results_does_not_change_cache_hits(self, geocoder):
        first = geocoder.geocode(WHITE_HOUSE_TEXT).get()
        first[0].locality = "Tampered"
        second = geocoder.geocode(WHITE_HOUSE_TEXT).get()
        assert second[0].locality == "Washington"


class TestDump:
    def test_dump_geojson(self, geocoder):
        dumped = geocoder.using("google_maps").geocode(WHITE_HOUSE_TEXT).dump("geojson")
        feature = json.loads(dumped[0])
        assert feature["properties"]["streetNumber"] == "1600"
        assert len(dumped) == 1

    def test_dump_unknown_format_raises_before_lookup(self, geocoder, google_provider):
        with pytest.raises(InvalidDumper):
            geocoder.using("google_maps").geocode(WHITE_HOUSE_TEXT).dump("not-a-real-format")
        assert google_provider.calls == []

    def test_dump_respects_limit(self, geocoder):
        assert len(geocoder.limit(1).geocode(WHITE_HOUSE_TEXT).dump("wkt")) == 1

    def test_aggregator_dump_of_fetched_results(self, geocoder):
        results = geocoder.geocode(WHITE_HOUSE_TEXT).get()
        dumped = geocoder.dump("wkt", results)
        assert dumped[0] == "POINT(-77.0365298 38.8976763)"

    def test_aggregator_dump_unknown_format(self, geocoder):
        with pytest.raises(InvalidDumper):
            geocoder.dump("test", [make_address()])


class TestIntrospection:
    def test_get_name(self, geocoder):
        assert geocoder.get_name() == "provider_aggregator"

    def test_get_provider_defaults_to_chain(self, geocoder):
        assert geocoder.get_provider().name == "chain"

    def test_get_providers(self, geocoder):
        providers = geocoder.get_providers()
        assert list(providers) == ["chain", "google_maps", "bing_maps"]
        assert providers["google_maps"].arguments == ("en-US", "us")

    def test_register_provider(self, geocoder):
        extra = MockProvider("gazetteer", [make_address("gazetteer")])
        assert geocoder.register_provider(extra) is geocoder
        assert "gazetteer" in geocoder.get_providers()
        results = geocoder.using("gazetteer").geocode("Washington").get()
        assert results[0].provided_by == "gazetteer"

    def test_registered_provider_visible_to_derived_aggregators(self, geocoder):
        derived = geocoder.limit(1)
        geocoder.register_provider(MockProvider("late", [make_address("late")]))
        assert derived.using("late").get_provider().name == "late"

    def test_register_providers(self, geocoder):
        geocoder.register_providers(
            [MockProvider("a", []), MockProvider("b", [])]
        )
        assert {"a", "b"} <= set(geocoder.get_providers())
