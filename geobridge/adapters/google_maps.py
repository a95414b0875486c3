"""
adapters/google_maps.py
──────────────────────────────────────────────────────────────────────────────
Implements ProviderPort using the Google Maps Geocoding API.

Key behaviour:
  - Forward lookups send ``address=``; reverse lookups send ``latlng=lat,lng``
  - ``language`` comes from the query locale, falling back to the configured
    locale; ``region`` biases forward lookups towards a ccTLD
  - ``status`` in the JSON body is authoritative (Google answers 200 even
    for denied or over-quota requests)

Required env vars:
  GOOGLE_MAPS_API_KEY   — your Maps Platform key
  GOOGLE_MAPS_LOCALE    — default: en-US
  GOOGLE_MAPS_REGION    — default: us

To enable:
  Add google_maps to GEOCODER_PROVIDERS (and/or GEOCODER_CHAIN).
"""
from __future__ import annotations

import logging
from typing import Any

from geobridge.adapters.transport import get_json
from geobridge.config.settings import Settings
from geobridge.domain.exceptions import (
    InvalidCredentials,
    ProviderError,
    QuotaExceeded,
)
from geobridge.domain.models import (
    Address,
    AdminLevel,
    Bounds,
    Coordinates,
    Country,
    GeocodeQuery,
    ReverseQuery,
)

logger = logging.getLogger(__name__)

_GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

_ADMIN_LEVEL_TYPES = {
    f"administrative_area_level_{level}": level for level in range(1, 6)
}


class GoogleMapsAdapter:
    """Google Maps Geocoding API adapter.

    Args:
        settings: Shared application settings (key, locale, region, transport).
        locale:   Overrides ``settings.google_maps_locale``.
        region:   Overrides ``settings.google_maps_region``.
    """

    def __init__(
        self,
        settings: Settings,
        locale: str | None = None,
        region: str | None = None,
    ) -> None:
        self._settings = settings
        self._api_key = settings.google_maps_api_key
        self._locale = locale if locale is not None else settings.google_maps_locale
        self._region = region if region is not None else settings.google_maps_region
        logger.debug(
            "GoogleMapsAdapter ready | locale=%s region=%s key_set=%s",
            self._locale,
            self._region,
            bool(self._api_key),
        )

    # ── ProviderPort implementation ────────────────────────────────────────

    @property
    def name(self) -> str:
        return "google_maps"

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def region(self) -> str:
        return self._region

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        params: dict[str, Any] = {
            "address": query.text,
            "language": query.locale or self._locale,
            "region": self._region,
        }
        if query.bounds is not None:
            b = query.bounds
            params["bounds"] = f"{b.south},{b.west}|{b.north},{b.east}"
        return self._execute(params)

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        c = query.coordinates
        params = {
            "latlng": f"{c.latitude},{c.longitude}",
            "language": query.locale or self._locale,
        }
        return self._execute(params)

    # ── Private helpers ────────────────────────────────────────────────────

    def _execute(self, params: dict[str, Any]) -> list[Address]:
        params["key"] = self._api_key
        data = get_json(_GOOGLE_GEOCODE_URL, params, self._settings, self.name)

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status == "REQUEST_DENIED":
            raise InvalidCredentials(
                f"Google Maps denied the request: {data.get('error_message', '')}"
            )
        if status == "OVER_QUERY_LIMIT":
            raise QuotaExceeded(
                f"Google Maps quota exceeded: {data.get('error_message', '')}"
            )
        if status != "OK":
            raise ProviderError(
                f"Google Maps returned status {status!r}: {data.get('error_message', '')}"
            )

        try:
            return [self._to_address(item) for item in data.get("results", [])]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(f"Unexpected Google Maps result shape: {exc}") from exc

    def _to_address(self, item: dict[str, Any]) -> Address:
        fields: dict[str, Any] = {}
        admin_levels: list[AdminLevel] = []
        country = None

        for component in item.get("address_components", []):
            types = component.get("types", [])
            long_name = component.get("long_name")
            short_name = component.get("short_name")
            if "street_number" in types:
                fields["street_number"] = long_name
            elif "route" in types:
                fields["street_name"] = long_name
            elif "postal_code" in types:
                fields["postal_code"] = long_name
            elif "country" in types:
                country = Country(name=long_name, code=short_name)
            elif "locality" in types or "postal_town" in types:
                fields.setdefault("locality", long_name)
            elif "sublocality" in types or "neighborhood" in types:
                fields.setdefault("sub_locality", long_name)
            else:
                for t in types:
                    level = _ADMIN_LEVEL_TYPES.get(t)
                    if level is not None:
                        admin_levels.append(
                            AdminLevel(level=level, name=long_name, code=short_name)
                        )
                        break

        geometry = item.get("geometry", {})
        location = geometry.get("location")
        coordinates = None
        if location:
            coordinates = Coordinates(latitude=location["lat"], longitude=location["lng"])

        box = geometry.get("bounds") or geometry.get("viewport")
        bounds = None
        if box:
            bounds = Bounds(
                south=box["southwest"]["lat"],
                west=box["southwest"]["lng"],
                north=box["northeast"]["lat"],
                east=box["northeast"]["lng"],
            )

        return Address(
            provided_by=self.name,
            coordinates=coordinates,
            bounds=bounds,
            admin_levels=sorted(admin_levels, key=lambda a: a.level),
            country=country,
            formatted_address=item.get("formatted_address"),
            **fields,
        )
