"""
adapters/bing_maps.py
──────────────────────────────────────────────────────────────────────────────
Implements ProviderPort using the Bing Maps Locations REST API.

Forward:  GET /REST/v1/Locations?query=...
Reverse:  GET /REST/v1/Locations/{lat},{lon}

Required env vars:
  BING_MAPS_API_KEY   — Bing Maps key
  BING_MAPS_LOCALE    — default: en-US
"""
from __future__ import annotations

import logging
from typing import Any

from geobridge.adapters.transport import get_json
from geobridge.config.settings import Settings
from geobridge.domain.exceptions import ProviderError
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

_BING_LOCATIONS_URL = "https://dev.virtualearth.net/REST/v1/Locations"


class BingMapsAdapter:
    """Bing Maps Locations adapter.

    Args:
        settings: Shared application settings.
        locale:   Overrides ``settings.bing_maps_locale``.
    """

    def __init__(self, settings: Settings, locale: str | None = None) -> None:
        self._settings = settings
        self._api_key = settings.bing_maps_api_key
        self._locale = locale if locale is not None else settings.bing_maps_locale

    @property
    def name(self) -> str:
        return "bing_maps"

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        params = {"query": query.text}
        return self._execute(_BING_LOCATIONS_URL, params, query.locale)

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        c = query.coordinates
        url = f"{_BING_LOCATIONS_URL}/{c.latitude},{c.longitude}"
        return self._execute(url, {}, query.locale)

    def _execute(
        self,
        url: str,
        params: dict[str, Any],
        locale: str | None,
    ) -> list[Address]:
        params.update(
            {
                "key": self._api_key,
                "c": locale or self._locale,
                "incl": "ciso2",
            }
        )
        data = get_json(url, params, self._settings, self.name)

        try:
            resource_sets = data["resourceSets"]
        except (KeyError, TypeError) as exc:
            raise ProviderError(
                f"Unexpected Bing Maps response shape: {str(data)[:300]}"
            ) from exc
        if not resource_sets:
            return []
        try:
            return [self._to_address(r) for r in resource_sets[0].get("resources", [])]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(f"Unexpected Bing Maps resource shape: {exc}") from exc

    def _to_address(self, resource: dict[str, Any]) -> Address:
        address = resource.get("address", {})

        coordinates = None
        point = resource.get("point", {}).get("coordinates")
        if point and len(point) == 2:
            coordinates = Coordinates(latitude=point[0], longitude=point[1])

        bounds = None
        bbox = resource.get("bbox")
        if bbox and len(bbox) == 4:
            bounds = Bounds(south=bbox[0], west=bbox[1], north=bbox[2], east=bbox[3])

        admin_levels = []
        if address.get("adminDistrict"):
            admin_levels.append(AdminLevel(level=1, name=address["adminDistrict"]))
        if address.get("adminDistrict2"):
            admin_levels.append(AdminLevel(level=2, name=address["adminDistrict2"]))

        country = None
        if address.get("countryRegion") or address.get("countryRegionIso2"):
            country = Country(
                name=address.get("countryRegion"),
                code=address.get("countryRegionIso2"),
            )

        return Address(
            provided_by=self.name,
            coordinates=coordinates,
            bounds=bounds,
            street_name=address.get("addressLine"),
            locality=address.get("locality"),
            postal_code=address.get("postalCode"),
            admin_levels=admin_levels,
            country=country,
            formatted_address=address.get("formattedAddress"),
        )
