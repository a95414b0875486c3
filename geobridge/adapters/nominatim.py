"""
adapters/nominatim.py
──────────────────────────────────────────────────────────────────────────────
Implements ProviderPort using OpenStreetMap Nominatim (jsonv2 format).

No API key, but the usage policy requires an identifying User-Agent
(GEOCODER_USER_AGENT).  Point NOMINATIM_ROOT_URL at a self-hosted instance
for anything beyond light use.
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

_LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality")
_SUB_LOCALITY_KEYS = ("suburb", "city_district", "neighbourhood", "quarter")


class NominatimAdapter:
    """OpenStreetMap Nominatim adapter.

    Args:
        settings: Shared application settings.
        root_url: Overrides ``settings.nominatim_root_url``.
    """

    def __init__(self, settings: Settings, root_url: str | None = None) -> None:
        self._settings = settings
        self._root_url = (root_url or settings.nominatim_root_url).rstrip("/")

    @property
    def name(self) -> str:
        return "nominatim"

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        params: dict[str, Any] = {
            "q": query.text,
            "format": "jsonv2",
            "addressdetails": 1,
            "accept-language": query.locale,
        }
        if query.bounds is not None:
            b = query.bounds
            params["viewbox"] = f"{b.west},{b.north},{b.east},{b.south}"
        data = get_json(f"{self._root_url}/search", params, self._settings, self.name)
        return self._to_addresses(data or [])

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        c = query.coordinates
        params = {
            "lat": c.latitude,
            "lon": c.longitude,
            "format": "jsonv2",
            "addressdetails": 1,
            "accept-language": query.locale,
        }
        data = get_json(f"{self._root_url}/reverse", params, self._settings, self.name)
        # Nominatim answers a miss with {"error": "Unable to geocode"}
        if not data or "error" in data:
            return []
        return self._to_addresses([data])

    def _to_addresses(self, items: list[dict[str, Any]]) -> list[Address]:
        try:
            return [self._to_address(item) for item in items]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(f"Unexpected Nominatim result shape: {exc}") from exc

    def _to_address(self, item: dict[str, Any]) -> Address:
        address = item.get("address", {})

        coordinates = None
        if item.get("lat") is not None and item.get("lon") is not None:
            coordinates = Coordinates(
                latitude=float(item["lat"]), longitude=float(item["lon"])
            )

        bounds = None
        bbox = item.get("boundingbox")
        if bbox and len(bbox) == 4:
            # Nominatim order: [south, north, west, east]
            bounds = Bounds(
                south=float(bbox[0]),
                north=float(bbox[1]),
                west=float(bbox[2]),
                east=float(bbox[3]),
            )

        admin_levels = []
        if address.get("state"):
            admin_levels.append(AdminLevel(level=1, name=address["state"]))
        if address.get("county"):
            admin_levels.append(AdminLevel(level=2, name=address["county"]))

        country = None
        if address.get("country") or address.get("country_code"):
            code = address.get("country_code")
            country = Country(
                name=address.get("country"),
                code=code.upper() if code else None,
            )

        return Address(
            provided_by=self.name,
            coordinates=coordinates,
            bounds=bounds,
            street_number=address.get("house_number"),
            street_name=address.get("road"),
            sub_locality=_first(address, _SUB_LOCALITY_KEYS),
            locality=_first(address, _LOCALITY_KEYS),
            postal_code=address.get("postcode"),
            admin_levels=admin_levels,
            country=country,
            formatted_address=item.get("display_name"),
        )


def _first(mapping: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        if mapping.get(key):
            return mapping[key]
    return None
