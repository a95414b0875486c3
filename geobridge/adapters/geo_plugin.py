"""
adapters/geo_plugin.py
──────────────────────────────────────────────────────────────────────────────
Implements ProviderPort using the geoPlugin IP-geolocation service.

Only IP addresses can be geocoded.  Free-text addresses and reverse lookups
raise FunctionNotFound, which the chain provider treats as "try the next one".
"""
from __future__ import annotations

import ipaddress
import logging
from typing import Any

from geobridge.adapters.transport import get_json
from geobridge.config.settings import Settings
from geobridge.domain.exceptions import FunctionNotFound, ProviderError
from geobridge.domain.models import (
    Address,
    AdminLevel,
    Coordinates,
    Country,
    GeocodeQuery,
    ReverseQuery,
)

logger = logging.getLogger(__name__)

_GEOPLUGIN_URL = "http://www.geoplugin.net/json.gp"

# 200 = full match, 206 = partial (country only)
_OK_STATUSES = {200, 206}


class GeoPluginAdapter:
    """geoPlugin IP lookup adapter."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def name(self) -> str:
        return "geo_plugin"

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        try:
            ip = ipaddress.ip_address(query.text)
        except ValueError:
            raise FunctionNotFound(
                "The geo_plugin provider only supports IP addresses."
            ) from None

        if ip.is_loopback:
            return [
                Address(
                    provided_by=self.name,
                    locality="localhost",
                    country=Country(name="localhost"),
                )
            ]

        data = get_json(_GEOPLUGIN_URL, {"ip": str(ip)}, self._settings, self.name)
        if not data or _int(data.get("geoplugin_status")) not in _OK_STATUSES:
            return []
        try:
            return [self._to_address(data)]
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(f"Unexpected geoPlugin response shape: {exc}") from exc

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        raise FunctionNotFound("The geo_plugin provider does not support reverse geocoding.")

    def _to_address(self, data: dict[str, Any]) -> Address:
        coordinates = None
        lat = data.get("geoplugin_latitude")
        lon = data.get("geoplugin_longitude")
        if lat not in (None, "") and lon not in (None, ""):
            coordinates = Coordinates(latitude=float(lat), longitude=float(lon))

        admin_levels = []
        if data.get("geoplugin_region"):
            admin_levels.append(
                AdminLevel(
                    level=1,
                    name=data["geoplugin_region"],
                    code=data.get("geoplugin_regionCode") or None,
                )
            )

        country = None
        if data.get("geoplugin_countryName") or data.get("geoplugin_countryCode"):
            country = Country(
                name=data.get("geoplugin_countryName") or None,
                code=data.get("geoplugin_countryCode") or None,
            )

        return Address(
            provided_by=self.name,
            coordinates=coordinates,
            locality=data.get("geoplugin_city") or None,
            admin_levels=admin_levels,
            country=country,
            timezone=data.get("geoplugin_timezone") or None,
        )


def _int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
