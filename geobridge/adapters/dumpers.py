"""
adapters/dumpers.py
──────────────────────────────────────────────────────────────────────────────
Reference DumperPort implementations, one string per Address:

  geojson → GeoJSON Feature (Point geometry, camelCase properties, bbox)
  wkt     → Well-Known Text point
  kml     → KML Placemark

Addresses without coordinates dump to an empty geometry.
"""
from __future__ import annotations

import json
from typing import Any
from xml.sax.saxutils import escape

from geobridge.domain.models import Address


def _properties(address: Address) -> dict[str, Any]:
    country = address.country
    props: dict[str, Any] = {
        "streetNumber": address.street_number,
        "streetName":   address.street_name,
        "postalCode":   address.postal_code,
        "locality":     address.locality,
        "subLocality":  address.sub_locality,
        "adminLevels":  {
            str(level.level): {"name": level.name, "code": level.code, "level": level.level}
            for level in address.admin_levels
        },
        "country":      country.name if country else None,
        "countryCode":  country.code if country else None,
        "timezone":     address.timezone,
        "providedBy":   address.provided_by,
    }
    return {k: v for k, v in props.items() if v not in (None, {}, "")}


class GeoJsonDumper:
    @property
    def name(self) -> str:
        return "geojson"

    def dump(self, address: Address) -> str:
        geometry: dict[str, Any] | None = None
        if address.coordinates is not None:
            geometry = {
                "type": "Point",
                "coordinates": [
                    address.coordinates.longitude,
                    address.coordinates.latitude,
                ],
            }
        feature: dict[str, Any] = {
            "type": "Feature",
            "geometry": geometry,
            "properties": _properties(address),
        }
        if address.bounds is not None:
            b = address.bounds
            feature["bbox"] = [b.west, b.south, b.east, b.north]
        return json.dumps(feature, ensure_ascii=False)


class WktDumper:
    @property
    def name(self) -> str:
        return "wkt"

    def dump(self, address: Address) -> str:
        if address.coordinates is None:
            return "POINT EMPTY"
        c = address.coordinates
        return f"POINT({c.longitude} {c.latitude})"


class KmlDumper:
    @property
    def name(self) -> str:
        return "kml"

    def dump(self, address: Address) -> str:
        label = escape(address.formatted_address or address.locality or "")
        point = ""
        if address.coordinates is not None:
            c = address.coordinates
            point = f"<Point><coordinates>{c.longitude},{c.latitude},0</coordinates></Point>"
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<kml xmlns="http://www.opengis.net/kml/2.2">\n'
            "    <Document>\n"
            "        <Placemark>\n"
            f"            <name>{label}</name>\n"
            f"            <description>{label}</description>\n"
            f"            {point}\n"
            "        </Placemark>\n"
            "    </Document>\n"
            "</kml>"
        )


def default_dumpers() -> list[GeoJsonDumper | WktDumper | KmlDumper]:
    return [GeoJsonDumper(), WktDumper(), KmlDumper()]
