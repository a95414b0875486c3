"""
adapters/gazetteer.py
──────────────────────────────────────────────────────────────────────────────
Implements ProviderPort over a local CSV gazetteer — an offline database that
needs nothing but a file path, so it is usually registered at runtime:

    geocoder.register_provider(GazetteerAdapter("/data/places.csv"))

CSV columns (header row required; all but latitude/longitude optional):
  latitude, longitude, street_number, street_name, locality, postal_code,
  region, region_code, country, country_code, formatted_address

Lookup rules:
  geocode  → case-insensitive substring match against formatted_address
             (or the joined address fields when it is blank), file order
  reverse  → the nearest rows by great-circle distance, up to max_results

The file is loaded ONCE at construction time.
"""
from __future__ import annotations

import csv
import logging
import math
from pathlib import Path

from geobridge.domain.exceptions import ConfigurationError
from geobridge.domain.models import (
    Address,
    AdminLevel,
    Coordinates,
    Country,
    GeocodeQuery,
    ReverseQuery,
)

logger = logging.getLogger(__name__)

_EARTH_RADIUS_KM = 6371.0088


class GazetteerAdapter:
    """Offline CSV-backed provider.

    Args:
        path:        Path to the gazetteer CSV.
        max_results: Cap on results per lookup.

    Raises:
        ConfigurationError: If the file is missing or has no coordinate columns.
    """

    def __init__(self, path: str | Path, max_results: int = 10) -> None:
        self._path = Path(path)
        self._max_results = max_results
        self._entries = self._load(self._path)
        logger.debug(
            "GazetteerAdapter ready | path=%s entries=%d", self._path, len(self._entries)
        )

    @property
    def name(self) -> str:
        return "gazetteer"

    @property
    def path(self) -> Path:
        return self._path

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        needle = query.text.lower()
        matches = [
            address
            for address in self._entries
            if needle in (address.formatted_address or "").lower()
        ]
        return matches[: self._max_results]

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        origin = query.coordinates
        ranked = sorted(
            self._entries,
            key=lambda a: haversine_km(origin, a.coordinates),
        )
        return ranked[: self._max_results]

    # ── Private helpers ────────────────────────────────────────────────────

    def _load(self, path: Path) -> list[Address]:
        if not path.exists():
            raise ConfigurationError(f"Gazetteer file not found: {path}")

        with path.open(encoding="utf-8", newline="") as fh:
            reader = csv.DictReader(fh)
            if not reader.fieldnames or not {"latitude", "longitude"} <= set(reader.fieldnames):
                raise ConfigurationError(
                    f"Gazetteer {path} must have 'latitude' and 'longitude' columns"
                )
            entries = []
            for line_no, row in enumerate(reader, start=2):
                try:
                    entries.append(self._row_to_address(row))
                except (TypeError, ValueError) as exc:
                    logger.warning("Skipping gazetteer row %d in %s: %s", line_no, path, exc)
        return entries

    def _row_to_address(self, row: dict[str, str]) -> Address:
        def col(key: str) -> str | None:
            value = (row.get(key) or "").strip()
            return value or None

        admin_levels = []
        if col("region"):
            admin_levels.append(AdminLevel(level=1, name=col("region"), code=col("region_code")))

        country = None
        if col("country") or col("country_code"):
            country = Country(name=col("country"), code=col("country_code"))

        formatted = col("formatted_address") or ", ".join(
            part
            for part in (
                " ".join(p for p in (col("street_number"), col("street_name")) if p),
                col("locality"),
                col("postal_code"),
                col("region"),
                col("country"),
            )
            if part
        )

        return Address(
            provided_by=self.name,
            coordinates=Coordinates(
                latitude=float(row["latitude"]), longitude=float(row["longitude"])
            ),
            street_number=col("street_number"),
            street_name=col("street_name"),
            locality=col("locality"),
            postal_code=col("postal_code"),
            admin_levels=admin_levels,
            country=country,
            formatted_address=formatted or None,
        )


def haversine_km(a: Coordinates, b: Coordinates | None) -> float:
    """Great-circle distance in kilometres; infinite when ``b`` is unknown."""
    if b is None:
        return math.inf
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    )
    return 2 * _EARTH_RADIUS_KM * math.asin(math.sqrt(h))
