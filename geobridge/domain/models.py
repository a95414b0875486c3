"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — Pydantic models with no imports from adapters or ports.

These models are the lingua franca of the entire system:
  • providers produce Address objects
  • the cache stores lists of them (JSON round-trips via Pydantic)
  • dumpers serialise them
  • the aggregator routes queries built from GeocodeQuery / ReverseQuery

Queries are frozen: once staged they cannot change underneath the cache key.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Geometry ───────────────────────────────────────────────────────────────────

class Coordinates(BaseModel):
    """A WGS84 latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    latitude:  float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class Bounds(BaseModel):
    """A bounding box (south-west / north-east corners)."""

    model_config = ConfigDict(frozen=True)

    south: float
    west:  float
    north: float
    east:  float


# ── Address components ─────────────────────────────────────────────────────────

class Country(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None


class AdminLevel(BaseModel):
    """One administrative division (level 1 = state / region)."""

    level: int = Field(..., ge=1, le=5)
    name:  str
    code:  Optional[str] = None


# ── Result ─────────────────────────────────────────────────────────────────────

class Address(BaseModel):
    """A normalised geocoding result.

    Every field is optional because real-world data is partial — an
    IP-geolocation backend knows the country but not the street, a reverse
    lookup in the ocean knows nothing but the coordinates.
    """

    provided_by: str

    coordinates: Optional[Coordinates] = None
    bounds:      Optional[Bounds]      = None

    street_number: Optional[str] = None
    street_name:   Optional[str] = None
    sub_locality:  Optional[str] = None
    locality:      Optional[str] = None
    postal_code:   Optional[str] = None

    admin_levels: list[AdminLevel] = Field(default_factory=list)
    country:      Optional[Country] = None
    timezone:     Optional[str] = None

    formatted_address: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain JSON-safe dict."""
        return self.model_dump(mode="json")


# ── Queries ────────────────────────────────────────────────────────────────────

class GeocodeQuery(BaseModel):
    """A forward lookup: free-text address (or IP address) → results."""

    model_config = ConfigDict(frozen=True)

    text:   str = Field(..., min_length=1, max_length=2000)
    locale: Optional[str] = None
    bounds: Optional[Bounds] = None

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("geocode text must not be blank")
        return v

    @property
    def cache_text(self) -> str:
        return self.text


class ReverseQuery(BaseModel):
    """A reverse lookup: coordinates → results."""

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    locale:      Optional[str] = None

    @classmethod
    def from_coordinates(
        cls,
        latitude: float,
        longitude: float,
        locale: str | None = None,
    ) -> "ReverseQuery":
        return cls(
            coordinates=Coordinates(latitude=latitude, longitude=longitude),
            locale=locale,
        )

    @property
    def cache_text(self) -> str:
        return f"{self.coordinates.latitude},{self.coordinates.longitude}"


Query = Union[GeocodeQuery, ReverseQuery]


# ── Registry entries ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProviderDescriptor:
    """A registered provider plus the configuration it was built with.

    ``arguments`` is data, not behaviour: the ordered constructor arguments
    (locale, region bias, masked credentials…) kept for introspection.
    """

    name: str
    provider: Any
    arguments: tuple[Any, ...] = ()
