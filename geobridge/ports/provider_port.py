"""
ports/provider_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for geocoding backends.

Implementations: GoogleMapsAdapter, BingMapsAdapter, NominatimAdapter,
GeoPluginAdapter, ChainProvider, GazetteerAdapter.
To add a backend: write an adapter implementing this Protocol, then register
its name in services/container.py (or call register_provider() at runtime).
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from geobridge.domain.models import Address, GeocodeQuery, ReverseQuery


@runtime_checkable
class ProviderPort(Protocol):
    """Contract for a pluggable geocoding backend."""

    @property
    def name(self) -> str:
        """Unique registry key, e.g. ``"google_maps"``."""
        ...

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        """Resolve an address (or IP address) to a list of results.

        Args:
            query: Frozen GeocodeQuery.

        Returns:
            Addresses in backend order; empty list when nothing matched.

        Raises:
            FunctionNotFound: If the backend cannot handle this kind of query.
            ProviderError:    On transport failure or malformed response.
        """
        ...

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        """Resolve coordinates to a list of results.

        Raises:
            FunctionNotFound: If the backend has no reverse lookup.
            ProviderError:    On transport failure or malformed response.
        """
        ...
