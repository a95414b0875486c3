"""
adapters/chain.py
──────────────────────────────────────────────────────────────────────────────
Meta-provider: tries its member providers in order until one returns results.

Fallback strategy:
  - Members are called sequentially, never in parallel.
  - The first non-empty result list wins.
  - A member raising GeocoderError (unsupported query, HTTP failure, bad
    credentials…) is logged and skipped.
  - All members empty or failing → empty list.
"""
from __future__ import annotations

import logging
from typing import Callable

from geobridge.domain.exceptions import GeocoderError
from geobridge.domain.models import Address, GeocodeQuery, ReverseQuery
from geobridge.ports.provider_port import ProviderPort

logger = logging.getLogger(__name__)


class ChainProvider:
    """Sequential-fallback provider.

    Args:
        providers: Member providers, in the order they are tried.
    """

    def __init__(self, providers: list[ProviderPort]) -> None:
        self._providers = list(providers)

    @property
    def name(self) -> str:
        return "chain"

    @property
    def providers(self) -> list[ProviderPort]:
        return list(self._providers)

    def add(self, provider: ProviderPort) -> None:
        self._providers.append(provider)

    def geocode_query(self, query: GeocodeQuery) -> list[Address]:
        return self._first_non_empty(lambda p: p.geocode_query(query), query.cache_text)

    def reverse_query(self, query: ReverseQuery) -> list[Address]:
        return self._first_non_empty(lambda p: p.reverse_query(query), query.cache_text)

    def _first_non_empty(
        self,
        lookup: Callable[[ProviderPort], list[Address]],
        label: str,
    ) -> list[Address]:
        for provider in self._providers:
            try:
                results = lookup(provider)
            except GeocoderError as exc:
                logger.warning(
                    "chain | %s failed for %r, trying next provider: %s",
                    provider.name,
                    label[:80],
                    exc,
                )
                continue
            if results:
                logger.debug("chain | %s answered %r", provider.name, label[:80])
                return results
        logger.info("chain | no provider returned results for %r", label[:80])
        return []
