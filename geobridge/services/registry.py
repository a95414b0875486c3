"""
services/registry.py
──────────────────────────────────────────────────────────────────────────────
Named set of configured geocoding backends.

Registration is last-write-wins: re-registering a name replaces the previous
provider (config reload and tests rely on this).  The default provider is the
one explicitly marked via ``default=`` or, failing that, the first registered.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from geobridge.domain.exceptions import ProviderNotFound
from geobridge.domain.models import ProviderDescriptor
from geobridge.ports.provider_port import ProviderPort

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Insertion-ordered mapping of provider name → ProviderDescriptor.

    Args:
        default: Name of the provider returned by ``default()``.  When empty,
                 the first registered provider is used.
    """

    def __init__(self, default: str = "") -> None:
        self._descriptors: dict[str, ProviderDescriptor] = {}
        self._default = default

    def register(
        self,
        name: str,
        provider: ProviderPort,
        arguments: Iterable[Any] = (),
    ) -> None:
        if name in self._descriptors:
            logger.debug("Replacing registered provider %r", name)
        self._descriptors[name] = ProviderDescriptor(
            name=name,
            provider=provider,
            arguments=tuple(arguments),
        )

    def resolve(self, name: str) -> ProviderPort:
        """Return the provider registered under ``name``.

        Raises:
            ProviderNotFound: If no provider has that name.
        """
        try:
            return self._descriptors[name].provider
        except KeyError:
            raise ProviderNotFound(
                f"Provider {name!r} is not registered. "
                f"Registered providers: {', '.join(self._descriptors) or 'none'}."
            ) from None

    def default(self) -> ProviderPort:
        """Return the default provider.

        Raises:
            ProviderNotFound: If the registry is empty, or the explicitly
                              marked default is not registered.
        """
        if self._default:
            return self.resolve(self._default)
        if not self._descriptors:
            raise ProviderNotFound("No geocoding providers are registered.")
        return next(iter(self._descriptors.values())).provider

    def list(self) -> dict[str, ProviderDescriptor]:
        """Return a copy of the name → descriptor mapping (insertion order)."""
        return dict(self._descriptors)

    @property
    def names(self) -> list[str]:
        return list(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
