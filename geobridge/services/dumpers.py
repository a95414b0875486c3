"""
services/dumpers.py
──────────────────────────────────────────────────────────────────────────────
Dispatch of dump format names to registered serializers.

An unknown format is a usage error (InvalidDumper), never a silent fallback
to some default format.
"""
from __future__ import annotations

import logging

from geobridge.domain.exceptions import InvalidDumper
from geobridge.domain.models import Address
from geobridge.ports.dumper_port import DumperPort

logger = logging.getLogger(__name__)


class DumperRegistry:
    """Mapping of format name → DumperPort."""

    def __init__(self, dumpers: list[DumperPort] | None = None) -> None:
        self._dumpers: dict[str, DumperPort] = {}
        for dumper in dumpers or []:
            self.register(dumper.name, dumper)

    def register(self, name: str, dumper: DumperPort) -> None:
        self._dumpers[name.lower()] = dumper

    def resolve(self, name: str) -> DumperPort:
        """Return the dumper registered under ``name`` (case-insensitive).

        Raises:
            InvalidDumper: If no dumper has that name.
        """
        dumper = self._dumpers.get(name.lower())
        if dumper is None:
            raise InvalidDumper(
                f"Unknown dump format {name!r}. "
                f"Valid formats: {', '.join(self._dumpers) or 'none'}."
            )
        return dumper

    def dump(self, name: str, results: list[Address]) -> list[str]:
        """Serialise each address with the ``name`` dumper, preserving order."""
        dumper = self.resolve(name)
        logger.debug("Dumping %d results as %s", len(results), name)
        return [dumper.dump(address) for address in results]

    @property
    def names(self) -> list[str]:
        return list(self._dumpers)
