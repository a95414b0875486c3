"""
ports/dumper_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for output serializers ("dumpers").
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from geobridge.domain.models import Address


@runtime_checkable
class DumperPort(Protocol):
    """Contract for a named Address → string serializer."""

    @property
    def name(self) -> str:
        ...

    def dump(self, address: Address) -> str:
        ...
