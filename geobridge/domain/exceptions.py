"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy.

All exceptions are rooted at GeocoderError so callers can catch broadly
(except GeocoderError) or narrowly (except ProviderNotFound).

Propagation policy:
  ConfigurationError / ProviderNotFound / InvalidDumper → programmer errors,
      raised immediately, never retried
  ProviderError / FunctionNotFound → passed through the aggregator verbatim
  CacheError → logged and degraded to a cache miss by QueryCache

When adding an HTTP layer, map these to appropriate status codes:
  ProviderNotFound    → 404
  InvalidDumper       → 400
  FunctionNotFound    → 501
  QuotaExceeded       → 429
  ProviderError       → 502
"""
from __future__ import annotations


class GeocoderError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(GeocoderError):
    """Raised when required configuration is missing or invalid."""


class ProviderNotFound(ConfigurationError):
    """Raised when a provider name is not registered."""


class InvalidDumper(ConfigurationError):
    """Raised when a dump format has no registered serializer."""


class FunctionNotFound(GeocoderError):
    """Raised when a provider cannot perform the requested lookup."""


class ProviderError(GeocoderError):
    """Raised when a geocoding backend fails or returns an unusable response."""


class InvalidCredentials(ProviderError):
    """Raised when a backend rejects the configured API key."""


class QuotaExceeded(ProviderError):
    """Raised when a backend reports that the request quota is exhausted."""


class CacheError(GeocoderError):
    """Raised when the cache store cannot be read or written."""
