"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Single source of truth for all tuneable parameters.

All values can be overridden via environment variables or a .env file placed
at the project root.  The frozen dataclass ensures settings are never mutated
at runtime.

To change which backends are available, edit env vars — no code edits required:
  GEOCODER_PROVIDERS        → ordered list of registered providers
  GEOCODER_DEFAULT_PROVIDER → provider used when none is selected
  GEOCODER_CHAIN            → members of the "chain" fallback provider
  GEOCODER_CACHE_STORE      → memory | redis
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (two levels up from this file)
load_dotenv(Path(__file__).parent.parent.parent / ".env")


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _env_list(key: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(key, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable application settings loaded from environment variables."""

    # ── Provider selection ──────────────────────────────────────────────────
    # Registration order matters: the first entry is the default provider
    # unless GEOCODER_DEFAULT_PROVIDER names another one.
    # Valid values: "chain" | "google_maps" | "bing_maps" | "nominatim"
    #               | "geo_plugin" | "gazetteer"
    providers: tuple[str, ...] = field(
        default_factory=lambda: _env_list(
            "GEOCODER_PROVIDERS", "chain,google_maps,bing_maps"
        )
    )
    default_provider: str = field(
        default_factory=lambda: _env("GEOCODER_DEFAULT_PROVIDER", "")
    )
    chain_providers: tuple[str, ...] = field(
        default_factory=lambda: _env_list("GEOCODER_CHAIN", "google_maps,geo_plugin")
    )
    # 0 = no limit (each provider returns its natural maximum)
    default_limit: int = field(
        default_factory=lambda: _env_int("GEOCODER_LIMIT", 0)
    )

    # ── Cache ──────────────────────────────────────────────────────────────
    # A very large duration means "effectively permanent".
    cache_duration: int = field(
        default_factory=lambda: _env_int("GEOCODER_CACHE_DURATION", 999999999)
    )
    cache_store: str = field(
        default_factory=lambda: _env("GEOCODER_CACHE_STORE", "memory")
    )
    redis_url: str = field(
        default_factory=lambda: _env("REDIS_URL", "redis://localhost:6379/0")
    )

    # ── HTTP transport ─────────────────────────────────────────────────────
    http_timeout: int = field(
        default_factory=lambda: _env_int("GEOCODER_HTTP_TIMEOUT", 10)
    )
    https_proxy: str = field(
        default_factory=lambda: _env("HTTPS_PROXY", "")
    )
    user_agent: str = field(
        default_factory=lambda: _env("GEOCODER_USER_AGENT", "geobridge/1.0")
    )

    # ── Google Maps ────────────────────────────────────────────────────────
    google_maps_api_key: str = field(
        default_factory=lambda: _env("GOOGLE_MAPS_API_KEY", "")
    )
    google_maps_locale: str = field(
        default_factory=lambda: _env("GOOGLE_MAPS_LOCALE", "en-US")
    )
    google_maps_region: str = field(
        default_factory=lambda: _env("GOOGLE_MAPS_REGION", "us")
    )

    # ── Bing Maps ──────────────────────────────────────────────────────────
    bing_maps_api_key: str = field(
        default_factory=lambda: _env("BING_MAPS_API_KEY", "")
    )
    bing_maps_locale: str = field(
        default_factory=lambda: _env("BING_MAPS_LOCALE", "en-US")
    )

    # ── Nominatim (OpenStreetMap) ──────────────────────────────────────────
    nominatim_root_url: str = field(
        default_factory=lambda: _env(
            "NOMINATIM_ROOT_URL", "https://nominatim.openstreetmap.org"
        )
    )

    # ── Local gazetteer (offline CSV database) ─────────────────────────────
    gazetteer_path: str = field(
        default_factory=lambda: _env("GAZETTEER_PATH", "")
    )

    @property
    def proxies(self) -> dict[str, str] | None:
        """requests-style proxy mapping, or None when no proxy is configured."""
        if not self.https_proxy:
            return None
        return {"https": self.https_proxy, "http": self.https_proxy}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns a cached singleton Settings instance.

    Use this everywhere instead of instantiating Settings() directly —
    it guarantees a single object is shared across the entire process.
    """
    return Settings()
