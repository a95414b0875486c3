"""
adapters/transport.py
──────────────────────────────────────────────────────────────────────────────
Shared HTTP transport for the web-service provider adapters.

Uses raw ``requests`` (no vendor SDKs).  Timeout, proxy and User-Agent come
from Settings so every adapter talks to the network the same way.

Status mapping:
  401 / 403         → InvalidCredentials
  429               → QuotaExceeded
  other non-2xx     → ProviderError
  transport failure → ProviderError
  non-JSON body     → ProviderError

No retries: provider failures propagate to the caller unmodified.
"""
from __future__ import annotations

import logging
from typing import Any

import requests

from geobridge.config.settings import Settings
from geobridge.domain.exceptions import (
    InvalidCredentials,
    ProviderError,
    QuotaExceeded,
)

logger = logging.getLogger(__name__)


def get_json(
    url: str,
    params: dict[str, Any],
    settings: Settings,
    provider: str,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body.

    Args:
        url:      Endpoint URL.
        params:   Query-string parameters (None values are dropped).
        settings: Shared application settings (timeout, proxy, UA).
        provider: Provider name, used in log lines and error messages.
        headers:  Extra request headers.

    Raises:
        InvalidCredentials: On 401 / 403.
        QuotaExceeded:      On 429.
        ProviderError:      On any other failure.
    """
    request_headers = {"User-Agent": settings.user_agent, "Accept": "application/json"}
    if headers:
        request_headers.update(headers)
    clean_params = {k: v for k, v in params.items() if v is not None and v != ""}

    try:
        resp = requests.get(
            url,
            params=clean_params,
            headers=request_headers,
            timeout=settings.http_timeout,
            proxies=settings.proxies,
        )
    except requests.RequestException as exc:
        raise ProviderError(f"{provider} request failed: {exc}") from exc

    if resp.status_code in (401, 403):
        raise InvalidCredentials(
            f"{provider} returned {resp.status_code}. Check the configured API key."
        )
    if resp.status_code == 429:
        raise QuotaExceeded(f"{provider} returned 429 Too Many Requests.")
    if not resp.ok:
        raise ProviderError(
            f"{provider} HTTP {resp.status_code}: {resp.text[:300]}"
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise ProviderError(
            f"{provider} returned a non-JSON body: {resp.text[:300]}"
        ) from exc


def mask_key(api_key: str) -> str:
    """Mask an API key for logging / registry introspection."""
    if not api_key:
        return ""
    if len(api_key) <= 8:
        return "****"
    return f"{api_key[:4]}…{api_key[-4:]}"
