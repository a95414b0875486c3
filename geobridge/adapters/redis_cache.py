"""
adapters/redis_cache.py
──────────────────────────────────────────────────────────────────────────────
Implements CachePort on Redis.

Values are stored as a JSON array of Address objects (Pydantic round-trip)
with SETEX, so Redis enforces the TTL.  Redis errors are re-raised as
CacheError; QueryCache turns those into a logged cache miss.

Required env vars:
  GEOCODER_CACHE_STORE=redis
  REDIS_URL             — default: redis://localhost:6379/0
"""
from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError
from redis import Redis
from redis.exceptions import RedisError

from geobridge.domain.exceptions import CacheError
from geobridge.domain.models import Address

logger = logging.getLogger(__name__)

_ADDRESS_LIST = TypeAdapter(list[Address])


class RedisCacheStore:
    """Redis-backed store.

    Args:
        client: A connected ``redis.Redis`` client.
    """

    def __init__(self, client: Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        logger.info("Connecting Redis cache store | url=%s", url.split("@")[-1])
        return cls(Redis.from_url(url))

    def has(self, key: str) -> bool:
        try:
            return bool(self._client.exists(key))
        except RedisError as exc:
            raise CacheError(f"Redis EXISTS failed for {key}: {exc}") from exc

    def get(self, key: str) -> list[Address] | None:
        try:
            raw = self._client.get(key)
        except RedisError as exc:
            raise CacheError(f"Redis GET failed for {key}: {exc}") from exc
        if raw is None:
            return None
        try:
            return _ADDRESS_LIST.validate_json(raw)
        except ValidationError as exc:
            raise CacheError(f"Corrupt cache entry under {key}: {exc}") from exc

    def put(self, key: str, value: list[Address], ttl: int) -> None:
        try:
            self._client.setex(key, ttl, _ADDRESS_LIST.dump_json(value))
        except RedisError as exc:
            raise CacheError(f"Redis SETEX failed for {key}: {exc}") from exc
