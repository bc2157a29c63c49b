"""Redis-based cache store.

Async Redis key/value store with TTL support and JSON values. Backs the
tagged cache used by the service layer. Errors are logged and re-raised:
a failed invalidation must never be mistaken for a successful one.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from service_layer.core.config import get_settings
from service_layer.infrastructure.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Async Redis cache store with TTL support.

    Uses service_layer.core.config for connection settings. Call connect()
    at startup and disconnect() at shutdown; an injected client is used
    as-is and counts as connected.
    """

    backend = "redis"

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize cache store.

        Args:
            redis_client: Client to use instead of connecting from settings.
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Open and ping the client; on failure the store stays unavailable."""
        if self.redis is not None:
            return
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=self.settings.redis_password.get_secret_value()
            if self.settings.redis_password
            else None,
            decode_responses=True,
            socket_connect_timeout=self.settings.redis_socket_timeout,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache unavailable.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache store connected to %s:%s",
            self.settings.redis_host,
            self.settings.redis_port,
        )

    async def disconnect(self) -> None:
        """Close the client (lifespan shutdown)."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache store disconnected")

    def is_available(self) -> bool:
        """True once connect() succeeded or a client was injected."""
        return self._connected and self.redis is not None

    def _client(self, operation: str) -> redis.Redis:
        if not self.is_available() or self.redis is None:
            raise CacheUnavailableError(self.backend, operation)
        return self.redis

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing.

        Raises:
            CacheUnavailableError: If not connected.
            redis.RedisError: On Redis failure.
        """
        client = self._client("get")
        try:
            value = await client.get(key)
        except redis.RedisError:
            logger.exception("Redis GET failed for %s", key)
            raise
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value (JSON-serialized); ttl None stores without expiry."""
        client = self._client("set")
        serialized = json.dumps(value)
        try:
            if ttl is None:
                await client.set(key, serialized)
            else:
                await client.setex(key, ttl, serialized)
        except redis.RedisError:
            logger.exception("Redis SET failed for %s", key)
            raise
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)

    async def delete(self, key: str) -> None:
        """Remove key from cache."""
        client = self._client("delete")
        try:
            await client.delete(key)
        except redis.RedisError:
            logger.exception("Redis DELETE failed for %s", key)
            raise
        logger.debug("Cache DELETE: %s", key)
