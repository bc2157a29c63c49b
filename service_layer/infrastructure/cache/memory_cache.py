"""In-memory cache store for tests and single-process deployments.

Same contract as RedisCacheStore: JSON-serializable values, optional TTL.
Values are stored as JSON text so callers never share mutable state
with the cache. Backed by cachetools.TLRUCache: every item carries its
own expiry (infinite without a TTL), expired items are purged on each
write and the least recently used item is evicted once maxsize is hit.
"""

from __future__ import annotations

import json
import logging
import math
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

from service_layer.core.constants import DEFAULT_MEMORY_CACHE_SIZE

logger = logging.getLogger(__name__)

# (serialized value, ttl in seconds or None)
_Item = tuple[str, int | None]


def _time_to_use(key: str, item: _Item, now: float) -> float:
    ttl = item[1]
    return math.inf if ttl is None else now + ttl


class MemoryCacheStore:
    """Process-local key/value store with per-key TTL and a size bound."""

    backend = "memory"

    def __init__(
        self,
        maxsize: int = DEFAULT_MEMORY_CACHE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TLRUCache[str, _Item] = TLRUCache(
            maxsize=maxsize, ttu=_time_to_use, timer=clock
        )

    @property
    def maxsize(self) -> int:
        return int(self._cache.maxsize)

    @property
    def size(self) -> int:
        """Number of stored items after purging expired ones."""
        self._cache.expire()
        return len(self._cache)

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        item = self._cache.get(key)
        if item is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(item[0])

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self._cache[key] = (json.dumps(value), ttl)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)

    async def delete(self, key: str) -> None:
        self._cache.pop(key, None)
        logger.debug("Cache DELETE: %s", key)

    def keys(self) -> list[str]:
        """Return the live keys (expired entries are purged)."""
        self._cache.expire()
        return list(self._cache)

    def clear(self) -> None:
        """Drop every key."""
        self._cache.clear()
