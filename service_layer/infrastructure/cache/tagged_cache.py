"""Tag-scoped cache on top of any CacheProtocol store.

Every tag has a version token stored under tag_version_key(). A scope
(set of tags) derives its namespace from the current tokens of all its
tags, and entry keys embed that namespace. Flushing a tag rotates its
token, so every entry stored under a scope containing the tag becomes
unreachable at once and expires by TTL. Forgetting deletes a single
entry of the scope's current namespace.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, TypeVar

from pydantic import TypeAdapter

from service_layer.core.constants import CACHE_PREFIX_SERVICE
from service_layer.infrastructure.cache.cache_protocol import CacheProtocol
from service_layer.infrastructure.cache.keys import entry_key, tag_version_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaggedCache:
    """Factory of tag scopes sharing one store and key prefix."""

    def __init__(
        self, store: CacheProtocol, prefix: str = CACHE_PREFIX_SERVICE
    ) -> None:
        self.store = store
        self.prefix = prefix

    def tags(self, names: Sequence[str]) -> TaggedCacheScope:
        """Return a scope over the given tags (order matters for the namespace)."""
        return TaggedCacheScope(self, tuple(names))


class TaggedCacheScope:
    """Read-through, forget and flush operations for one set of tags."""

    def __init__(self, cache: TaggedCache, names: tuple[str, ...]) -> None:
        if not names:
            raise ValueError("A tagged cache scope needs at least one tag")
        self._cache = cache
        self.names = names

    @property
    def _store(self) -> CacheProtocol:
        return self._cache.store

    async def _tag_version(self, name: str) -> str:
        key = tag_version_key(self._cache.prefix, name)
        version = await self._store.get(key)
        if version is None:
            version = uuid.uuid4().hex
            await self._store.set(key, version)
        return str(version)

    async def namespace(self) -> str:
        """Digest of the current version tokens of all tags in the scope."""
        versions = [await self._tag_version(name) for name in self.names]
        return hashlib.sha1("|".join(versions).encode()).hexdigest()

    async def _item_key(self, key: Any, namespace: str | None = None) -> str:
        if namespace is None:
            namespace = await self.namespace()
        return entry_key(self._cache.prefix, namespace, str(key))

    async def get(self, key: Any) -> Any | None:
        return await self._store.get(await self._item_key(key))

    async def put(self, key: Any, value: Any, ttl: int | None = None) -> None:
        await self._store.set(await self._item_key(key), value, ttl)

    async def remember(
        self,
        key: Any,
        ttl: int | None,
        producer: Callable[[], Awaitable[T]],
        adapter: TypeAdapter[T] | None = None,
    ) -> T:
        """Return the cached value for key, or await producer and cache its result.

        With an adapter, values are dumped to JSON-compatible data on store
        and validated back on hit; without one they are stored as-is.
        Producer errors propagate and leave the cache untouched.
        """
        item_key = await self._item_key(key)
        cached = await self._store.get(item_key)
        if cached is not None:
            return adapter.validate_python(cached) if adapter is not None else cached
        value = await producer()
        stored = adapter.dump_python(value, mode="json") if adapter is not None else value
        await self._store.set(item_key, stored, ttl)
        return value

    async def forget(self, key: Any) -> None:
        await self._store.delete(await self._item_key(key))

    async def forget_many(self, keys: Iterable[Any]) -> None:
        """Forget several keys, resolving the namespace once."""
        namespace = await self.namespace()
        for key in keys:
            await self._store.delete(await self._item_key(key, namespace))

    async def flush(self) -> None:
        """Invalidate every entry stored under any scope that includes these tags."""
        for name in self.names:
            await self._store.set(
                tag_version_key(self._cache.prefix, name), uuid.uuid4().hex
            )
        logger.info("Cache FLUSH: %s", ", ".join(self.names))
