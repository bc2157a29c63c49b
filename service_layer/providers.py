"""Composition root: binds cache stores and services.

get_cache_store() picks the backend from settings once per process;
build_service() wires a repository to the shared tagged cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from service_layer.application.interfaces.repositories import IRepository
from service_layer.application.services.base_service import BaseService
from service_layer.application.services.uncached_service import UncachedService
from service_layer.core.config import get_settings
from service_layer.infrastructure.cache.cache_protocol import CacheProtocol
from service_layer.infrastructure.cache.memory_cache import MemoryCacheStore
from service_layer.infrastructure.cache.redis_cache import RedisCacheStore
from service_layer.infrastructure.cache.tagged_cache import TaggedCache


@lru_cache
def get_cache_store() -> CacheProtocol:
    """Return the process-wide cache store for settings.cache_backend.

    The Redis store still needs connect() (done by the app lifespan).
    """
    if get_settings().cache_backend == "memory":
        return MemoryCacheStore(maxsize=get_settings().cache_memory_maxsize)
    return RedisCacheStore()


@lru_cache
def get_tagged_cache() -> TaggedCache:
    return TaggedCache(get_cache_store(), prefix=get_settings().cache_key_prefix)


def build_service[S: BaseService[Any]](
    repository: IRepository[Any],
    service_class: type[S] = BaseService,  # type: ignore[assignment]
    **kwargs: Any,
) -> S:
    """Bind repository to service_class with the shared tagged cache."""
    kwargs.setdefault("cache", get_tagged_cache())
    return service_class(repository, **kwargs)


def build_uncached_service[U: UncachedService[Any]](
    repository: IRepository[Any],
    service_class: type[U] = UncachedService,  # type: ignore[assignment]
) -> U:
    return service_class(repository)
