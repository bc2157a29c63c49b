"""Cache: key/value stores, tagged cache and cache key utilities.

Used by the cached service layer. Stores implement CacheProtocol; tag and
entry key format is in keys.py (DRY).
"""

from service_layer.infrastructure.cache.cache_protocol import CacheProtocol
from service_layer.infrastructure.cache.keys import (
    entry_key,
    extra_context_tag,
    model_tag,
    office_tag,
    query_key,
    tag_version_key,
)
from service_layer.infrastructure.cache.memory_cache import MemoryCacheStore
from service_layer.infrastructure.cache.redis_cache import RedisCacheStore
from service_layer.infrastructure.cache.tagged_cache import TaggedCache, TaggedCacheScope

__all__ = [
    "CacheProtocol",
    "MemoryCacheStore",
    "RedisCacheStore",
    "TaggedCache",
    "TaggedCacheScope",
    "entry_key",
    "extra_context_tag",
    "model_tag",
    "office_tag",
    "query_key",
    "tag_version_key",
]
