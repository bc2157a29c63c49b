"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY). Used by
infrastructure cache key builders and the cached service layer.
"""

# Cache key prefixes
CACHE_PREFIX_SERVICE = "svc"
CACHE_PREFIX_TAG = "tag"
CACHE_PREFIX_ENTRY = "entry"
CACHE_PREFIX_OFFICE = "office"
CACHE_PREFIX_MODEL = "model"
CACHE_PREFIX_EXTRA = "extra"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Key of the cached full collection under a (office, model) context
CACHE_KEY_ALL = "all"

# Extra cache partitions for query-shaped results
EXTRA_CONTEXT_PAGINATE = "paginate"

DEFAULT_CACHE_TTL = 60 * 60 * 6
DEFAULT_PAGE_SIZE = 15

# Upper bound on items held by the in-memory cache store
DEFAULT_MEMORY_CACHE_SIZE = 10_000
