"""Infrastructure exceptions for cache operations.

Cache errors extend ServiceLayerException so presentation can map them
to HTTP responses consistently.
"""

from service_layer.domain.exceptions import ServiceLayerException


class CacheException(ServiceLayerException):
    """Base exception for cache operations."""


class CacheUnavailableError(CacheException):
    """Cache store is not connected."""

    def __init__(self, backend: str, operation: str) -> None:
        super().__init__(
            f"Cache backend {backend} unavailable for {operation}",
            "CACHE_UNAVAILABLE",
            {"backend": backend, "operation": operation},
        )
