"""Application services: cached office-scoped service and uncached variant."""

from service_layer.application.services.base_service import BaseService
from service_layer.application.services.uncached_service import (
    LazyResult,
    UncachedService,
)

__all__ = ["BaseService", "LazyResult", "UncachedService"]
