"""Ports: repository and service protocols."""

from service_layer.application.interfaces.repositories import (
    IBulkQuery,
    IRepository,
    Where,
)
from service_layer.application.interfaces.services import IBaseService, IUncachedService

__all__ = ["IBaseService", "IBulkQuery", "IRepository", "IUncachedService", "Where"]
