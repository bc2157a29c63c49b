"""Repository implementations (SQLAlchemy)."""

from service_layer.infrastructure.persistence.repositories.base import (
    SqlAlchemyRepository,
    SqlBulkQuery,
)

__all__ = ["SqlAlchemyRepository", "SqlBulkQuery"]
