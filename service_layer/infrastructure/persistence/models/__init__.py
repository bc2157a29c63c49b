"""ORM mixins shared by office-scoped models."""

from service_layer.infrastructure.persistence.models.mixins import (
    OfficeMixin,
    SoftDeleteMixin,
    deleted_now,
)

__all__ = ["OfficeMixin", "SoftDeleteMixin", "deleted_now"]
