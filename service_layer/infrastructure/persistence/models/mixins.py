"""SQLAlchemy mixins for office-scoped models.

OfficeMixin adds the office_id column that OfficeCriterion filters on.
SoftDeleteMixin makes SqlAlchemyRepository stamp deleted_at instead of
removing rows.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class OfficeMixin:
    """Owning office id (indexed, required)."""

    @declared_attr
    def office_id(cls) -> Mapped[int]:
        return mapped_column(Integer, nullable=False, index=True)


class SoftDeleteMixin:
    """Soft delete via deleted_at. Null means not deleted."""

    @declared_attr
    def deleted_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True, index=True)

    @property
    def trashed(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self) -> None:
        self.deleted_at = deleted_now()


def deleted_now() -> datetime:
    """Timestamp written to deleted_at."""
    return datetime.now(timezone.utc)
