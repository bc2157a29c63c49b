"""Base read-models returned by repositories and cached by services."""

from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """Entity with an identifier. Built from ORM rows via from_attributes."""

    model_config = ConfigDict(from_attributes=True)

    id: int | str


class OfficeScopedEntity(Entity):
    """Entity owned by an office (tenant). office_id partitions caches and queries."""

    office_id: int
