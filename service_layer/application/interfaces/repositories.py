"""Repository interfaces (ports) for the service layer.

Protocols define the contract that persistence implementations must fulfill
(DIP). The services treat the repository as a black box: querying, criteria
and soft-delete behaviour are the implementation's concern.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, Self, TypeVar

from service_layer.domain.pagination import Page

EntityT = TypeVar("EntityT")

# Column -> value equality conditions. Sequence values mean IN, None means IS NULL.
Where = Mapping[str, Any]


class IBulkQuery(Protocol):
    """Set-based update/delete narrowed by ids and conditions."""

    def where(self, conditions: Where) -> IBulkQuery:
        """Return a query further narrowed by conditions."""
        ...

    async def update(self, data: Mapping[str, Any]) -> int:
        """Update matching rows; return rows affected."""
        ...

    async def delete(self) -> int:
        """Delete matching rows; return rows affected."""
        ...


class IRepository(Protocol[EntityT]):
    """Protocol for repositories wrapped by the service layer."""

    entity_type: type[EntityT]

    def model(self) -> str:
        """Return the model type name used in cache tags."""
        ...

    def with_relations(self, relations: Sequence[str]) -> Self:
        """Return a repository view that eager-loads relations."""
        ...

    def skip_criteria(self, status: bool = True) -> Self:
        """Return a repository view that bypasses repository-level scoping criteria."""
        ...

    async def all(self) -> list[EntityT]:
        """Return every entity visible through the criteria."""
        ...

    async def find(self, entity_id: Any) -> EntityT:
        """Return entity by id; raise ResourceNotFoundException if missing."""
        ...

    async def paginate(
        self,
        limit: int | None = None,
        columns: Sequence[str] | None = None,
        page: int = 1,
    ) -> Page[EntityT]:
        """Return one page of entities."""
        ...

    async def create(self, data: Mapping[str, Any]) -> EntityT:
        """Persist a new entity and return it."""
        ...

    async def update(self, data: Mapping[str, Any], entity_id: Any) -> EntityT:
        """Update entity by id and return it."""
        ...

    async def delete(self, entity_id: Any) -> int:
        """Delete entity by id (soft delete when supported)."""
        ...

    async def force_delete(self, entity_id: Any) -> int:
        """Permanently delete entity by id, bypassing soft delete."""
        ...

    async def find_where(self, where: Where) -> list[EntityT]:
        """Return entities matching conditions."""
        ...

    async def pluck_where(self, where: Where, column: str = "id") -> list[Any]:
        """Return one column of the rows matching conditions."""
        ...

    async def delete_where(self, where: Where) -> int:
        """Delete rows matching conditions; return rows affected."""
        ...

    def where(self, conditions: Where) -> IBulkQuery:
        """Return a bulk query over rows matching conditions."""
        ...

    def where_in(self, ids: Iterable[Any], column: str = "id") -> IBulkQuery:
        """Return a bulk query over rows whose column is in ids."""
        ...
