"""Service without cache or office scoping.

For entities without a stable office key, or where caching is unsafe.
Reads return a LazyResult the caller awaits (or resolves) when, and if,
the query should run.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator, Mapping
from typing import Any

from service_layer.application.interfaces.repositories import IRepository
from service_layer.domain.entities import Entity


class LazyResult[T]:
    """Deferred repository query. Nothing runs until resolve() or await."""

    def __init__(self, producer: Callable[[], Awaitable[T]]) -> None:
        self._producer = producer

    async def resolve(self) -> T:
        """Run the query and return its result (runs again on every call)."""
        return await self._producer()

    def __await__(self) -> Generator[Any, None, T]:
        return self.resolve().__await__()


class UncachedService[EntityT: Entity]:
    """Direct pass-through to the repository with eager-loaded default relations."""

    default_relations: tuple[str, ...] = ()

    def __init__(self, repository: IRepository[EntityT]) -> None:
        self.repository = repository

    def index(self) -> LazyResult[list[EntityT]]:
        return LazyResult(
            lambda: self.repository.with_relations(self.default_relations).all()
        )

    def find(self, entity_id: Any) -> LazyResult[EntityT]:
        return LazyResult(
            lambda: self.repository.with_relations(self.default_relations).find(entity_id)
        )

    async def store(self, data: Mapping[str, Any]) -> EntityT:
        return await self.repository.create(data)

    async def update(self, data: Mapping[str, Any], entity: EntityT) -> EntityT:
        return await self.repository.update(data, entity.id)

    async def delete(self, entity: EntityT) -> None:
        await self.repository.delete(entity.id)

    async def force_delete(self, entity: EntityT) -> None:
        await self.repository.force_delete(entity.id)
