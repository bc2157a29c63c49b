"""Service interfaces (ports) consumed by request handlers.

IBaseService is the full cached CRUD contract; IUncachedService is the
narrower contract of the lightweight variant whose reads return lazy
results.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from service_layer.application.interfaces.repositories import Where
from service_layer.domain.pagination import Page

if TYPE_CHECKING:
    from service_layer.application.services.uncached_service import LazyResult

EntityT = TypeVar("EntityT")


class IBaseService(Protocol[EntityT]):
    """Protocol for the cached, office-scoped service.

    Every method raises UnauthorizedUserException when office_id is omitted
    and no user is authenticated.
    """

    async def paginate(
        self, query_params: Mapping[str, Any], *, office_id: int | None = None
    ) -> Page[EntityT]: ...

    async def index(self, *, office_id: int | None = None) -> list[EntityT]: ...

    async def find(self, entity_id: Any, *, office_id: int | None = None) -> EntityT: ...

    async def store(
        self, data: Mapping[str, Any], *, office_id: int | None = None
    ) -> EntityT: ...

    async def update(
        self, data: Mapping[str, Any], entity: EntityT, *, office_id: int | None = None
    ) -> EntityT: ...

    async def refresh_model(
        self, entity: EntityT, *, office_id: int | None = None
    ) -> EntityT: ...

    async def delete(self, entity: EntityT, *, office_id: int | None = None) -> None: ...

    async def async_delete(self, entity: EntityT) -> None: ...

    async def force_delete(
        self, entity: EntityT, *, office_id: int | None = None
    ) -> None: ...

    async def delete_all(
        self, entities: Iterable[EntityT], *, office_id: int | None = None
    ) -> int: ...

    async def delete_ids(
        self, ids: Sequence[Any], *, office_id: int | None = None
    ) -> int: ...

    async def delete_where(self, where: Where, *, office_id: int | None = None) -> int: ...

    async def update_ids(
        self,
        ids: Sequence[Any],
        data: Mapping[str, Any],
        *,
        office_id: int | None = None,
    ) -> int: ...

    async def update_ids_where(
        self,
        ids: Sequence[Any],
        data: Mapping[str, Any],
        where: Where,
        *,
        office_id: int | None = None,
    ) -> int: ...

    async def update_where(
        self, data: Mapping[str, Any], where: Where, *, office_id: int | None = None
    ) -> int: ...

    async def forget_model(self, entity: EntityT, office_id: int | None = None) -> None: ...


class IUncachedService(Protocol[EntityT]):
    """Protocol for the lightweight service without cache or office scoping."""

    def index(self) -> LazyResult[list[EntityT]]: ...

    def find(self, entity_id: Any) -> LazyResult[EntityT]: ...

    async def store(self, data: Mapping[str, Any]) -> EntityT: ...

    async def update(self, data: Mapping[str, Any], entity: EntityT) -> EntityT: ...

    async def delete(self, entity: EntityT) -> None: ...

    async def force_delete(self, entity: EntityT) -> None: ...
