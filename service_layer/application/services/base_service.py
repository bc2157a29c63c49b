"""Cached, office-scoped service over a repository.

Reads are memoized in the tagged cache; writes invalidate the caches
they affect before delegating to the repository. Cache scopes:

- CacheContext tags (office, model): single entities keyed by id and
  the full collection keyed by "all".
- CacheContext + extra context tag: query-shaped results (paginated
  listings) keyed by the serialized query parameters.

Every write forgets "all", flushes every whitelisted extra context of the
office+model, and forgets the single-entity entries it touches. The office
id is part of every tag, so one office never reads another office's entries.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import AsyncSession

from service_layer.application.interfaces.repositories import IRepository, Where
from service_layer.core.config import get_settings
from service_layer.core.constants import CACHE_KEY_ALL, EXTRA_CONTEXT_PAGINATE
from service_layer.core.logging import get_logger
from service_layer.core.office_context import current_office_id
from service_layer.domain.entities import OfficeScopedEntity
from service_layer.domain.exceptions import (
    InvalidContextException,
    InvalidQueryParameterException,
)
from service_layer.domain.pagination import Page
from service_layer.infrastructure.cache.keys import (
    extra_context_tag,
    model_tag,
    office_tag,
    query_key,
)
from service_layer.infrastructure.cache.tagged_cache import TaggedCache
from service_layer.infrastructure.persistence.database import run_in_transaction

logger = get_logger(__name__)

T = TypeVar("T")


def _positive_int(name: str, value: Any) -> int | None:
    """Positive integer query parameter; None when absent."""
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidQueryParameterException(name, value) from e
    if number < 1:
        raise InvalidQueryParameterException(name, value)
    return number


def _columns(value: Any) -> list[str] | None:
    """Columns from query params: comma-separated string or sequence; '*' means all."""
    if value is None or value == "":
        return None
    columns = value.split(",") if isinstance(value, str) else list(value)
    columns = [c.strip() for c in columns if c and c.strip()]
    if not columns or columns == ["*"]:
        return None
    return columns


class BaseService[EntityT: OfficeScopedEntity]:
    """CRUD and query operations with read-through caching and write invalidation.

    Subclasses set default_relations (eager-loaded on every cached read) and
    may extend extra_contexts to cache other query-shaped results through
    cached_query(). Every operation accepts office_id; when omitted it is
    resolved from the authenticated user.
    """

    default_relations: tuple[str, ...] = ()
    extra_contexts: tuple[str, ...] = (EXTRA_CONTEXT_PAGINATE,)

    def __init__(
        self,
        repository: IRepository[EntityT],
        cache: TaggedCache,
        *,
        office_resolver: Callable[[], int] = current_office_id,
        cache_ttl: int | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Repository of the managed entity type.
            cache: Tagged cache shared by all services.
            office_resolver: Returns the ambient office id; raises when unauthenticated.
            cache_ttl: Entry TTL in seconds; defaults to settings.cache_ttl_service.
        """
        self.repository = repository
        self.cache = cache
        self._office_resolver = office_resolver
        self.cache_ttl = (
            cache_ttl if cache_ttl is not None else get_settings().cache_ttl_service
        )
        entity_type = repository.entity_type
        self._entity_adapter: TypeAdapter[EntityT] = TypeAdapter(entity_type)
        self._list_adapter: TypeAdapter[list[EntityT]] = TypeAdapter(list[entity_type])
        self._page_adapter: TypeAdapter[Page[EntityT]] = TypeAdapter(Page[entity_type])

    @staticmethod
    async def constrained_transaction(
        session: AsyncSession, operation: Callable[[], Awaitable[T]]
    ) -> T:
        """Run operation inside a transaction on session (commit or roll back)."""
        return await run_in_transaction(session, operation)

    async def paginate(
        self, query_params: Mapping[str, Any], *, office_id: int | None = None
    ) -> Page[EntityT]:
        """Return a page of entities, cached per query string.

        Reads limit, columns and page from query_params; the whole mapping
        (sorted) is the cache key.

        Raises:
            InvalidQueryParameterException: If limit or page is not a positive integer.
        """
        limit = _positive_int("limit", query_params.get("limit"))
        page = _positive_int("page", query_params.get("page")) or 1
        columns = _columns(query_params.get("columns"))
        return await self.cached_query(
            EXTRA_CONTEXT_PAGINATE,
            query_params,
            lambda: self.repository.with_relations(self.default_relations).paginate(
                limit, columns, page
            ),
            self._page_adapter,
            office_id=office_id,
        )

    async def cached_query(
        self,
        context: str,
        query_params: Mapping[str, Any],
        producer: Callable[[], Awaitable[T]],
        adapter: TypeAdapter[T] | None = None,
        *,
        office_id: int | None = None,
    ) -> T:
        """Read-through cache for a query-shaped result in an extra context.

        Raises:
            InvalidContextException: If context is not in extra_contexts.
        """
        if context not in self.extra_contexts:
            raise InvalidContextException(context, self.extra_contexts)
        office = self._office(office_id)
        return await self.cache.tags(self._make_context(context, office)).remember(
            query_key(query_params), self.cache_ttl, producer, adapter
        )

    async def index(self, *, office_id: int | None = None) -> list[EntityT]:
        """Return every entity, cached under "all"."""
        office = self._office(office_id)
        return await self.cache.tags(self._cache_context(office)).remember(
            CACHE_KEY_ALL,
            self.cache_ttl,
            lambda: self.repository.with_relations(self.default_relations).all(),
            self._list_adapter,
        )

    async def find(self, entity_id: Any, *, office_id: int | None = None) -> EntityT:
        """Return entity by id, cached under its id.

        Raises:
            ResourceNotFoundException: From the repository; nothing is cached.
        """
        office = self._office(office_id)
        return await self.cache.tags(self._cache_context(office)).remember(
            entity_id,
            self.cache_ttl,
            lambda: self.repository.with_relations(self.default_relations).find(entity_id),
            self._entity_adapter,
        )

    async def store(
        self, data: Mapping[str, Any], *, office_id: int | None = None
    ) -> EntityT:
        """Create an entity and return it through find() (populating its cache entry)."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        created = await self.repository.create(data)
        return await self.find(created.id, office_id=office)

    async def update(
        self, data: Mapping[str, Any], entity: EntityT, *, office_id: int | None = None
    ) -> EntityT:
        """Update an entity and return the fresh value through find()."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self.forget_model(entity, office)
        updated = await self.repository.update(data, entity.id)
        return await self.find(updated.id, office_id=office)

    async def refresh_model(
        self, entity: EntityT, *, office_id: int | None = None
    ) -> EntityT:
        """Drop cached copies of entity and read it again."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self.forget_model(entity, office)
        return await self.find(entity.id, office_id=office)

    async def delete(self, entity: EntityT, *, office_id: int | None = None) -> None:
        """Delete entity through the repository (criteria apply)."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self.forget_model(entity, office)
        await self.repository.delete(entity.id)

    async def async_delete(self, entity: EntityT) -> None:
        """Delete entity outside a request's office context (background jobs).

        Uses entity.office_id instead of the authenticated user and bypasses
        repository criteria, so it also works across offices.
        """
        office = entity.office_id
        await self._flush_extra_caches(office)
        await self.forget_model(entity, office)
        await self.repository.skip_criteria().delete(entity.id)
        logger.info(
            "Deleted %s %s of office %s without criteria",
            self.repository.model(),
            entity.id,
            office,
        )

    async def force_delete(
        self, entity: EntityT, *, office_id: int | None = None
    ) -> None:
        """Permanently delete entity, bypassing soft delete."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self.forget_model(entity, office)
        await self.repository.force_delete(entity.id)

    async def delete_all(
        self, entities: Iterable[EntityT], *, office_id: int | None = None
    ) -> int:
        return await self.delete_ids([e.id for e in entities], office_id=office_id)

    async def delete_ids(
        self, ids: Sequence[Any], *, office_id: int | None = None
    ) -> int:
        """Delete entities by id; return rows affected."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self._forget_ids(ids, office)
        return await self.repository.where_in(ids).delete()

    async def delete_where(self, where: Where, *, office_id: int | None = None) -> int:
        """Delete entities matching where; forgets exactly the ids matching now."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        ids = await self.repository.pluck_where(where, "id")
        await self._forget_ids(ids, office)
        return await self.repository.delete_where(where)

    async def update_ids(
        self,
        ids: Sequence[Any],
        data: Mapping[str, Any],
        *,
        office_id: int | None = None,
    ) -> int:
        """Bulk-update entities by id; return rows affected."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self._forget_ids(ids, office)
        return await self.repository.where_in(ids).update(data)

    async def update_ids_where(
        self,
        ids: Sequence[Any],
        data: Mapping[str, Any],
        where: Where,
        *,
        office_id: int | None = None,
    ) -> int:
        """Bulk-update entities by id that also match where; return rows affected."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        await self._forget_ids(ids, office)
        return await self.repository.where_in(ids).where(where).update(data)

    async def update_where(
        self, data: Mapping[str, Any], where: Where, *, office_id: int | None = None
    ) -> int:
        """Bulk-update entities matching where; return rows affected."""
        office = self._office(office_id)
        await self._flush_extra_caches(office)
        ids = await self.repository.pluck_where(where, "id")
        await self._forget_ids(ids, office)
        return await self.repository.where(where).update(data)

    async def forget_model(self, entity: EntityT, office_id: int | None = None) -> None:
        """Remove entity's cached entry under the given or ambient office."""
        office = self._office(office_id)
        await self.cache.tags(self._cache_context(office)).forget(entity.id)

    def _office(self, office_id: int | None) -> int:
        if office_id is not None:
            return office_id
        return self._office_resolver()

    def _cache_context(self, office_id: int) -> list[str]:
        return [office_tag(office_id), model_tag(self.repository.model())]

    def _make_context(self, context: str, office_id: int) -> list[str]:
        return [
            *self._cache_context(office_id),
            extra_context_tag(self.repository.model(), context, office_id),
        ]

    async def _forget_ids(self, ids: Iterable[Any], office_id: int) -> None:
        await self.cache.tags(self._cache_context(office_id)).forget_many(ids)

    async def _flush_extra_caches(self, office_id: int) -> None:
        """Forget "all" and flush every extra context of the office and model."""
        await self.cache.tags(self._cache_context(office_id)).forget(CACHE_KEY_ALL)
        model = self.repository.model()
        for context in self.extra_contexts:
            await self.cache.tags([extra_context_tag(model, context, office_id)]).flush()
        logger.debug("Invalidated %s listings for office %s", model, office_id)
