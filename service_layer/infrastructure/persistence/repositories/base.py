"""Base repository: generic CRUD, bulk queries, criteria and soft delete.

Returns pydantic entities built from ORM rows (from_attributes). Views
created by with_relations() and skip_criteria() share the session.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Self

from sqlalchemy import delete as sa_delete, func, select, update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from service_layer.application.interfaces.repositories import Where
from service_layer.core.config import get_settings
from service_layer.domain.entities import Entity
from service_layer.domain.exceptions import ResourceNotFoundException
from service_layer.domain.pagination import Page
from service_layer.infrastructure.persistence.criteria import Criterion
from service_layer.infrastructure.persistence.database import Base
from service_layer.infrastructure.persistence.models.mixins import SoftDeleteMixin, deleted_now


class SqlAlchemyRepository[ModelType: Base, EntityT: Entity]:
    """Repository over one ORM model, returning entity_type instances.

    Criteria apply to every statement unless skip_criteria() is used.
    Models using SoftDeleteMixin are soft-deleted: delete() stamps
    deleted_at, reads ignore stamped rows, force_delete() removes the row.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        entity_type: type[EntityT],
        *,
        criteria: Sequence[Criterion] = (),
        default_limit: int | None = None,
    ) -> None:
        self.db = db
        self.orm_model = model
        self.entity_type = entity_type
        self.criteria = tuple(criteria)
        self.default_limit = (
            default_limit
            if default_limit is not None
            else get_settings().pagination_default_limit
        )
        self._relations: tuple[str, ...] = ()
        self._skip_criteria = False

    def model(self) -> str:
        return self.orm_model.__name__

    def with_relations(self, relations: Sequence[str]) -> Self:
        return self._clone(_relations=tuple(relations))

    def skip_criteria(self, status: bool = True) -> Self:
        return self._clone(_skip_criteria=status)

    def push_criterion(self, criterion: Criterion) -> Self:
        return self._clone(criteria=(*self.criteria, criterion))

    def _clone(self, **changes: Any) -> Self:
        clone = copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    @property
    def soft_deletes(self) -> bool:
        return issubclass(self.orm_model, SoftDeleteMixin)

    def _scoped(self, statement: Any, *, with_trashed: bool = False) -> Any:
        """Apply soft-delete filter and criteria to a select/update/delete."""
        model: Any = self.orm_model
        if self.soft_deletes and not with_trashed:
            statement = statement.where(model.deleted_at.is_(None))
        if not self._skip_criteria:
            for criterion in self.criteria:
                statement = criterion.apply(statement, self.orm_model)
        return statement

    def _select(self, *, with_trashed: bool = False) -> Any:
        model: Any = self.orm_model
        statement = self._scoped(select(self.orm_model), with_trashed=with_trashed)
        if self._relations:
            statement = statement.options(
                *(selectinload(getattr(model, name)) for name in self._relations)
            )
        return statement.order_by(model.id)

    def _conditions(self, where: Where) -> list[Any]:
        """Translate {column: value} into clauses (sequence -> IN, None -> IS NULL)."""
        model: Any = self.orm_model
        clauses = []
        for name, value in where.items():
            column = getattr(model, name, None)
            if column is None:
                raise ValueError(f"Unknown column {name!r} on {self.model()}")
            if isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == value)
        return clauses

    def _to_entity(self, obj: ModelType) -> EntityT:
        return self.entity_type.model_validate(obj)

    async def _get(self, entity_id: Any, *, with_trashed: bool = False) -> ModelType:
        model: Any = self.orm_model
        result = await self.db.execute(
            self._select(with_trashed=with_trashed).where(model.id == entity_id)
        )
        obj = result.scalar_one_or_none()
        if obj is None:
            raise ResourceNotFoundException(self.model(), str(entity_id))
        return obj

    async def all(self) -> list[EntityT]:
        result = await self.db.execute(self._select())
        return [self._to_entity(obj) for obj in result.scalars().all()]

    async def find(self, entity_id: Any) -> EntityT:
        """Return entity by id. Raises ResourceNotFoundException when missing or out of scope."""
        return self._to_entity(await self._get(entity_id))

    async def paginate(
        self,
        limit: int | None = None,
        columns: Sequence[str] | None = None,
        page: int = 1,
    ) -> Page[EntityT]:
        """Return one page ordered by id.

        With columns, only those columns are selected and entity_type must
        accept the partial row.
        """
        model: Any = self.orm_model
        per_page = limit or self.default_limit
        page = max(page, 1)
        total = (
            await self.db.execute(
                self._scoped(select(func.count()).select_from(self.orm_model))
            )
        ).scalar_one()
        if columns:
            statement = self._scoped(
                select(*(getattr(model, name) for name in columns))
            ).order_by(model.id)
        else:
            statement = self._select()
        statement = statement.offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(statement)
        if columns:
            items = [self.entity_type.model_validate(dict(row)) for row in result.mappings()]
        else:
            items = [self._to_entity(obj) for obj in result.scalars().all()]
        return Page[self.entity_type](  # type: ignore[name-defined]
            items=items, total=total, page=page, per_page=per_page
        )

    async def create(self, data: Mapping[str, Any]) -> EntityT:
        obj = self.orm_model(**data)
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return self._to_entity(obj)

    async def update(self, data: Mapping[str, Any], entity_id: Any) -> EntityT:
        obj = await self._get(entity_id)
        for name, value in data.items():
            setattr(obj, name, value)
        await self.db.flush()
        await self.db.refresh(obj)
        return self._to_entity(obj)

    async def delete(self, entity_id: Any) -> int:
        obj = await self._get(entity_id)
        if isinstance(obj, SoftDeleteMixin):
            obj.mark_deleted()
        else:
            await self.db.delete(obj)
        await self.db.flush()
        return 1

    async def force_delete(self, entity_id: Any) -> int:
        """Remove the row, including rows already soft-deleted."""
        obj = await self._get(entity_id, with_trashed=True)
        await self.db.delete(obj)
        await self.db.flush()
        return 1

    async def find_where(self, where: Where) -> list[EntityT]:
        result = await self.db.execute(self._select().where(*self._conditions(where)))
        return [self._to_entity(obj) for obj in result.scalars().all()]

    async def pluck_where(self, where: Where, column: str = "id") -> list[Any]:
        model: Any = self.orm_model
        statement = self._scoped(select(getattr(model, column))).where(
            *self._conditions(where)
        )
        result = await self.db.execute(statement)
        return list(result.scalars().all())

    async def delete_where(self, where: Where) -> int:
        return await self.where(where).delete()

    def where(self, conditions: Where) -> SqlBulkQuery:
        return SqlBulkQuery(self, self._conditions(conditions))

    def where_in(self, ids: Iterable[Any], column: str = "id") -> SqlBulkQuery:
        model: Any = self.orm_model
        return SqlBulkQuery(self, [getattr(model, column).in_(list(ids))])


class SqlBulkQuery:
    """Set-based UPDATE/DELETE through a repository's criteria and soft delete."""

    def __init__(self, repository: SqlAlchemyRepository[Any, Any], clauses: list[Any]) -> None:
        self._repository = repository
        self._clauses = clauses

    def where(self, conditions: Where) -> SqlBulkQuery:
        return SqlBulkQuery(
            self._repository,
            [*self._clauses, *self._repository._conditions(conditions)],
        )

    async def update(self, data: Mapping[str, Any]) -> int:
        repo = self._repository
        statement = repo._scoped(
            sa_update(repo.orm_model).where(*self._clauses).values(**data)
        )
        result = await repo.db.execute(statement)
        return result.rowcount

    async def delete(self) -> int:
        repo = self._repository
        if repo.soft_deletes:
            statement = sa_update(repo.orm_model).values(deleted_at=deleted_now())
        else:
            statement = sa_delete(repo.orm_model)
        result = await repo.db.execute(repo._scoped(statement.where(*self._clauses)))
        return result.rowcount
