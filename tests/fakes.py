"""In-memory repository double that records every call.

Views returned by with_relations() and skip_criteria() share state with
the repository they came from, so calls on any view land in one log.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from service_layer.domain.entities import OfficeScopedEntity
from service_layer.domain.exceptions import ResourceNotFoundException
from service_layer.domain.pagination import Page


class Widget(OfficeScopedEntity):
    id: int
    name: str
    status: str = "active"


@dataclass
class FakeState:
    rows: dict[int, dict[str, Any]] = field(default_factory=dict)
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    next_id: int = 1

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


def _matches(row: Mapping[str, Any], where: Mapping[str, Any]) -> bool:
    for name, value in where.items():
        if isinstance(value, (list, tuple, set, frozenset)):
            if row.get(name) not in value:
                return False
        elif row.get(name) != value:
            return False
    return True


class FakeRepository:
    """Repository double over a dict of rows.

    With office_resolver set, every query is restricted to that office
    unless the view was created with skip_criteria().
    """

    entity_type = Widget

    def __init__(
        self,
        state: FakeState | None = None,
        *,
        office_resolver: Callable[[], int] | None = None,
        relations: tuple[str, ...] = (),
        criteria_skipped: bool = False,
    ) -> None:
        self.state = state or FakeState()
        self.office_resolver = office_resolver
        self.relations = relations
        self.criteria_skipped = criteria_skipped

    def seed(self, **row: Any) -> Widget:
        row.setdefault("id", self.state.next_id)
        self.state.next_id = max(self.state.next_id, row["id"]) + 1
        row.setdefault("status", "active")
        self.state.rows[row["id"]] = dict(row)
        return Widget(**row)

    def model(self) -> str:
        return "Widget"

    def with_relations(self, relations: Sequence[str]) -> FakeRepository:
        self.state.calls.append(("with_relations", tuple(relations)))
        return FakeRepository(
            self.state,
            office_resolver=self.office_resolver,
            relations=tuple(relations),
            criteria_skipped=self.criteria_skipped,
        )

    def skip_criteria(self, status: bool = True) -> FakeRepository:
        self.state.calls.append(("skip_criteria", status))
        return FakeRepository(
            self.state,
            office_resolver=self.office_resolver,
            relations=self.relations,
            criteria_skipped=status,
        )

    def _visible(self) -> dict[int, dict[str, Any]]:
        if self.office_resolver is None or self.criteria_skipped:
            return self.state.rows
        office = self.office_resolver()
        return {k: r for k, r in self.state.rows.items() if r["office_id"] == office}

    def _row(self, entity_id: Any) -> dict[str, Any]:
        row = self._visible().get(int(entity_id))
        if row is None:
            raise ResourceNotFoundException(self.model(), str(entity_id))
        return row

    async def all(self) -> list[Widget]:
        self.state.calls.append(("all",))
        return [Widget(**r) for _, r in sorted(self._visible().items())]

    async def find(self, entity_id: Any) -> Widget:
        self.state.calls.append(("find", entity_id))
        return Widget(**self._row(entity_id))

    async def paginate(
        self,
        limit: int | None = None,
        columns: Sequence[str] | None = None,
        page: int = 1,
    ) -> Page[Widget]:
        self.state.calls.append(("paginate", limit, columns, page))
        per_page = limit or 15
        rows = [r for _, r in sorted(self._visible().items())]
        start = (page - 1) * per_page
        return Page[Widget](
            items=[Widget(**r) for r in rows[start : start + per_page]],
            total=len(rows),
            page=page,
            per_page=per_page,
        )

    async def create(self, data: Mapping[str, Any]) -> Widget:
        self.state.calls.append(("create", dict(data)))
        return self.seed(**data)

    async def update(self, data: Mapping[str, Any], entity_id: Any) -> Widget:
        self.state.calls.append(("update", dict(data), entity_id))
        row = self._row(entity_id)
        row.update(data)
        return Widget(**row)

    async def delete(self, entity_id: Any) -> int:
        self.state.calls.append(("delete", entity_id, self.criteria_skipped))
        row = self._row(entity_id)
        del self.state.rows[row["id"]]
        return 1

    async def force_delete(self, entity_id: Any) -> int:
        self.state.calls.append(("force_delete", entity_id))
        row = self._row(entity_id)
        del self.state.rows[row["id"]]
        return 1

    async def find_where(self, where: Mapping[str, Any]) -> list[Widget]:
        self.state.calls.append(("find_where", dict(where)))
        return [Widget(**r) for r in self._visible().values() if _matches(r, where)]

    async def pluck_where(self, where: Mapping[str, Any], column: str = "id") -> list[Any]:
        self.state.calls.append(("pluck_where", dict(where), column))
        return [r[column] for r in self._visible().values() if _matches(r, where)]

    async def delete_where(self, where: Mapping[str, Any]) -> int:
        self.state.calls.append(("delete_where", dict(where)))
        return await FakeBulkQuery(self, dict(where)).delete()

    def where(self, conditions: Mapping[str, Any]) -> FakeBulkQuery:
        return FakeBulkQuery(self, dict(conditions))

    def where_in(self, ids: Iterable[Any], column: str = "id") -> FakeBulkQuery:
        return FakeBulkQuery(self, {column: list(ids)})


class FakeBulkQuery:
    def __init__(self, repository: FakeRepository, where: dict[str, Any]) -> None:
        self.repository = repository
        self.conditions = where

    def where(self, conditions: Mapping[str, Any]) -> FakeBulkQuery:
        merged = dict(self.conditions)
        merged.update(conditions)
        return FakeBulkQuery(self.repository, merged)

    def _matching(self) -> list[dict[str, Any]]:
        return [
            r for r in self.repository._visible().values() if _matches(r, self.conditions)
        ]

    async def update(self, data: Mapping[str, Any]) -> int:
        self.repository.state.calls.append(("bulk_update", dict(self.conditions), dict(data)))
        rows = self._matching()
        for row in rows:
            row.update(data)
        return len(rows)

    async def delete(self) -> int:
        self.repository.state.calls.append(("bulk_delete", dict(self.conditions)))
        rows = self._matching()
        for row in rows:
            del self.repository.state.rows[row["id"]]
        return len(rows)
