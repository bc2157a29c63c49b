"""Repository criteria: query constraints applied to every statement.

Criteria narrow SELECT, UPDATE and DELETE statements alike. A repository
view created with skip_criteria() ignores them.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from service_layer.core.office_context import current_office_id

StatementT = TypeVar("StatementT")


class Criterion(Protocol):
    """Constraint applied by a repository to its statements."""

    def apply(self, statement: StatementT, model: type[Any]) -> StatementT:
        """Return statement narrowed for model."""
        ...


class OfficeCriterion:
    """Restrict rows to the authenticated user's office."""

    def __init__(
        self,
        office_resolver: Callable[[], int] = current_office_id,
        column: str = "office_id",
    ) -> None:
        self._office_resolver = office_resolver
        self.column = column

    def apply(self, statement: StatementT, model: type[Any]) -> StatementT:
        return statement.where(  # type: ignore[attr-defined]
            getattr(model, self.column) == self._office_resolver()
        )
