"""Page of results returned by repository paginate()."""

from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of items plus the totals needed to render a paginator."""

    items: list[T]
    total: int
    page: int = 1
    per_page: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def last_page(self) -> int:
        if self.per_page <= 0:
            return 1
        return max(1, ceil(self.total / self.per_page))
