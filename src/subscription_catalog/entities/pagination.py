"""Pagination value objects."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class PageRequest:
    """A zero-based page request.

    Attributes:
        page: Zero-based page index
        size: Items per page
        sort_by: API field name to sort on (e.g. "name", "createdAt")
        direction: Sort direction
    """

    page: int = 0
    size: int = 10
    sort_by: str = "id"
    direction: SortDirection = SortDirection.DESC

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must not be negative")
        if self.size < 1:
            raise ValueError("size must be at least 1")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the totals needed to navigate."""

    items: list[T]
    page: int
    size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        if self.total_items == 0:
            return 0
        return math.ceil(self.total_items / self.size)

    def map(self, func: Callable[[T], U]) -> "Page[U]":
        """Return a page with ``func`` applied to every item."""
        return Page(
            items=[func(item) for item in self.items],
            page=self.page,
            size=self.size,
            total_items=self.total_items,
        )
