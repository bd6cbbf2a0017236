"""Domain entities for report listing — filters and paginated results."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")

ALL = "all"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
DEFAULT_SORT_BY = "created_at"


@dataclass
class ReportFilters:
    """Filter, sort and pagination options for listing fault reports.

    ``status``, ``priority`` and ``department`` accept the sentinel ``"all"``,
    which is equivalent to leaving them unset.
    """

    search: str | None = None
    status: str | None = None
    priority: str | None = None
    department: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    sort_by: str = DEFAULT_SORT_BY
    sort_order: str = "desc"  # "asc" | "desc"
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self) -> None:
        # Malformed paging falls back to defaults rather than failing
        if not isinstance(self.page, int) or self.page < 1:
            self.page = DEFAULT_PAGE
        if not isinstance(self.limit, int) or self.limit < 1:
            self.limit = DEFAULT_LIMIT
        if self.sort_order not in ("asc", "desc"):
            self.sort_order = "desc"
        if not self.sort_by:
            self.sort_by = DEFAULT_SORT_BY

    @staticmethod
    def is_active(value: str | None) -> bool:
        """True when an exact-match filter value should actually filter."""
        return bool(value) and value != ALL

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class PaginatedResult(Generic[T]):
    """One page of results plus the totals needed to render a pager."""

    data: list[T] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
