"""
Pagination Calculator
=====================

Computes the offset window for a page request and the metadata that goes
with it, given the total number of matching records.

A page past the last one is not an error: it yields an empty window while
the metadata still reports the real total.
"""

import math
from dataclasses import dataclass



@dataclass(frozen=True)
class PageRequest:
    """
    A requested page. Bounds are enforced at the API boundary, and the
    default size comes from the DEFAULT_PAGE_SIZE setting.
    """

    page: int
    limit: int

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.limit < 1:
            raise ValueError(f"limit must be >= 1, got {self.limit}")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


def paginate(request: PageRequest, total: int) -> PageInfo:
    """
    Build pagination metadata for a page of a result set.

    Args:
        request: The requested page and size
        total: Number of records matching the active predicate

    Returns:
        PageInfo with total_pages = ceil(total / limit)
    """
    total_pages = math.ceil(total / request.limit) if total > 0 else 0
    return PageInfo(
        page=request.page,
        limit=request.limit,
        total=total,
        total_pages=total_pages,
        has_next=request.page < total_pages,
        has_prev=request.page > 1,
    )
