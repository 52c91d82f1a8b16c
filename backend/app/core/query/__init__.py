"""
Incident listing query building: filter predicates, sort resolution and
pagination.
"""

from .filters import (
    MATCH_ALL,
    And,
    Contains,
    InSet,
    Or,
    Predicate,
    build_filter_predicate,
    compile_predicate,
    split_csv,
)
from .pagination import PageInfo, PageRequest, paginate
from .sorting import SortSpec, resolve_sort

__all__ = [
    "MATCH_ALL",
    "And",
    "Contains",
    "InSet",
    "Or",
    "Predicate",
    "build_filter_predicate",
    "compile_predicate",
    "split_csv",
    "PageInfo",
    "PageRequest",
    "paginate",
    "SortSpec",
    "resolve_sort",
]
