"""
Sort Resolver
=============

Maps a requested sort key and direction to ORDER BY clauses that define a
total order over incidents.

- severity and status sort by rank (SEV1 < SEV2 < SEV3 < SEV4,
  OPEN < MITIGATED < RESOLVED), never by label text
- owner puts unassigned incidents last in both directions
- every order ends with id ascending, so records sharing a sort value keep
  a stable position across pages
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement, case

from app.core.enums import SEVERITY_RANK, STATUS_RANK, SortField, SortOrder
from app.models.incident import Incident

DEFAULT_SORT_FIELD = SortField.CREATED_AT
DEFAULT_SORT_ORDER = SortOrder.DESC


def _rank(column, ranks: dict[str, int]) -> ColumnElement[int]:
    # Labels outside the table sort after every known label.
    return case(ranks, value=column, else_=len(ranks) + 1)


SORT_KEYS = {
    SortField.TITLE: Incident.title,
    SortField.SERVICE: Incident.service,
    SortField.OWNER: Incident.owner,
    SortField.CREATED_AT: Incident.created_at,
    SortField.UPDATED_AT: Incident.updated_at,
    SortField.SEVERITY: _rank(Incident.severity, SEVERITY_RANK),
    SortField.STATUS: _rank(Incident.status, STATUS_RANK),
}


@dataclass(frozen=True)
class SortSpec:
    field: SortField = DEFAULT_SORT_FIELD
    order: SortOrder = DEFAULT_SORT_ORDER


def resolve_sort(spec: SortSpec) -> list[ColumnElement]:
    """
    Resolve a sort spec into ORDER BY clauses.

    Args:
        spec: Requested sort field and direction

    Returns:
        Clauses to pass to `Select.order_by(*clauses)`
    """
    key = SORT_KEYS[spec.field]
    clauses: list[ColumnElement] = []

    if spec.field is SortField.OWNER:
        clauses.append(Incident.owner.is_(None).asc())

    clauses.append(key.asc() if spec.order is SortOrder.ASC else key.desc())
    clauses.append(Incident.id.asc())
    return clauses
