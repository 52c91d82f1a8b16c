"""
Incident Service
================

Store operations for incidents: create, fetch, partial update, the
filtered/sorted/paginated listing, and grouped counts.

Every function takes the session explicitly; there is no module-level
store handle.

Consistency:
    A listing runs two reads, a count and a windowed fetch, under the same
    predicate. They are not wrapped in a snapshot, so a write landing
    between them can make `total` disagree with the rows returned. This is
    accepted; the next request sees a consistent state again.
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.enums import IncidentStatus, Severity
from app.core.exceptions import DatabaseError, IncidentNotFoundError
from app.core.logging import get_logger, log_execution_time
from app.core.query import (
    PageInfo,
    PageRequest,
    Predicate,
    SortSpec,
    build_filter_predicate,
    compile_predicate,
    paginate,
    resolve_sort,
)
from app.models.incident import Incident, utcnow
from app.schemas.incident import IncidentCreate, IncidentUpdate

logger = get_logger(__name__)


@dataclass(frozen=True)
class IncidentFilters:
    """Filter parameters, already validated at the API boundary."""

    search: Optional[str] = None
    severity: Optional[str] = None
    status: Optional[str] = None
    service: Optional[str] = None

    def predicate(self) -> Predicate:
        return build_filter_predicate(
            search=self.search,
            severity=self.severity,
            status=self.status,
            service=self.service,
        )


@dataclass(frozen=True)
class IncidentQuery:
    page: PageRequest
    filters: IncidentFilters = field(default_factory=IncidentFilters)
    sort: SortSpec = field(default_factory=SortSpec)


@dataclass(frozen=True)
class IncidentPage:
    items: list[Incident]
    page_info: PageInfo


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "incident_write_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise DatabaseError(operation) from e


# ==========================
# Single-record operations
# ==========================

def create_incident(db: Session, payload: IncidentCreate) -> Incident:
    """
    Insert a new incident.

    Both timestamps are set to the same instant.
    """
    now = utcnow()
    incident = Incident(
        title=payload.title,
        service=payload.service,
        severity=payload.severity.value,
        status=payload.status.value,
        owner=payload.owner,
        summary=payload.summary,
        created_at=now,
        updated_at=now,
    )
    db.add(incident)
    _commit(db, "create_incident")
    db.refresh(incident)

    logger.info(
        "incident_created",
        incident_id=str(incident.id),
        service=incident.service,
        severity=incident.severity,
    )
    return incident


def get_incident(db: Session, incident_id: UUID) -> Incident:
    """
    Fetch one incident.

    Raises:
        IncidentNotFoundError: If no incident has this id
    """
    incident = db.get(Incident, incident_id)
    if incident is None:
        raise IncidentNotFoundError(str(incident_id))
    return incident


def update_incident(db: Session, incident_id: UUID, payload: IncidentUpdate) -> Incident:
    """
    Apply a partial update.

    The record is looked up first; a missing id raises before any write.
    Only supplied fields change, and `updated_at` is refreshed even when
    the body is empty. Concurrent updates are last-writer-wins.

    Raises:
        IncidentNotFoundError: If no incident has this id
    """
    incident = get_incident(db, incident_id)

    changes = payload.changes()
    for name, value in changes.items():
        setattr(incident, name, value)
    incident.updated_at = utcnow()

    _commit(db, "update_incident")
    db.refresh(incident)

    logger.info(
        "incident_updated",
        incident_id=str(incident.id),
        fields=sorted(changes),
    )
    return incident


# ==========================
# Listing
# ==========================

@log_execution_time(logger, "list_incidents")
def list_incidents(db: Session, query: IncidentQuery) -> IncidentPage:
    """
    Run a filtered, sorted, paginated listing.

    Issues one COUNT and one windowed SELECT under the same predicate.
    A page past the end returns no items with metadata still reflecting
    the total, and issues no SELECT, so any page number is accepted.

    Args:
        db: Database session
        query: Filters, sort and page

    Returns:
        The page of incidents and its pagination metadata
    """
    where = compile_predicate(query.filters.predicate())

    total = db.scalar(select(func.count()).select_from(Incident).where(where)) or 0

    items: list[Incident] = []
    if query.page.skip < total:
        stmt = (
            select(Incident)
            .where(where)
            .order_by(*resolve_sort(query.sort))
            .offset(query.page.skip)
            .limit(query.page.limit)
        )
        items = list(db.scalars(stmt).all())

    page_info = paginate(query.page, total)
    logger.debug(
        "incident_list_served",
        total=total,
        returned=len(items),
        page=page_info.page,
        limit=page_info.limit,
        sort_by=query.sort.field.value,
        sort_order=query.sort.order.value,
    )
    return IncidentPage(items=items, page_info=page_info)


def incident_stats(db: Session, filters: IncidentFilters) -> dict:
    """
    Count matching incidents by status and by severity.

    Every enum member is present in the result, with 0 when no incident
    has it.
    """
    where = compile_predicate(filters.predicate())

    by_status = {s.value: 0 for s in IncidentStatus}
    rows = db.execute(
        select(Incident.status, func.count()).where(where).group_by(Incident.status)
    ).all()
    for status_value, count in rows:
        by_status[status_value] = count

    by_severity = {s.value: 0 for s in Severity}
    rows = db.execute(
        select(Incident.severity, func.count()).where(where).group_by(Incident.severity)
    ).all()
    for severity_value, count in rows:
        by_severity[severity_value] = count

    return {
        "total": sum(by_status.values()),
        "by_status": by_status,
        "by_severity": by_severity,
    }
