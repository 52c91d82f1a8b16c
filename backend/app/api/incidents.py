"""
Incident Routes Module
======================

HTTP endpoints for incidents:

- POST  /incidents            create
- GET   /incidents            filtered, sorted, paginated listing
- GET   /incidents/stats      counts by status and severity
- GET   /incidents/{id}       fetch one
- PATCH /incidents/{id}       partial update
"""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.params import incident_filters, incident_query
from app.core.exceptions import IncidentNotFoundError
from app.db.session import get_db
from app.schemas import (
    ErrorResponse,
    IncidentCreate,
    IncidentListResponse,
    IncidentResponse,
    IncidentStatsResponse,
    IncidentUpdate,
    PaginationMeta,
)
from app.services import incident_service
from app.services.incident_service import IncidentFilters, IncidentQuery

router = APIRouter(
    prefix="/incidents",
    tags=["Incidents"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)


def _parse_incident_id(incident_id: str) -> UUID:
    # Ids are opaque to clients; anything that is not one of ours is simply unknown.
    try:
        return UUID(incident_id)
    except ValueError:
        raise IncidentNotFoundError(incident_id) from None


@router.post(
    "",
    response_model=IncidentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Incident",
)
def create_incident(
    payload: IncidentCreate,
    db: Session = Depends(get_db),
) -> IncidentResponse:
    """Create an incident. Status defaults to OPEN."""
    incident = incident_service.create_incident(db, payload)
    return IncidentResponse.model_validate(incident)


@router.get(
    "",
    response_model=IncidentListResponse,
    summary="List Incidents",
    description=(
        "Filter by search text, severity list, status list and service; "
        "sort by any listed column; paginate with page and limit."
    ),
)
def list_incidents(
    query: IncidentQuery = Depends(incident_query),
    db: Session = Depends(get_db),
) -> IncidentListResponse:
    result = incident_service.list_incidents(db, query)
    return IncidentListResponse(
        data=[IncidentResponse.model_validate(item) for item in result.items],
        pagination=PaginationMeta(**asdict(result.page_info)),
    )


@router.get(
    "/stats",
    response_model=IncidentStatsResponse,
    summary="Incident Statistics",
)
def get_incident_stats(
    filters: IncidentFilters = Depends(incident_filters),
    db: Session = Depends(get_db),
) -> IncidentStatsResponse:
    """Counts of matching incidents by status and severity."""
    return IncidentStatsResponse(**incident_service.incident_stats(db, filters))


@router.get(
    "/{incident_id}",
    response_model=IncidentResponse,
    summary="Get Incident",
    responses={404: {"model": ErrorResponse, "description": "Incident not found"}},
)
def get_incident(
    incident_id: str,
    db: Session = Depends(get_db),
) -> IncidentResponse:
    incident = incident_service.get_incident(db, _parse_incident_id(incident_id))
    return IncidentResponse.model_validate(incident)


@router.patch(
    "/{incident_id}",
    response_model=IncidentResponse,
    summary="Update Incident",
    responses={404: {"model": ErrorResponse, "description": "Incident not found"}},
)
def update_incident(
    incident_id: str,
    payload: IncidentUpdate,
    db: Session = Depends(get_db),
) -> IncidentResponse:
    """Update any subset of the mutable fields."""
    incident = incident_service.update_incident(db, _parse_incident_id(incident_id), payload)
    return IncidentResponse.model_validate(incident)
