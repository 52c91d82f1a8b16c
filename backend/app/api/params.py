"""
Listing Query Parameters
========================

FastAPI dependencies that validate and normalize the incident listing
query string before anything reaches the query builder:

- page / limit bounds (limit defaults to DEFAULT_PAGE_SIZE, capped by
  MAX_PAGE_SIZE)
- sortBy / sortOrder restricted to their enums
- severity / status lists: no empty elements, only known labels,
  duplicates collapsed
- search / service trimmed, blank treated as absent

Parameters arrive as raw strings and are validated together by the query
schemas, so a request with several bad parameters gets one error entry
for each of them.
"""

from typing import Optional, TypeVar

from fastapi import Query, Request
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.core.query import PageRequest, SortSpec
from app.schemas.incident import CamelModel, IncidentFilterParams, IncidentListParams
from app.services.incident_service import IncidentFilters, IncidentQuery

ParamsT = TypeVar("ParamsT", bound=CamelModel)


def _validate_query(model: type[ParamsT], request: Request, raw: dict[str, Optional[str]]) -> ParamsT:
    """
    Validate raw query values against a query schema.

    Raises:
        ValidationError: With one {"field", "message"} entry per failing parameter
    """
    data = {key: value for key, value in raw.items() if value is not None}
    try:
        return model.model_validate(data, context={"settings": request.app.state.settings})
    except PydanticValidationError as exc:
        raise ValidationError(details=[
            {
                "field": ".".join(["query", *(str(loc) for loc in error["loc"])]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]) from None


def _to_filters(params: IncidentFilterParams) -> IncidentFilters:
    return IncidentFilters(
        search=params.search,
        severity=params.severity,
        status=params.status,
        service=params.service,
    )


def incident_filters(
    request: Request,
    search: Optional[str] = Query(None, description="Substring of title, service, owner or summary"),
    severity: Optional[str] = Query(None, description="Comma-separated severities, e.g. SEV1,SEV2"),
    status: Optional[str] = Query(None, description="Comma-separated statuses, e.g. OPEN,MITIGATED"),
    service: Optional[str] = Query(None, description="Substring of the service name"),
) -> IncidentFilters:
    """Validate the filter parameters of the stats route."""
    params = _validate_query(IncidentFilterParams, request, {
        "search": search,
        "severity": severity,
        "status": status,
        "service": service,
    })
    return _to_filters(params)


def incident_query(
    request: Request,
    search: Optional[str] = Query(None, description="Substring of title, service, owner or summary"),
    severity: Optional[str] = Query(None, description="Comma-separated severities, e.g. SEV1,SEV2"),
    status: Optional[str] = Query(None, description="Comma-separated statuses, e.g. OPEN,MITIGATED"),
    service: Optional[str] = Query(None, description="Substring of the service name"),
    page: Optional[str] = Query(None, description="Page number, from 1"),
    limit: Optional[str] = Query(None, description="Incidents per page"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Sort column (default createdAt)"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc (default desc)"),
) -> IncidentQuery:
    """Validate the full listing query string and assemble the query."""
    params = _validate_query(IncidentListParams, request, {
        "search": search,
        "severity": severity,
        "status": status,
        "service": service,
        "page": page,
        "limit": limit,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    })

    return IncidentQuery(
        filters=_to_filters(params),
        sort=SortSpec(field=params.sort_by, order=params.sort_order),
        page=PageRequest(page=params.page, limit=params.limit),
    )
