"""
Incident Schemas Module
=======================

Pydantic models for incident request/response validation.

Responses use camelCase keys (`createdAt`, `totalPages`, ...); request
bodies accept either spelling.
"""

from datetime import datetime, UTC
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.core.config import get_settings
from app.core.enums import IncidentStatus, Severity, SortField, SortOrder
from app.core.query import split_csv


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==========================
# Request Schemas
# ==========================

class IncidentCreate(CamelModel):
    """Schema for creating a new incident."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Short headline of the incident"
    )
    service: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Owning subsystem"
    )
    severity: Severity = Field(
        ...,
        description="SEV1 (most urgent) to SEV4"
    )
    status: IncidentStatus = Field(
        default=IncidentStatus.OPEN,
        description="Lifecycle status"
    )
    owner: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Assignee; null when unassigned"
    )
    summary: Optional[str] = Field(
        default=None,
        max_length=2000,
        description="Free-form notes"
    )

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "High latency detected in api-gateway",
                "service": "api-gateway",
                "severity": "SEV2",
                "status": "OPEN",
                "owner": "priya.nair",
                "summary": "p99 latency went past 5s after the last deploy.",
            }
        },
    )


class IncidentUpdate(CamelModel):
    """
    Schema for partially updating an incident.

    Only fields present in the body are written. `owner` and `summary`
    accept null to clear them; the other fields cannot be null.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    service: Optional[str] = Field(default=None, min_length=1, max_length=100)
    severity: Optional[Severity] = None
    status: Optional[IncidentStatus] = None
    owner: Optional[str] = Field(default=None, max_length=100)
    summary: Optional[str] = Field(default=None, max_length=2000)

    model_config = ConfigDict(extra="forbid")

    @field_validator("title", "service", "severity", "status", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    def changes(self) -> dict[str, Any]:
        """Return only the fields supplied in the request."""
        return self.model_dump(exclude_unset=True, mode="json")


# ==========================
# Query Schemas
# ==========================

def _enum_list(raw: Optional[str], enum_cls: type[Enum]) -> Optional[str]:
    """Validate a comma-separated label list; duplicates are collapsed."""
    tokens = split_csv(raw)
    if not tokens:
        return None

    allowed = [member.value for member in enum_cls]
    if "" in tokens:
        raise ValueError("List contains an empty value")

    unknown = [token for token in tokens if token not in allowed]
    if unknown:
        raise ValueError(
            f"Invalid value(s) {', '.join(unknown)}. Must be one of: {', '.join(allowed)}"
        )
    return ",".join(dict.fromkeys(tokens))


class IncidentFilterParams(CamelModel):
    """
    Filter parameters shared by the listing and stats routes.

    Built from raw query strings; every invalid field is reported in one
    validation pass.
    """

    search: Optional[str] = None
    severity: Optional[str] = None
    status: Optional[str] = None
    service: Optional[str] = None

    @field_validator("search", "service")
    @classmethod
    def blank_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("severity")
    @classmethod
    def known_severities(cls, v: Optional[str]) -> Optional[str]:
        return _enum_list(v, Severity)

    @field_validator("status")
    @classmethod
    def known_statuses(cls, v: Optional[str]) -> Optional[str]:
        return _enum_list(v, IncidentStatus)


class IncidentListParams(IncidentFilterParams):
    """
    Full listing query string.

    `limit` defaults to, and is capped by, the page sizes in the settings
    passed as validation context (`{"settings": Settings}`).
    """

    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1, validate_default=True)
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @field_validator("limit")
    @classmethod
    def within_page_size(cls, v: Optional[int], info: ValidationInfo) -> int:
        settings = (info.context or {}).get("settings") or get_settings()
        if v is None:
            return settings.DEFAULT_PAGE_SIZE
        if v > settings.MAX_PAGE_SIZE:
            raise ValueError(f"Input should be less than or equal to {settings.MAX_PAGE_SIZE}")
        return v


# ==========================
# Response Schemas
# ==========================

class IncidentResponse(CamelModel):
    """Incident as returned by the API."""

    id: UUID
    title: str
    service: str
    severity: Severity
    status: IncidentStatus
    owner: Optional[str] = None
    summary: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite drops tzinfo on the way back.
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class PaginationMeta(CamelModel):
    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Records per page")
    total: int = Field(..., description="Records matching the filters")
    total_pages: int = Field(..., description="ceil(total / limit)")
    has_next: bool
    has_prev: bool


class IncidentListResponse(BaseModel):
    data: list[IncidentResponse]
    pagination: PaginationMeta


class IncidentStatsResponse(CamelModel):
    """Counts of incidents matching the filters, by status and severity."""

    total: int
    by_status: dict[IncidentStatus, int]
    by_severity: dict[Severity, int]


# ==========================
# Error Schemas
# ==========================

class ValidationErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Any = None
