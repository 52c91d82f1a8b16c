"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from app.schemas import IncidentCreate, IncidentResponse
"""

from app.schemas.incident import (
    IncidentCreate,
    IncidentUpdate,
    IncidentFilterParams,
    IncidentListParams,
    IncidentResponse,
    PaginationMeta,
    IncidentListResponse,
    IncidentStatsResponse,
    ValidationErrorDetail,
    ErrorResponse,
)

__all__ = [
    "IncidentCreate",
    "IncidentUpdate",
    "IncidentFilterParams",
    "IncidentListParams",
    "IncidentResponse",
    "PaginationMeta",
    "IncidentListResponse",
    "IncidentStatsResponse",
    "ValidationErrorDetail",
    "ErrorResponse",
]
