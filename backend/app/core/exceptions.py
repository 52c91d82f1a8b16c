"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Every exception carries an HTTP status code, a client-facing message and
optional details. The handlers in `app.main` render them as:

    {"error": <message>, "details": <details>}

Usage:
    raise IncidentNotFoundError(incident_id)
    raise ValidationError(details=[{"field": "severity", "message": "..."}])
"""

from typing import Any, Optional

from fastapi import status


class IncidentTrackerError(Exception):
    """
    Base exception class for the application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details if details is not None else {}
        super().__init__(self.message)


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(IncidentTrackerError):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class IncidentNotFoundError(NotFoundError):
    """Raised when no incident has the requested id."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Incident", identifier=identifier)


# ==========================
# Validation Exceptions
# ==========================

class ValidationError(IncidentTrackerError):
    """
    Raised when input fails validation at the API boundary.

    `details` is a list of {"field", "message"} entries, one per failing
    field.
    """

    def __init__(
        self,
        message: str = "Validation Error",
        details: Optional[list[dict[str, str]]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details or [],
        )

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(details=[{"field": field, "message": message}])


# ==========================
# Store Exceptions
# ==========================

class DatabaseError(IncidentTrackerError):
    """Raised when the record store fails unexpectedly."""

    def __init__(self, operation: str):
        super().__init__(
            message="Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        self.operation = operation
