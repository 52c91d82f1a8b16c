"""
Enumeration Module
==================

Defines enumerations used across the application, together with the rank
tables that give severity and status their urgency and lifecycle order.
"""

from enum import Enum


class Severity(str, Enum):
    """Incident severity. SEV1 is the most urgent."""

    SEV1 = "SEV1"
    SEV2 = "SEV2"
    SEV3 = "SEV3"
    SEV4 = "SEV4"


class IncidentStatus(str, Enum):
    """Lifecycle statuses for incidents. Any status may move to any other."""

    OPEN = "OPEN"
    MITIGATED = "MITIGATED"
    RESOLVED = "RESOLVED"


class SortField(str, Enum):
    """Columns an incident listing may be ordered by."""

    TITLE = "title"
    SEVERITY = "severity"
    STATUS = "status"
    SERVICE = "service"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    OWNER = "owner"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Ordering must not depend on how the labels compare as strings.
SEVERITY_RANK: dict[str, int] = {
    Severity.SEV1.value: 1,
    Severity.SEV2.value: 2,
    Severity.SEV3.value: 3,
    Severity.SEV4.value: 4,
}

STATUS_RANK: dict[str, int] = {
    IncidentStatus.OPEN.value: 1,
    IncidentStatus.MITIGATED.value: 2,
    IncidentStatus.RESOLVED.value: 3,
}
