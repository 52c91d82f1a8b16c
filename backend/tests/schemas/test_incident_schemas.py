"""
Incident Schema Tests
=====================

Tests for request validation and camelCase response serialization.
"""

import uuid
from datetime import datetime, UTC

import pytest
from pydantic import ValidationError

from app.schemas.incident import (
    IncidentCreate,
    IncidentResponse,
    IncidentStatsResponse,
    IncidentUpdate,
    PaginationMeta,
)


pytestmark = pytest.mark.unit


class TestIncidentCreate:

    def test_status_defaults_to_open(self):
        payload = IncidentCreate(title="t", service="s", severity="SEV1")

        assert payload.status == "OPEN"
        assert payload.owner is None

    @pytest.mark.parametrize("severity", ["SEV0", "sev1", "", "HIGH"])
    def test_unknown_severity_rejected(self, severity):
        with pytest.raises(ValidationError):
            IncidentCreate(title="t", service="s", severity=severity)

    def test_length_limits(self):
        IncidentCreate(title="x" * 200, service="x" * 100, severity="SEV1", summary="x" * 2000)

        with pytest.raises(ValidationError):
            IncidentCreate(title="x" * 201, service="s", severity="SEV1")

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            IncidentCreate(title="t", service="s", severity="SEV1", id=str(uuid.uuid4()))


class TestIncidentUpdate:

    def test_changes_contain_only_supplied_fields(self):
        update = IncidentUpdate.model_validate({"status": "MITIGATED", "owner": None})

        assert update.changes() == {"status": "MITIGATED", "owner": None}

    def test_empty_update_has_no_changes(self):
        assert IncidentUpdate().changes() == {}

    @pytest.mark.parametrize("field", ["title", "service", "severity", "status"])
    def test_required_columns_cannot_be_nulled(self, field):
        with pytest.raises(ValidationError):
            IncidentUpdate.model_validate({field: None})

    @pytest.mark.parametrize("field", ["owner", "summary"])
    def test_optional_columns_can_be_nulled(self, field):
        assert IncidentUpdate.model_validate({field: None}).changes() == {field: None}

    def test_timestamps_not_writable(self):
        with pytest.raises(ValidationError):
            IncidentUpdate.model_validate({"updatedAt": "2024-01-01T00:00:00Z"})


class TestResponseSerialization:

    def test_incident_uses_camel_case(self):
        now = datetime(2024, 5, 1, 9, 30)
        response = IncidentResponse(
            id=uuid.uuid4(),
            title="t",
            service="s",
            severity="SEV2",
            status="OPEN",
            created_at=now,
            updated_at=now,
        )

        dumped = response.model_dump(by_alias=True)

        assert {"createdAt", "updatedAt"} <= set(dumped)
        assert "created_at" not in dumped

    def test_naive_timestamps_read_as_utc(self):
        now = datetime(2024, 5, 1, 9, 30)
        response = IncidentResponse(
            id=uuid.uuid4(),
            title="t",
            service="s",
            severity="SEV2",
            status="OPEN",
            created_at=now,
            updated_at=now,
        )

        assert response.created_at.tzinfo is UTC

    def test_pagination_meta_keys(self):
        meta = PaginationMeta(page=1, limit=20, total=0, total_pages=0, has_next=False, has_prev=False)

        assert set(meta.model_dump(by_alias=True)) == {
            "page", "limit", "total", "totalPages", "hasNext", "hasPrev",
        }

    def test_stats_keys_are_labels(self):
        stats = IncidentStatsResponse(
            total=1,
            by_status={"OPEN": 1, "MITIGATED": 0, "RESOLVED": 0},
            by_severity={"SEV1": 1, "SEV2": 0, "SEV3": 0, "SEV4": 0},
        )

        dumped = stats.model_dump(by_alias=True, mode="json")

        assert dumped["byStatus"]["OPEN"] == 1
        assert dumped["bySeverity"]["SEV4"] == 0
