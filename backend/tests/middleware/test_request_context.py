"""
Request Context Middleware Tests
================================

Tests for request id propagation and response headers.
"""

import uuid

import pytest
from fastapi.testclient import TestClient


pytestmark = pytest.mark.integration


class TestRequestId:

    def test_generated_when_absent(self, client: TestClient):
        response = client.get("/api/health")

        uuid.UUID(response.headers["X-Request-ID"])

    def test_incoming_id_is_echoed(self, client: TestClient):
        response = client.get("/api/health", headers={"X-Request-ID": "trace-abc-123"})

        assert response.headers["X-Request-ID"] == "trace-abc-123"

    def test_each_request_gets_its_own_id(self, client: TestClient):
        first = client.get("/api/health").headers["X-Request-ID"]
        second = client.get("/api/health").headers["X-Request-ID"]

        assert first != second

    def test_headers_present_on_error_responses(self, client: TestClient):
        response = client.get(f"/api/incidents/{uuid.uuid4()}")

        assert response.status_code == 404
        assert "X-Request-ID" in response.headers
        assert float(response.headers["X-Process-Time"]) >= 0
