"""
Logging Tests
=============

Tests for processor selection, request id binding and the
execution time decorator.
"""

import pytest
import structlog
from structlog.testing import capture_logs

from app.core.config import Settings
from app.core.logging import (
    add_request_id,
    get_processors,
    log_execution_time,
    request_id_context,
)


pytestmark = pytest.mark.unit


class TestProcessors:

    def test_json_renderer(self):
        processors = get_processors(Settings(_env_file=None, LOG_FORMAT="json"))

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        processors = get_processors(Settings(_env_file=None, LOG_FORMAT="console"))

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


class TestRequestIdProcessor:

    def test_adds_request_id_when_set(self):
        token = request_id_context.set("req-1")
        try:
            event = add_request_id(None, "info", {"event": "x"})
        finally:
            request_id_context.reset(token)

        assert event["request_id"] == "req-1"

    def test_omits_request_id_outside_request(self):
        assert "request_id" not in add_request_id(None, "info", {"event": "x"})


class TestLogExecutionTime:

    def test_logs_completion(self):
        with capture_logs() as logs:
            log = structlog.get_logger("timing")

            @log_execution_time(log, "list_incidents")
            def work():
                return 42

            assert work() == 42

        assert logs[0]["event"] == "list_incidents_completed"
        assert logs[0]["success"] is True

    def test_logs_failure_and_reraises(self):
        with capture_logs() as logs:
            log = structlog.get_logger("timing")

            @log_execution_time(log, "list_incidents")
            def work():
                raise RuntimeError("boom")

            with pytest.raises(RuntimeError):
                work()

        assert logs[0]["event"] == "list_incidents_failed"
        assert logs[0]["log_level"] == "error"
        assert logs[0]["error_type"] == "RuntimeError"
