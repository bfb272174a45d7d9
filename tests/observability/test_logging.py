"""
Tests for bookbrainz_data/observability - Logging and tracing helpers.
"""
import json
import logging

import pytest
import structlog

from bookbrainz_data.observability.logging import (
    LogContext,
    LoggingConfig,
    _JsonFormatter,
    add_service_context,
    add_trace_context,
    add_timestamp,
    setup_logging,
)
from bookbrainz_data.observability.tracing import create_span


class TestProcessors:
    """Tests for structlog processors."""

    def test_service_context(self):
        processor = add_service_context("bookbrainz-data", "testing")

        event = processor(None, "info", {"event": "Edition created"})

        assert event["service"] == "bookbrainz-data"
        assert event["environment"] == "testing"

    def test_timestamp(self):
        event = add_timestamp(None, "info", {"event": "x"})

        assert "timestamp" in event

    def test_trace_context_without_span(self):
        event = add_trace_context(None, "info", {"event": "x"})

        assert "trace_id" not in event


class TestJsonFormatter:
    """Tests for the stdlib JSON formatter."""

    def test_plain_record(self):
        record = logging.LogRecord("bookbrainz_data", logging.INFO, __file__, 1, "hello", None, None)

        data = json.loads(_JsonFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"

    def test_prerendered_record_passes_through(self):
        rendered = json.dumps({"event": "Edition created", "bbid": "b"})
        record = logging.LogRecord("bookbrainz_data", logging.INFO, __file__, 1, rendered, None, None)

        assert _JsonFormatter().format(record) == rendered


class TestLogContext:
    """Tests for contextvar binding."""

    def test_binds_and_unbinds(self):
        with LogContext(bbid="b", command="UpdateEditionCommand"):
            assert structlog.contextvars.get_contextvars() == {
                "bbid": "b",
                "command": "UpdateEditionCommand",
            }

        assert structlog.contextvars.get_contextvars() == {}

    @pytest.mark.asyncio
    async def test_async_usage(self):
        async with LogContext(revision_id=3):
            assert structlog.contextvars.get_contextvars()["revision_id"] == 3

        assert "revision_id" not in structlog.contextvars.get_contextvars()


class TestCreateSpan:
    """Tests for the span helper."""

    def test_reraises(self):
        with pytest.raises(RuntimeError):
            with create_span("edition.update", attributes={"edition.bbid": "b", "skipped": None}):
                raise RuntimeError("boom")


class TestSetupLogging:
    """Tests for reconfiguring an already configured logger."""

    def test_force_applies_new_settings(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "level", root.level)

        setup_logging(LoggingConfig(level="ERROR", json_format=False, log_to_console=False), force=True)

        assert root.level == logging.ERROR
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

        setup_logging(LoggingConfig(level="WARNING", json_format=True, log_to_console=False), force=True)

        assert root.level == logging.WARNING
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_without_force_keeps_settings(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "level", root.level)
        setup_logging(LoggingConfig(level="WARNING", log_to_console=False), force=True)

        setup_logging(LoggingConfig(level="DEBUG", log_to_console=False))

        assert root.level == logging.WARNING
