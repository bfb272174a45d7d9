"""
BookBrainz Data - Observability Package

Structlog logging with trace context propagation, and OpenTelemetry span
helpers. Exporters are left to the hosting application.

Usage:
    from bookbrainz_data.observability import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
"""
from bookbrainz_data.observability.logging import (
    LogContext,
    LoggingConfig,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from bookbrainz_data.observability.tracing import create_span, get_tracer

__all__ = [
    "LogContext",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
    "create_span",
    "get_tracer",
]
