"""
BookBrainz Data - Unified Error Handling

Error hierarchy shared by the store, the command handlers and the
configuration layer.

Features:
- Hierarchical exception classes with context preservation
- Error severity levels for prioritized handling
- Structured error context for debugging
- OpenTelemetry span recording
- Classification of raw SQLAlchemy failures
"""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from sqlalchemy.exc import IntegrityError, NoResultFound


class ErrorSeverity(Enum):
    """Error severity levels for prioritized handling."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Structured context for error debugging and tracing."""

    operation: str
    component: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    bbid: Optional[str] = None
    revision_id: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    stack_trace: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            "operation": self.operation,
            "component": self.component,
            "timestamp": self.timestamp.isoformat(),
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "bbid": self.bbid,
            "revision_id": self.revision_id,
            "metadata": self.metadata,
            "stack_trace": self.stack_trace,
        }

    @classmethod
    def from_current_span(
        cls,
        operation: str,
        component: str,
        **kwargs: Any
    ) -> "ErrorContext":
        """Create context from current OpenTelemetry span."""
        span = trace.get_current_span()
        trace_id = None
        span_id = None

        if span and span.is_recording():
            ctx = span.get_span_context()
            if ctx.is_valid:
                trace_id = format(ctx.trace_id, "032x")
                span_id = format(ctx.span_id, "016x")

        # Only capture a traceback while an exception is being handled
        if sys.exc_info()[0] is not None:
            kwargs.setdefault("stack_trace", traceback.format_exc())

        return cls(
            operation=operation,
            component=component,
            trace_id=trace_id,
            span_id=span_id,
            **kwargs
        )


class BookBrainzError(Exception):
    """
    Base exception for all BookBrainz data errors.

    Provides:
    - Structured error context
    - Severity level
    - Chained exception support
    - OpenTelemetry span recording
    """

    default_severity: ErrorSeverity = ErrorSeverity.ERROR
    error_code: str = "BOOKBRAINZ_ERROR"

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        severity: Optional[ErrorSeverity] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.severity = severity or self.default_severity
        self.cause = cause
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.timestamp = datetime.now(timezone.utc)

        self._record_to_span()

    def _record_to_span(self) -> None:
        """Record exception to current OpenTelemetry span."""
        span = trace.get_current_span()
        if span and span.is_recording():
            span.set_status(Status(StatusCode.ERROR, self.message))
            span.record_exception(self)
            span.set_attribute("error.code", self.error_code)
            span.set_attribute("error.severity", self.severity.value)
            span.set_attribute("error.recoverable", self.recoverable)
            if self.context:
                span.set_attribute("error.component", self.context.component)
                span.set_attribute("error.operation", self.context.operation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.to_dict() if self.context else None,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return self.message

    def with_context(self, **kwargs: Any) -> "BookBrainzError":
        """Add additional context to the error."""
        if self.context:
            self.context.metadata.update(kwargs)
        else:
            self.context = ErrorContext(
                operation="unknown",
                component="unknown",
                metadata=kwargs
            )
        return self


class ConfigError(BookBrainzError):
    """Configuration-related errors."""

    error_code = "CONFIG_ERROR"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[Type] = None,
        actual_value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        self.expected_type = expected_type
        self.actual_value = actual_value


class NotFoundError(BookBrainzError):
    """A fetch or resolve targeted a nonexistent identity, revision or key."""

    error_code = "NOT_FOUND"
    default_severity = ErrorSeverity.WARNING

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidUpdateError(BookBrainzError):
    """An update would break a mandatory invariant of the entity."""

    error_code = "INVALID_UPDATE"
    default_severity = ErrorSeverity.WARNING

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field_name = field_name


class ConstraintViolationError(BookBrainzError):
    """Foreign-key or uniqueness violation reported by the store."""

    error_code = "CONSTRAINT_VIOLATION"
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        statement: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.statement = statement


# Error mapping for automatic classification
ERROR_TYPE_MAP: Dict[Type[Exception], Type[BookBrainzError]] = {
    IntegrityError: ConstraintViolationError,
    NoResultFound: NotFoundError,
}


def classify_error(error: Exception) -> BookBrainzError:
    """Classify a generic exception into the appropriate BookBrainzError type."""
    if isinstance(error, BookBrainzError):
        return error
    if isinstance(error, IntegrityError):
        return ConstraintViolationError(
            message=str(error.orig) if error.orig is not None else str(error),
            statement=error.statement,
            cause=error,
        )
    for error_type, mapped_type in ERROR_TYPE_MAP.items():
        if isinstance(error, error_type):
            return mapped_type(
                message=str(error),
                cause=error,
            )
    return BookBrainzError(
        message=str(error),
        cause=error,
    )
