"""
BookBrainz Data - Tracing helpers

Thin wrappers over the OpenTelemetry API. Exporters and the tracer provider
are configured by the hosting application; without one, spans are no-ops.
"""
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode


def get_tracer(name: str, version: str = "2.0.0") -> trace.Tracer:
    """Get a tracer from the globally registered provider."""
    return trace.get_tracer(name, version)


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
    tracer_name: str = "bookbrainz_data",
) -> Iterator[Span]:
    """
    Context manager for creating spans with automatic error handling.

    Example:
        >>> with create_span("edition.update", attributes={"edition.bbid": bbid}) as span:
        ...     edition = await store.update(session, command)
        ...     span.set_attribute("edition.revision_id", edition.revision_id)
    """
    tracer = get_tracer(tracer_name)
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
