"""OpenTelemetry tracing support for compaction calls."""

from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("context_compaction")


@contextmanager
def compaction_span(model: str, original_tokens: int):
    """Open a span around a single compaction request.

    Uses whatever TracerProvider the application has configured; with none
    configured the OpenTelemetry API hands out a no-op tracer.
    """
    with _tracer.start_as_current_span("context_compaction.compact") as span:
        span.set_attribute("compaction.model", model)
        span.set_attribute("compaction.original_tokens", original_tokens)
        yield span


def record_success(span, compacted_tokens: int) -> None:
    span.set_attribute("compaction.compacted_tokens", compacted_tokens)
    span.set_status(Status(StatusCode.OK))


def record_failure(span, error: BaseException) -> None:
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))
