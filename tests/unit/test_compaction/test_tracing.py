"""Unit tests for compaction tracing."""

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from context_compaction import tracing


@pytest.fixture
def span_exporter(monkeypatch):
    """Route compaction spans to an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing, "_tracer", provider.get_tracer("test"))
    return exporter


def big_conversation() -> list[dict]:
    return [{"role": "user", "content": "ab c" * 300000}]


class TestCompactionSpan:
    """Tests for the span around the compact request."""

    @pytest.mark.asyncio
    async def test_success_span(self, make_client, span_exporter):
        def handler(request):
            return httpx.Response(200, json={"output": [], "usage": {"total_tokens": 123}})

        await make_client(handler).compact(big_conversation())

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "context_compaction.compact"
        assert span.attributes["compaction.model"] == "gpt-5.2"
        assert span.attributes["compaction.original_tokens"] == 300000
        assert span.attributes["compaction.compacted_tokens"] == 123
        assert span.status.status_code == StatusCode.OK

    @pytest.mark.asyncio
    async def test_failure_span(self, make_client, span_exporter):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        await make_client(handler).compact(big_conversation())

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert "compaction.compacted_tokens" not in span.attributes
        assert any(event.name == "exception" for event in span.events)

    @pytest.mark.asyncio
    async def test_no_span_when_not_triggered(self, make_client, span_exporter):
        await make_client().compact([{"role": "user", "content": "hello"}])

        assert span_exporter.get_finished_spans() == ()
