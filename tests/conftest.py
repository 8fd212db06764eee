"""Shared pytest configuration and fixtures."""

import httpx
import pytest

from context_compaction.client import CompactionClient


@pytest.fixture(autouse=True)
def clean_openai_env(monkeypatch):
    """Keep ambient OPENAI_* variables out of client construction."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)


@pytest.fixture
def recorded_requests():
    """List that mock transports append outgoing requests to."""
    return []


@pytest.fixture
def make_http_client(recorded_requests):
    """Build an httpx.AsyncClient whose responses come from a handler."""

    def factory(handler):
        def record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.AsyncClient(transport=httpx.MockTransport(record))

    return factory


@pytest.fixture
def make_client(make_http_client):
    """Build an enabled CompactionClient for gpt-5.2 backed by a mock transport."""

    def factory(handler=None, **overrides):
        if handler is None:

            def handler(request):
                return httpx.Response(200, json={"output": []})

        options = {
            "model": "gpt-5.2",
            "api_key": "test-key",
            "base_url": "https://api.test.example/v1",
            "config": {
                "enabled": True,
                "threshold_percent": 0.70,
                "min_tokens_before_compaction": 10000,
            },
            "http_client": make_http_client(handler),
        }
        options.update(overrides)
        return CompactionClient(**options)

    return factory
