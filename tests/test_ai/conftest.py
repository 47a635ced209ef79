"""Shared fixtures for the AI layer tests."""
from __future__ import annotations

from collections import Counter
from typing import Any, Callable

import httpx
import pytest

from notepadpro.ai import AIClient, AIConfig, AIFeatures, Transport
from notepadpro.ai.performance import PerformanceTracker

Handler = Callable[[httpx.Request], Any]


def make_transport(handler: Handler) -> httpx.MockTransport:
    """Wrap ``handler`` in a mock transport that counts requests per path."""

    counter: Counter[str] = Counter()

    def counting(request: httpx.Request) -> Any:
        counter[request.url.path] += 1
        return handler(request)

    transport = httpx.MockTransport(counting)
    transport.call_count = counter  # type: ignore[attr-defined]
    return transport


@pytest.fixture
def mock_transport():
    """Return the counting mock transport factory."""

    return make_transport


@pytest.fixture
def ai_config() -> AIConfig:
    return AIConfig(credentials=lambda: "test-key")


@pytest.fixture
def tracker() -> PerformanceTracker:
    return PerformanceTracker()


@pytest.fixture
def build_client(ai_config: AIConfig, tracker: PerformanceTracker):
    """Return a factory creating a client backed by a mock transport."""

    def factory(handler: Handler, *, config: AIConfig | None = None) -> tuple[AIClient, httpx.MockTransport]:
        transport = make_transport(handler)
        client = AIClient(
            config or ai_config,
            transport=Transport(transport=transport),
            tracker=tracker,
        )
        return client, transport

    return factory


@pytest.fixture
def build_features(build_client):
    def factory(handler: Handler, *, config: AIConfig | None = None) -> tuple[AIFeatures, httpx.MockTransport]:
        client, transport = build_client(handler, config=config)
        return AIFeatures(client), transport

    return factory
