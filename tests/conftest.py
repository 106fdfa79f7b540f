"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
The wire is always simulated with httpx.MockTransport; no test needs a real
range server.
"""

from typing import Callable

import httpx
import pytest

from range_client.client import RangeClient
from range_client.config import Settings


TEST_SERVER = "range1.example.com:8081"


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_COUNT = 2
    """
    return Settings(
        SERVERS=[TEST_SERVER],
        RETRY_COUNT=0,
        RETRY_PAUSE=0.0,
        QUERY_TIMEOUT=5.0,
        DIAL_TIMEOUT=1.0,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def make_transport() -> Callable[..., httpx.AsyncClient]:
    """Factory fixture wrapping a request handler into an httpx transport.

    Usage:
        def test_something(make_transport):
            transport = make_transport(lambda request: httpx.Response(200))
    """
    def _create(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _create


@pytest.fixture
def make_client(make_transport) -> Callable[..., RangeClient]:
    """Factory fixture creating a RangeClient backed by a mock handler.

    Usage:
        def test_something(make_client):
            client = make_client(handler, retry_count=2)
    """
    def _create(handler, servers: list[str] | None = None, **kwargs) -> RangeClient:
        return RangeClient(
            servers or [TEST_SERVER],
            transport=make_transport(handler),
            **kwargs,
        )

    return _create
