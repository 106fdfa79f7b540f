"""Unit test fixtures (mocks and stubs).

Provides mock collaborators for testing components in isolation.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from range_client.exceptions import StatusError, TransportError
from range_client.models.outcome import Outcome
from range_client.transport.executor import AttemptExecutor


@pytest.fixture
def mock_executor():
    """Mock AttemptExecutor; set ``execute.side_effect`` per test."""
    mock = MagicMock(spec=AttemptExecutor)
    mock.execute = AsyncMock(return_value=Outcome.success(b"host1\nhost2\n"))
    return mock


@pytest.fixture
def timeout_outcome() -> Outcome:
    """Retryable failure (transport timeout) under the default predicate."""
    return Outcome.failure(TransportError.from_exception(httpx.ReadTimeout("timed out")))


@pytest.fixture
def status_outcome() -> Outcome:
    """Non-retryable failure (bad gateway) under the default predicate."""
    return Outcome.failure(StatusError(502, "Bad Gateway", body=b"upstream down"))
