"""
Client for range servers.

Range servers answer host-discovery expressions over HTTP
(``GET /range/list?<expr>`` or ``PUT /range/list``) with newline-delimited
results. This package turns one logical query into one or more HTTP attempts
across a pool of servers, with GET/PUT negotiation, retries, cancellation and
typed errors.

Architecture: RangeClient -> RetryOrchestrator -> RoundRobinSelector +
AttemptExecutor -> httpx transport -> ResponseClassifier
"""

__version__ = "0.1.0"

from range_client.client import RangeClient, build_user_agent
from range_client.config import Settings
from range_client.context import QueryContext
from range_client.exceptions import (
    CancellationError,
    EmptyPoolError,
    InvalidRetryConfigError,
    RangeClientError,
    RangeExceptionError,
    StatusError,
    TransportError,
)
from range_client.models import Outcome, OutcomeKind, RangeResponse, split_lines
from range_client.monitoring import QueryStats
from range_client.retry import RetryPolicy, make_default_predicate

__all__ = [
    "RangeClient",
    "build_user_agent",
    "Settings",
    "QueryContext",
    "RangeClientError",
    "EmptyPoolError",
    "InvalidRetryConfigError",
    "TransportError",
    "RangeExceptionError",
    "StatusError",
    "CancellationError",
    "Outcome",
    "OutcomeKind",
    "RangeResponse",
    "split_lines",
    "QueryStats",
    "RetryPolicy",
    "make_default_predicate",
]
