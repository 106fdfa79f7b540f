"""
Transport layer: server selection, HTTP adapter, attempt execution and
response classification.

Components:
- RoundRobinSelector: Thread-safe rotation over the configured servers
- TransportAdapter: Protocol for "one request in, one response out"
- create_default_transport: httpx.AsyncClient with bounded timeouts
- AttemptExecutor: One logical attempt with GET/PUT negotiation
- ResponseClassifier: Status/headers/body to Outcome
"""

from range_client.transport.adapter import TransportAdapter, create_default_transport
from range_client.transport.classifier import ResponseClassifier
from range_client.transport.executor import GET, PUT, AttemptExecutor
from range_client.transport.selector import RoundRobinSelector

__all__ = [
    "TransportAdapter",
    "create_default_transport",
    "ResponseClassifier",
    "AttemptExecutor",
    "RoundRobinSelector",
    "GET",
    "PUT",
]
