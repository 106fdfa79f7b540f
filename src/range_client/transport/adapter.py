"""
Transport adapter contract and the default httpx-backed implementation.

The attempt executor only needs "build one request, send it, get one
response back as a stream". ``httpx.AsyncClient`` already provides that, so
any AsyncClient (a real one, or one mounted on ``httpx.MockTransport`` in
tests) satisfies the protocol. Connection pooling stays inside httpx.
"""

from typing import Any, Optional, Protocol, runtime_checkable

import httpx
import structlog

from range_client.config import (
    DEFAULT_DIAL_TIMEOUT,
    DEFAULT_KEEPALIVE_EXPIRY,
    DEFAULT_MAX_IDLE_CONNS_PER_HOST,
    DEFAULT_QUERY_TIMEOUT,
    Settings,
)


logger = structlog.get_logger(__name__)


@runtime_checkable
class TransportAdapter(Protocol):
    """Anything that can do one HTTP request and hand back one response."""

    def build_request(
        self,
        method: str,
        url: Any,
        *,
        content: Any = None,
        headers: Any = None,
    ) -> httpx.Request:
        ...

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        ...


def create_default_transport(
    server_count: int = 1,
    settings: Optional[Settings] = None,
) -> httpx.AsyncClient:
    """
    Build the transport used when the caller supplies none.

    WARNING: an AsyncClient without timeouts can hang forever on a buggy
    range server or a poor network, so the defaults always bound the query.

    Args:
        server_count: Number of configured servers, used to size the idle pool
        settings: Optional settings overriding the default timeouts

    Returns:
        httpx.AsyncClient configured with connect/overall timeouts and
        keep-alive limits
    """
    query_timeout = DEFAULT_QUERY_TIMEOUT
    dial_timeout = DEFAULT_DIAL_TIMEOUT
    keepalive_expiry = DEFAULT_KEEPALIVE_EXPIRY
    idle_per_host = DEFAULT_MAX_IDLE_CONNS_PER_HOST
    if settings is not None:
        query_timeout = settings.QUERY_TIMEOUT
        dial_timeout = settings.DIAL_TIMEOUT
        keepalive_expiry = settings.KEEPALIVE_EXPIRY
        idle_per_host = settings.MAX_IDLE_CONNS_PER_HOST

    # httpx has no per-host idle limit; size the shared pool per server.
    limits = httpx.Limits(
        max_keepalive_connections=max(idle_per_host, 0) * max(server_count, 1),
        keepalive_expiry=keepalive_expiry,
    )
    timeout = httpx.Timeout(query_timeout, connect=dial_timeout)

    logger.debug(
        "Created default range transport",
        query_timeout=query_timeout,
        dial_timeout=dial_timeout,
        keepalive_expiry=keepalive_expiry,
        max_keepalive_connections=limits.max_keepalive_connections,
    )
    return httpx.AsyncClient(timeout=timeout, limits=limits)
