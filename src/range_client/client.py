"""
Range client facade.

RangeClient is long-lived and meant to be shared by many concurrent queries.
It owns the server rotation, the transport, the retry policy and the stats
block; everything specific to one query lives in that query's task.

    async with RangeClient(["range1:80", "range2:80"], retry_count=2) as client:
        hosts = await client.query("%cluster-web")

        with QueryContext(timeout=1.5) as ctx:
            hosts = await client.query_with_deadline(ctx, "%cluster-db")
"""

import asyncio
import getpass
import os
import socket
import sys
from typing import Callable, Iterable, Optional

import structlog

from range_client.config import DEFAULT_QUERY_TIMEOUT, DEFAULT_URI_LENGTH_THRESHOLD, Settings
from range_client.context import QueryContext
from range_client.exceptions import EmptyPoolError
from range_client.models.response import RangeResponse
from range_client.monitoring.stats import QueryStats, StatsRecorder
from range_client.retry.engine import RetryOrchestrator
from range_client.retry.policy import RetryPolicy, RetryPredicate, make_default_predicate
from range_client.transport.adapter import TransportAdapter, create_default_transport
from range_client.transport.executor import AttemptExecutor
from range_client.transport.selector import RoundRobinSelector


logger = structlog.get_logger(__name__)


def build_user_agent(prefix: Optional[str] = None) -> str:
    """
    User-Agent identifying the calling program, account and host.

    Format: ``"<prefix or program name> <account>@<hostname> via range-client"``
    """
    application = prefix
    if not application:
        application = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"

    account = os.environ.get("LOGNAME", "")
    if not account:
        try:
            account = getpass.getuser()
        except (KeyError, OSError):
            account = ""
    account = account or "UNKNOWN"

    hostname = socket.gethostname() or "UNKNOWN"
    return f"{application} {account}@{hostname} via range-client"


class RangeClient:
    """
    Resolves range expressions against a pool of range servers.

    Queries go to the configured servers in round-robin order. Failed logical
    attempts are retried up to ``retry_count`` times when the retry predicate
    allows it (by default only timeouts, temporary network errors, and DNS
    failures when several servers are configured).

    Errors:
        RangeExceptionError: the server sent a RangeException header
        StatusError: non-200 status
        TransportError: network failure
        CancellationError: context cancelled or deadline passed
    """

    def __init__(
        self,
        servers: Iterable[str],
        *,
        transport: Optional[TransportAdapter] = None,
        retry_predicate: Optional[RetryPredicate] = None,
        retry_count: int = 0,
        retry_pause: float = 0.0,
        user_agent: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the client.

        Args:
            servers: "host:port" addresses, at least one
            transport: Adapter for HTTP round trips; an httpx.AsyncClient with
                bounded timeouts is created when omitted
            retry_predicate: Decides which errors are retried
            retry_count: Extra logical attempts after the first
            retry_pause: Seconds to wait before each retry
            user_agent: Prefix of the User-Agent header (program name if unset)
            settings: Transport and threshold tuning

        Raises:
            EmptyPoolError: No servers given
            InvalidRetryConfigError: Negative retry_count or retry_pause
        """
        server_list = list(servers)
        if not server_list:
            raise EmptyPoolError()
        if retry_predicate is None:
            retry_predicate = make_default_predicate(len(server_list))
        # Validates retry parameters before any resource is created.
        self.policy = RetryPolicy(
            max_retries=retry_count, pause=retry_pause, predicate=retry_predicate
        )
        self.selector = RoundRobinSelector(server_list)

        self.settings = settings
        uri_length_threshold = DEFAULT_URI_LENGTH_THRESHOLD
        metrics_enabled = True
        if settings is not None:
            uri_length_threshold = settings.URI_LENGTH_THRESHOLD
            metrics_enabled = settings.PROMETHEUS_ENABLED

        request_timeout = None
        self._owns_transport = transport is None
        if transport is None:
            transport = create_default_transport(len(server_list), settings)
            # httpx timeouts are per phase; bound the whole round trip too.
            request_timeout = settings.QUERY_TIMEOUT if settings is not None else DEFAULT_QUERY_TIMEOUT
        self.transport = transport

        self.user_agent = build_user_agent(user_agent)
        self._stats = StatsRecorder()
        self.executor = AttemptExecutor(
            transport,
            self.user_agent,
            uri_length_threshold=uri_length_threshold,
            request_timeout=request_timeout,
            metrics_enabled=metrics_enabled,
        )
        self.orchestrator = RetryOrchestrator(
            self.selector,
            self.executor,
            self.policy,
            stats=self._stats,
            metrics_enabled=metrics_enabled,
        )

        logger.info(
            "Range client initialized",
            servers=server_list,
            retry_count=retry_count,
            retry_pause=retry_pause,
            custom_transport=not self._owns_transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: Optional[TransportAdapter] = None,
        retry_predicate: Optional[RetryPredicate] = None,
    ) -> "RangeClient":
        """Build a client from environment-driven settings."""
        return cls(
            settings.SERVERS,
            transport=transport,
            retry_predicate=retry_predicate,
            retry_count=settings.RETRY_COUNT,
            retry_pause=settings.RETRY_PAUSE,
            user_agent=settings.USER_AGENT,
            settings=settings,
        )

    async def query(self, expression: str) -> list[str]:
        """Resolve ``expression`` and return one string per result."""
        return await self.query_with_deadline(QueryContext.background(), expression)

    async def query_with_deadline(self, ctx: QueryContext, expression: str) -> list[str]:
        """
        Resolve ``expression`` under ``ctx``.

        If the context is cancelled or its deadline passes first,
        CancellationError is raised even when a server answers later.
        """
        payload = await self.orchestrator.run(ctx, expression)
        return RangeResponse.from_bytes(payload).split()

    async def query_raw(self, expression: str, ctx: Optional[QueryContext] = None) -> bytes:
        """Resolve ``expression`` and return the unsplit payload."""
        return await self.orchestrator.run(ctx or QueryContext.background(), expression)

    async def query_for_each(
        self,
        ctx: QueryContext,
        expression: str,
        callback: Callable[[str], None],
    ) -> None:
        """
        Invoke ``callback`` for each result line, in order.

        Stops without further callbacks once ``ctx`` is cancelled, and raises
        CancellationError in that case.
        """
        payload = await self.orchestrator.run(ctx, expression)
        for line in RangeResponse.from_bytes(payload).split():
            if ctx.cancelled:
                raise ctx.error()
            callback(line)
            # Let a canceller run between callbacks on large responses.
            await asyncio.sleep(0)
        if ctx.cancelled:
            raise ctx.error()

    async def query_many(
        self,
        expressions: Iterable[str],
        ctx: Optional[QueryContext] = None,
    ) -> list[list[str]]:
        """
        Resolve several expressions concurrently.

        Results come back in input order; the first error is raised.
        """
        ctx = ctx or QueryContext.background()
        return list(
            await asyncio.gather(
                *(self.query_with_deadline(ctx, expression) for expression in expressions)
            )
        )

    def stats(self) -> QueryStats:
        """Outcome counts since the previous call (counters are reset)."""
        return self._stats.snapshot()

    async def aclose(self) -> None:
        await self.orchestrator.aclose()
        if self._owns_transport:
            await self.transport.aclose()
            logger.debug("Closed range client transport")

    async def __aenter__(self) -> "RangeClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"servers={list(self.selector.servers)}, "
            f"retry_count={self.policy.max_retries})"
        )
