"""
Retry orchestrator for logical range queries.

Wraps the AttemptExecutor with the retry policy, the pause between attempts
and server rotation, and races the whole thing against the query context.

State machine:
    PREPARING -> ATTEMPTING -> SUCCEEDED
                            -> FAILED      (budget spent or error not retryable)
                            -> PAUSING_BEFORE_RETRY -> ATTEMPTING
    any state -> CANCELLED  (context cancelled or deadline passed)

Usage:
    orchestrator = RetryOrchestrator(selector, executor, policy)
    payload = await orchestrator.run(ctx, "%cluster")
"""

import asyncio
import time
from typing import Optional

import structlog

from range_client.context import QueryContext
from range_client.models.outcome import Outcome, OutcomeKind, QueryState
from range_client.monitoring.metrics import (
    range_queries_total,
    range_query_duration_seconds,
    range_query_retries_total,
)
from range_client.monitoring.stats import StatsRecorder
from range_client.retry.policy import RetryPolicy
from range_client.transport.executor import AttemptExecutor
from range_client.transport.selector import RoundRobinSelector


logger = structlog.get_logger(__name__)


def _discard_result(task: asyncio.Task) -> None:
    """Retrieve a discarded attempt's result so asyncio does not warn about it."""
    if not task.cancelled():
        task.exception()


class RetryOrchestrator:
    """
    Runs one logical query to completion, cancellation, or budget exhaustion.

    The attempt loop runs in its own task while the caller waits for either
    that task or the context, whichever finishes first. Once the context is
    cancelled no new request is started; a request already in flight may
    still complete in the background, and its result is dropped.

    Attributes:
        selector: Source of the server for each logical attempt
        executor: Performs one logical attempt
        policy: Retry budget, pause and predicate
        stats: Per-client outcome counters
    """

    def __init__(
        self,
        selector: RoundRobinSelector,
        executor: AttemptExecutor,
        policy: RetryPolicy,
        stats: Optional[StatsRecorder] = None,
        metrics_enabled: bool = True,
    ):
        self.selector = selector
        self.executor = executor
        self.policy = policy
        self.stats = stats or StatsRecorder()
        self.metrics_enabled = metrics_enabled
        self._background: set[asyncio.Task] = set()

    async def run(self, ctx: QueryContext, expression: str) -> bytes:
        """
        Resolve ``expression`` and return the raw payload.

        Raises:
            CancellationError: Context cancelled or deadline passed
            RangeExceptionError: Server reported a RangeException
            StatusError: Server answered with a non-200 status
            TransportError: Network failure on the last attempt
        """
        start_time = time.monotonic()
        try:
            outcome = await self._race(ctx, expression)
        except asyncio.CancelledError:
            self._record(OutcomeKind.CANCELLED, start_time)
            raise

        self._record(outcome.kind, start_time)
        if outcome.ok:
            return outcome.body
        raise outcome.error

    async def aclose(self) -> None:
        """Cancel attempts still running in the background."""
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _race(self, ctx: QueryContext, expression: str) -> Outcome:
        if ctx.cancelled:
            return Outcome.cancelled(ctx.error())

        attempt_task = asyncio.create_task(self._attempt_loop(ctx, expression))
        self._background.add(attempt_task)
        attempt_task.add_done_callback(self._background.discard)
        cancel_task = asyncio.create_task(ctx.wait())

        try:
            await asyncio.wait({attempt_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            # The caller's task was cancelled; stop issuing attempts.
            ctx.cancel("caller cancelled")
            attempt_task.add_done_callback(_discard_result)
            raise
        finally:
            cancel_task.cancel()

        # Checked first: a cancelled query never delivers a late success.
        if ctx.cancelled:
            if not attempt_task.done():
                logger.debug(
                    "Range query cancelled with attempt in flight",
                    expression=expression,
                    reason=ctx.reason,
                )
            attempt_task.add_done_callback(_discard_result)
            return Outcome.cancelled(ctx.error())

        return attempt_task.result()

    async def _attempt_loop(self, ctx: QueryContext, expression: str) -> Outcome:
        attempts = 0
        state = QueryState.PREPARING

        while True:
            if attempts > 0 and self.policy.pause > 0:
                state = self._transition(expression, state, QueryState.PAUSING_BEFORE_RETRY)
                if await ctx.sleep(self.policy.pause):
                    self._transition(expression, state, QueryState.CANCELLED, reason=ctx.reason)
                    return Outcome.cancelled(ctx.error())

            if ctx.cancelled:
                self._transition(expression, state, QueryState.CANCELLED, reason=ctx.reason)
                return Outcome.cancelled(ctx.error())

            server = self.selector.next()
            state = self._transition(
                expression, state, QueryState.ATTEMPTING, server=server, attempt=attempts + 1
            )
            outcome = await self.executor.execute(ctx, expression, server)

            if outcome.ok:
                self._transition(expression, state, QueryState.SUCCEEDED, attempts=attempts + 1)
                return outcome
            if outcome.kind is OutcomeKind.CANCELLED:
                self._transition(expression, state, QueryState.CANCELLED, reason=ctx.reason)
                return outcome

            if not self.policy.should_retry(attempts, outcome.error):
                self._transition(
                    expression,
                    state,
                    QueryState.FAILED,
                    error=str(outcome.error),
                    attempts=attempts + 1,
                )
                return outcome

            attempts += 1
            if self.metrics_enabled:
                range_query_retries_total.labels(reason=outcome.kind.value).inc()
            logger.info(
                "Retrying range query",
                expression=expression,
                server=server,
                error=str(outcome.error),
                retry=attempts,
                max_retries=self.policy.max_retries,
                pause=self.policy.pause,
            )

    @staticmethod
    def _transition(
        expression: str, from_state: QueryState, to_state: QueryState, **fields
    ) -> QueryState:
        logger.debug(
            "Range query transition",
            expression=expression,
            from_state=from_state.value,
            to_state=to_state.value,
            **fields,
        )
        return to_state

    def _record(self, kind: OutcomeKind, start_time: float) -> None:
        self.stats.record(kind)
        if self.metrics_enabled:
            range_queries_total.labels(outcome=kind.value).inc()
            range_query_duration_seconds.labels(outcome=kind.value).observe(
                time.monotonic() - start_time
            )
