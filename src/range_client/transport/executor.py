"""
Single logical attempt against one range server.

The executor prefers GET, because every range server supports it, and
switches to PUT first when the GET URI would be too long. Servers signal
the other method through the status code:

    414 URI Too Long        -> try again with PUT
    405 Method Not Allowed  -> try again with GET

Each method is tried at most once per logical attempt, so one attempt costs
at most two round trips.
"""

import asyncio
import time
from typing import Optional
from urllib.parse import quote_plus

import httpx
import structlog

from range_client.config import DEFAULT_URI_LENGTH_THRESHOLD, PUT_CONTENT_TYPE
from range_client.context import QueryContext
from range_client.exceptions import StatusError, TransportError
from range_client.models.outcome import Outcome, OutcomeKind, QueryAttempt
from range_client.monitoring.metrics import range_http_requests_total
from range_client.transport.adapter import TransportAdapter
from range_client.transport.classifier import ResponseClassifier


logger = structlog.get_logger(__name__)

GET = "GET"
PUT = "PUT"

# Status code that asks for the other method -> method to use next.
NEGOTIATION_STATUSES = {
    httpx.codes.REQUEST_URI_TOO_LONG: PUT,
    httpx.codes.METHOD_NOT_ALLOWED: GET,
}

_OTHER_METHOD = {GET: PUT, PUT: GET}


class AttemptExecutor:
    """
    Issues one logical attempt (one or two HTTP requests) to one server.

    Attributes:
        transport: Adapter performing the HTTP round trips
        classifier: Maps responses to outcomes
        user_agent: User-Agent header sent with every request
        uri_length_threshold: GET URIs longer than this go out as PUT first
        request_timeout: Optional bound on one round trip, body included
    """

    def __init__(
        self,
        transport: TransportAdapter,
        user_agent: str,
        classifier: Optional[ResponseClassifier] = None,
        uri_length_threshold: int = DEFAULT_URI_LENGTH_THRESHOLD,
        request_timeout: Optional[float] = None,
        metrics_enabled: bool = True,
    ):
        self.transport = transport
        self.user_agent = user_agent
        self.classifier = classifier or ResponseClassifier()
        self.uri_length_threshold = uri_length_threshold
        self.request_timeout = request_timeout
        self.metrics_enabled = metrics_enabled

    async def execute(self, ctx: QueryContext, expression: str, server: str) -> Outcome:
        """
        Run one logical attempt of ``expression`` against ``server``.

        Never raises for protocol or network failures; every result is an
        Outcome so the orchestrator can apply its retry policy.
        """
        endpoint = f"http://{server}/range/list"
        escaped = quote_plus(expression, safe="")
        uri = f"{endpoint}?{escaped}"

        method = PUT if len(uri) > self.uri_length_threshold else GET
        tried: list[str] = []
        last: Optional[Outcome] = None

        while method not in tried:
            tried.append(method)
            attempt = QueryAttempt(
                expression=expression, server=server, method=method, tries=len(tried)
            )

            try:
                request = self._build_request(method, uri, endpoint, escaped)
            except (httpx.InvalidURL, ValueError, TypeError) as exc:
                logger.debug(
                    "Cannot build range request, switching method",
                    server=server,
                    method=method,
                    error=str(exc),
                )
                last = Outcome.failure(TransportError.from_exception(exc))
                method = _OTHER_METHOD[method]
                continue

            if ctx.cancelled:
                return Outcome.cancelled(ctx.error())

            outcome = await self._round_trip(attempt, request)

            error = outcome.error
            if isinstance(error, StatusError) and error.status_code in NEGOTIATION_STATUSES:
                fallback = NEGOTIATION_STATUSES[error.status_code]
                logger.debug(
                    "Range server asked for another method",
                    server=server,
                    method=method,
                    status_code=error.status_code,
                    fallback=fallback,
                )
                last = outcome
                method = fallback
                continue
            return outcome

        # Both methods were tried without a definitive answer.
        return last

    def _build_request(self, method: str, uri: str, endpoint: str, escaped: str) -> httpx.Request:
        headers = {"User-Agent": self.user_agent}
        if method == GET:
            return self.transport.build_request(GET, uri, headers=headers)
        headers["Content-Type"] = PUT_CONTENT_TYPE
        return self.transport.build_request(
            PUT, endpoint, content=f"query={escaped}".encode("ascii"), headers=headers
        )

    async def _round_trip(self, attempt: QueryAttempt, request: httpx.Request) -> Outcome:
        start_time = time.monotonic()
        try:
            if self.request_timeout is None:
                outcome = await self._send_and_classify(request)
            else:
                outcome = await asyncio.wait_for(
                    self._send_and_classify(request), timeout=self.request_timeout
                )
        except asyncio.TimeoutError:
            exc = httpx.TimeoutException(
                f"range request exceeded {self.request_timeout}s", request=request
            )
            outcome = Outcome.failure(TransportError.from_exception(exc))
        except (httpx.HTTPError, OSError) as exc:
            outcome = Outcome.failure(TransportError.from_exception(exc))

        status = "error"
        if outcome.ok:
            status = str(httpx.codes.OK)
        elif isinstance(outcome.error, StatusError):
            status = str(outcome.error.status_code)
        elif outcome.kind is OutcomeKind.RANGE_EXCEPTION:
            status = str(httpx.codes.OK)

        if self.metrics_enabled:
            range_http_requests_total.labels(method=attempt.method, status=status).inc()

        logger.debug(
            "Range request completed",
            server=attempt.server,
            method=attempt.method,
            tries=attempt.tries,
            status=status,
            outcome=outcome.kind.value,
            latency_ms=int((time.monotonic() - start_time) * 1000),
        )
        return outcome

    async def _send_and_classify(self, request: httpx.Request) -> Outcome:
        response = await self.transport.send(request, stream=True)
        try:
            return await self.classifier.classify(response)
        finally:
            # classify() has read the body to the end; closing hands the
            # connection back to the pool.
            await response.aclose()
