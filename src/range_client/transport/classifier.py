"""
Response classification.

Maps one streamed HTTP response (status, headers, body) to an Outcome. The
body is always read to the end here, so the connection goes back to the
transport's pool in a reusable state whatever the outcome.
"""

import httpx
import structlog

from range_client.config import RANGE_EXCEPTION_HEADER
from range_client.exceptions import RangeExceptionError, StatusError, TransportError
from range_client.models.outcome import Outcome


logger = structlog.get_logger(__name__)


class ResponseClassifier:
    """
    Turns range server responses into outcomes.

    Rules:
    - 200 with a non-empty RangeException header: RANGE_EXCEPTION, header
      value as message, body kept for diagnostics when it could be read
    - 200 otherwise: SUCCESS with the full payload (a failed read is a
      TRANSPORT_ERROR, since the payload is the result)
    - anything else: STATUS_ERROR with code, reason and diagnostic body
    """

    def __init__(self, exception_header: str = RANGE_EXCEPTION_HEADER):
        self.exception_header = exception_header

    async def classify(self, response: httpx.Response) -> Outcome:
        if response.status_code == httpx.codes.OK:
            message = response.headers.get(self.exception_header, "")
            if message:
                return Outcome.failure(
                    RangeExceptionError(message, body=await self._diagnostic_body(response))
                )
            try:
                body = await response.aread()
            except httpx.HTTPError as exc:
                logger.warning(
                    "Failed reading range response body",
                    url=str(response.request.url),
                    error=str(exc),
                )
                return Outcome.failure(TransportError.from_exception(exc))
            return Outcome.success(body)

        return Outcome.failure(
            StatusError(
                response.status_code,
                response.reason_phrase,
                body=await self._diagnostic_body(response),
            )
        )

    async def _diagnostic_body(self, response: httpx.Response) -> bytes:
        """Best-effort body read for error context; empty when unreadable."""
        try:
            return await response.aread()
        except httpx.HTTPError as exc:
            logger.debug(
                "Discarding unreadable error body",
                status_code=response.status_code,
                error=str(exc),
            )
            return b""
