"""
Custom exceptions for the range client.

These exceptions form a closed taxonomy so callers can branch on the kind of
failure instead of parsing error strings. The retry orchestrator hands them
back to the caller unchanged.

Diagnostic payloads (response bodies) are kept on dedicated attributes and
never folded into the error message.
"""

import socket
from typing import Optional

import httpx

from range_client.models.outcome import OutcomeKind


class RangeClientError(Exception):
    """
    Base exception for all range client errors.

    All range-specific exceptions inherit from this to allow catching
    any client error with a single except clause.
    """
    kind: Optional[OutcomeKind] = None

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class EmptyPoolError(RangeClientError):
    """Raised at construction when no usable range server address is configured."""

    def __init__(self, message: str = "cannot create range client without at least one server"):
        super().__init__(message)


class InvalidRetryConfigError(RangeClientError):
    """Raised at construction when retry count or retry pause is negative."""
    pass


class TransportError(RangeClientError):
    """
    Raised when the transport fails to complete a round trip.

    Wraps network, DNS and TLS failures reported by httpx. The original
    exception is kept as ``cause`` (and chained as ``__cause__``) so retry
    predicates can inspect it.
    """
    kind = OutcomeKind.TRANSPORT_ERROR

    def __init__(self, message: str, cause: BaseException | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def from_exception(cls, exc: BaseException) -> "TransportError":
        return cls(
            f"{type(exc).__name__}: {exc}",
            cause=exc,
            details={"error_type": type(exc).__name__},
        )

    @property
    def is_timeout(self) -> bool:
        return isinstance(self.cause, httpx.TimeoutException)

    @property
    def is_temporary(self) -> bool:
        # Connection dropped in the middle of an exchange.
        return isinstance(
            self.cause,
            (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError),
        )

    @property
    def is_dns_failure(self) -> bool:
        """True when name resolution failed ("no such host")."""
        if not isinstance(self.cause, httpx.ConnectError):
            return False
        exc: BaseException | None = self.cause
        seen = set()
        while exc is not None and id(exc) not in seen:
            if isinstance(exc, socket.gaierror):
                return True
            seen.add(id(exc))
            exc = exc.__cause__ or exc.__context__
        return False


class RangeExceptionError(RangeClientError):
    """
    Raised when the server answers 200 with a ``RangeException`` header.

    The header value is the message; the response body, when the server sent
    one, is available through ``body`` for callers that want full context.
    """
    kind = OutcomeKind.RANGE_EXCEPTION

    def __init__(self, message: str, body: bytes = b""):
        super().__init__(message, details={"body_length": len(body)})
        self.body = body

    def __str__(self) -> str:
        return f"RangeException: {self.message}"


class StatusError(RangeClientError):
    """
    Raised when the server answers with a non-200 status.

    ``str(error)`` is the status line (e.g. ``"502 Bad Gateway"``); the body
    is only available through ``body``.
    """
    kind = OutcomeKind.STATUS_ERROR

    def __init__(self, status_code: int, reason: str, body: bytes = b""):
        status = f"{status_code} {reason}".strip()
        super().__init__(status, details={"status_code": status_code, "body_length": len(body)})
        self.status_code = status_code
        self.reason = reason
        self.body = body

    @property
    def status(self) -> str:
        return self.message


class CancellationError(RangeClientError):
    """
    Raised when the query context was cancelled or its deadline passed.

    Always terminal: never retried, never handed to a retry predicate.
    """
    kind = OutcomeKind.CANCELLED

    def __init__(self, reason: str = "query cancelled"):
        super().__init__(reason)
        self.reason = reason

    @property
    def deadline_exceeded(self) -> bool:
        return self.reason == "deadline exceeded"
