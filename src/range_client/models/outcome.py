"""
Outcome and attempt records for the query dispatch engine.

An Outcome is the tagged result of one logical attempt. The tag
(OutcomeKind) mirrors the error taxonomy one-to-one so the orchestrator and
the stats block can dispatch on it without inspecting exception types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from range_client.exceptions import RangeClientError


class OutcomeKind(str, Enum):
    """Closed set of attempt results."""

    SUCCESS = "success"
    RANGE_EXCEPTION = "range_exception"
    STATUS_ERROR = "status_error"
    TRANSPORT_ERROR = "transport_error"
    CANCELLED = "cancelled"


class QueryState(str, Enum):
    """States of the retry orchestrator for one logical query."""

    PREPARING = "preparing"
    ATTEMPTING = "attempting"
    PAUSING_BEFORE_RETRY = "pausing_before_retry"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Outcome:
    """
    Result of a single logical attempt.

    Attributes:
        kind: Which variant this is
        body: Full response payload (SUCCESS only, otherwise empty)
        error: Typed error for every non-SUCCESS variant
    """

    kind: OutcomeKind
    body: bytes = b""
    error: Optional["RangeClientError"] = None

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.SUCCESS:
            if self.error is not None:
                raise ValueError("successful outcome cannot carry an error")
        elif self.error is None:
            raise ValueError(f"{self.kind.value} outcome requires an error")

    @classmethod
    def success(cls, body: bytes) -> "Outcome":
        return cls(kind=OutcomeKind.SUCCESS, body=body)

    @classmethod
    def failure(cls, error: "RangeClientError") -> "Outcome":
        return cls(kind=error.kind or OutcomeKind.TRANSPORT_ERROR, error=error)

    @classmethod
    def cancelled(cls, error: "RangeClientError") -> "Outcome":
        return cls(kind=OutcomeKind.CANCELLED, error=error)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


@dataclass(frozen=True)
class QueryAttempt:
    """
    One physical try inside a logical attempt.

    ``tries`` counts methods used so far for this logical attempt (1 or 2).
    """

    expression: str
    server: str
    method: str
    tries: int = 1

    def __post_init__(self) -> None:
        if not 1 <= self.tries <= 2:
            raise ValueError("a logical attempt uses at most two methods")
