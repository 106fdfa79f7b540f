"""
Resettable per-client query statistics.

Counters are diagnostic only; a single lock-guarded block keeps them
consistent when one client is shared across threads.
"""

import threading
from dataclasses import dataclass

from range_client.models.outcome import OutcomeKind


@dataclass(frozen=True)
class QueryStats:
    """Counts of logical query outcomes since the previous snapshot."""

    success: int = 0
    cancelled: int = 0
    range_exception: int = 0
    status_error: int = 0
    other_error: int = 0

    @property
    def total(self) -> int:
        return (
            self.success
            + self.cancelled
            + self.range_exception
            + self.status_error
            + self.other_error
        )


_FIELD_BY_KIND = {
    OutcomeKind.SUCCESS: "success",
    OutcomeKind.CANCELLED: "cancelled",
    OutcomeKind.RANGE_EXCEPTION: "range_exception",
    OutcomeKind.STATUS_ERROR: "status_error",
    OutcomeKind.TRANSPORT_ERROR: "other_error",
}


class StatsRecorder:
    """Thread-safe accumulator behind RangeClient.stats()."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = dict.fromkeys(_FIELD_BY_KIND.values(), 0)

    def record(self, kind: OutcomeKind) -> None:
        field_name = _FIELD_BY_KIND[kind]
        with self._lock:
            self._counts[field_name] += 1

    def snapshot(self) -> QueryStats:
        """Return the current counts and reset them to zero."""
        with self._lock:
            counts = self._counts
            self._counts = dict.fromkeys(_FIELD_BY_KIND.values(), 0)
        return QueryStats(**counts)
