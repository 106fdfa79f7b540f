"""
Retry policy for logical range queries.

The policy decides how many extra logical attempts a query may make, how
long to pause between them, and which errors are worth retrying at all.
"""

from dataclasses import dataclass, field
from typing import Callable

from range_client.exceptions import InvalidRetryConfigError, RangeClientError, TransportError

RetryPredicate = Callable[[RangeClientError], bool]


def make_default_predicate(server_count: int) -> RetryPredicate:
    """
    Build the predicate used when the caller supplies none.

    Retries transport errors that are timeouts or temporary. A "no such host"
    resolution failure is retried only when more than one server is
    configured, since another server in the pool may still resolve. Status
    errors and range exceptions are never retried by default.

    Args:
        server_count: Number of configured servers

    Returns:
        Predicate taking the failed attempt's error
    """
    def should_retry(error: RangeClientError) -> bool:
        if not isinstance(error, TransportError):
            return False
        # DNS failures can also time out, so check the cheap flags first.
        if error.is_timeout or error.is_temporary:
            return True
        if error.is_dns_failure:
            return server_count > 1
        return False

    return should_retry


def _never(error: RangeClientError) -> bool:
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """
    Immutable retry settings of a client.

    Attributes:
        max_retries: Extra logical attempts after the first (0 = no retries)
        pause: Seconds to wait before each retry
        predicate: Decides whether a failed attempt's error is retryable
    """

    max_retries: int = 0
    pause: float = 0.0
    predicate: RetryPredicate = field(default=_never)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise InvalidRetryConfigError(
                f"cannot create client with negative retry count: {self.max_retries}",
                details={"retry_count": self.max_retries},
            )
        if self.pause < 0:
            raise InvalidRetryConfigError(
                f"cannot create client with negative retry pause: {self.pause}",
                details={"retry_pause": self.pause},
            )

    def should_retry(self, attempts: int, error: RangeClientError) -> bool:
        """
        Whether another logical attempt should follow.

        Args:
            attempts: Retries already made (0 after the first attempt)
            error: Error of the attempt that just failed
        """
        if attempts >= self.max_retries:
            return False
        return bool(self.predicate(error))
