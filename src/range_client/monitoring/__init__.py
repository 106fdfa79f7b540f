"""Monitoring for the range client.

Exports Prometheus metrics and the resettable per-client stats block.
"""

from range_client.monitoring.metrics import (
    range_http_requests_total,
    range_queries_total,
    range_query_duration_seconds,
    range_query_retries_total,
)
from range_client.monitoring.stats import QueryStats, StatsRecorder

__all__ = [
    "range_queries_total",
    "range_query_duration_seconds",
    "range_query_retries_total",
    "range_http_requests_total",
    "QueryStats",
    "StatsRecorder",
]
