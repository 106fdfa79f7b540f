"""Prometheus metrics for the range client.

These metrics live in the default registry; programs that expose /metrics
pick them up automatically. Alert rules worth configuring:
- range_queries_total{outcome!="success"} (server side failures)
- range_query_retries_total (unstable servers or network)
"""

from prometheus_client import Counter, Histogram

# === Query Metrics ===

range_queries_total = Counter(
    "range_queries_total",
    "Total logical range queries by terminal outcome",
    ["outcome"],
)
"""
Logical query counter.

Labels:
- outcome: success, cancelled, range_exception, status_error, transport_error
"""

range_query_duration_seconds = Histogram(
    "range_query_duration_seconds",
    "Logical range query latency in seconds, retries and pauses included",
    ["outcome"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

range_query_retries_total = Counter(
    "range_query_retries_total",
    "Total retries issued after a failed logical attempt",
    ["reason"],
)
"""
Retry counter.

Labels:
- reason: outcome kind of the failed attempt that was retried
"""

# === HTTP Metrics ===

range_http_requests_total = Counter(
    "range_http_requests_total",
    "Physical HTTP requests sent to range servers",
    ["method", "status"],
)
"""
Physical request counter.

Labels:
- method: GET or PUT
- status: HTTP status code, or "error" when the transport failed
"""
