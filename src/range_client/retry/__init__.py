"""
Retry orchestration for range queries.

Main Components:
    - RetryOrchestrator: Runs a logical query with retries and cancellation
    - RetryPolicy: Immutable retry budget, pause and predicate
    - make_default_predicate: Retries transient transport failures only

Usage:
    >>> from range_client.retry import RetryOrchestrator, RetryPolicy
    >>> policy = RetryPolicy(max_retries=2, pause=0.5, predicate=make_default_predicate(2))
    >>> payload = await RetryOrchestrator(selector, executor, policy).run(ctx, "%cluster")
"""

from range_client.retry.engine import RetryOrchestrator
from range_client.retry.policy import RetryPolicy, RetryPredicate, make_default_predicate

__all__ = [
    "RetryOrchestrator",
    "RetryPolicy",
    "RetryPredicate",
    "make_default_predicate",
]
