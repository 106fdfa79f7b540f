"""
Data models for the range client.

Includes:
- Outcome tagging (OutcomeKind, Outcome) and the per-try record (QueryAttempt)
- Orchestrator state machine states (QueryState)
- Payload normalization and line splitting (RangeResponse, split_lines)
"""

from range_client.models.outcome import Outcome, OutcomeKind, QueryAttempt, QueryState
from range_client.models.response import RangeResponse, split_lines

__all__ = [
    "Outcome",
    "OutcomeKind",
    "QueryAttempt",
    "QueryState",
    "RangeResponse",
    "split_lines",
]
