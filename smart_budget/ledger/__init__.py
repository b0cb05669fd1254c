"""Balance reconciliation package."""

from smart_budget.ledger.engine import (
    DEFAULT_HISTORY_LIMIT,
    MutationOutcome,
    MutationResult,
    adjust_balance,
    iter_history,
    remove,
    upsert,
)
from smart_budget.ledger.impact import (
    booking_kind,
    forward_impact,
    reverse_impact,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "MutationOutcome",
    "MutationResult",
    "adjust_balance",
    "booking_kind",
    "forward_impact",
    "iter_history",
    "remove",
    "reverse_impact",
    "upsert",
]
