"""
Balance Reconciliation Engine

The three ways the ledger can change:

1. ``upsert``         - create or replace a record
2. ``remove``         - delete a record
3. ``adjust_balance`` - manual deposit or withdrawal

Each one is a pure function: it takes a LedgerState and returns a
MutationResult holding a NEW state. The input is never modified.

INVARIANTS:
- ``balance`` moves only by record impacts and manual adjustments
- Editing a record reverts its old impact before applying the new one
- History is newest-first and never longer than ``history_limit``
- Invalid input leaves the state untouched and is reported, not raised
"""

from decimal import Decimal
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from smart_budget.ledger.impact import booking_kind, forward_impact, reverse_impact
from smart_budget.models.record import (
    AdjustmentDirection,
    BalanceEvent,
    BalanceEventKind,
    CashFlow,
    LedgerState,
    Record,
)
from smart_budget.models.validation import ValidationIssue


DEFAULT_HISTORY_LIMIT = 50
NO_DESCRIPTION = "No description"


class MutationOutcome(str, Enum):
    """What a ledger operation did."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ADJUSTED = "adjusted"
    NOT_FOUND = "not_found"   # Benign no-op
    REJECTED = "rejected"     # Validation failure, state unchanged


class MutationResult(BaseModel):
    """
    Result of a ledger operation.

    ``state`` is always usable: on rejection or not-found it is the
    caller's original state object.
    """
    model_config = ConfigDict(frozen=True)

    state: LedgerState
    outcome: MutationOutcome
    event: Optional[BalanceEvent] = Field(
        default=None,
        description="History entry appended by this operation, if any"
    )
    impact: Decimal = Field(
        default=Decimal("0"),
        description="Net change applied to the balance"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.outcome != MutationOutcome.REJECTED

    @property
    def changed(self) -> bool:
        return self.outcome in (
            MutationOutcome.CREATED,
            MutationOutcome.UPDATED,
            MutationOutcome.DELETED,
            MutationOutcome.ADJUSTED,
        )


# =============================================================================
# HELPERS
# =============================================================================

def _amount_issues(amount: Decimal) -> list[ValidationIssue]:
    if amount is None or not amount.is_finite() or amount <= 0:
        return [ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="Amount must be greater than zero",
            severity="error",
            suggested_fix="Enter a positive amount",
        )]
    return []


def _rejected(state: LedgerState, issues: list[ValidationIssue]) -> MutationResult:
    return MutationResult(
        state=state,
        outcome=MutationOutcome.REJECTED,
        issues=issues,
    )


def _prepend(
    history: tuple[BalanceEvent, ...],
    event: BalanceEvent,
    limit: int,
) -> tuple[BalanceEvent, ...]:
    return ((event,) + history)[:limit]


def _flow_of(signed: Decimal) -> CashFlow:
    return CashFlow.INFLOW if signed > 0 else CashFlow.OUTFLOW


# =============================================================================
# OPERATIONS
# =============================================================================

def upsert(
    state: LedgerState,
    record: Record,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> MutationResult:
    """
    Create a record, or replace the record with the same id.

    Only a create with a non-zero impact adds a history entry.
    Edits change the balance silently.
    """
    issues = _amount_issues(record.amount)
    if issues:
        return _rejected(state, issues)

    existing = state.records.get(record.id)
    old_impact = reverse_impact(existing) if existing is not None else Decimal("0")
    new_impact = forward_impact(record)
    balance = state.balance + old_impact + new_impact

    records = dict(state.records)
    records[record.id] = record

    history = state.history
    event = None
    if existing is None and new_impact != 0:
        event = BalanceEvent(
            description=f"{record.category}: {record.description or NO_DESCRIPTION}",
            amount=record.amount,
            flow=_flow_of(new_impact),
            kind=booking_kind(record),
            record_id=record.id,
            balance_after=balance,
        )
        history = _prepend(history, event, history_limit)
    else:
        history = history[:history_limit]

    return MutationResult(
        state=LedgerState(records=records, balance=balance, history=history),
        outcome=MutationOutcome.CREATED if existing is None else MutationOutcome.UPDATED,
        event=event,
        impact=old_impact + new_impact,
    )


def remove(
    state: LedgerState,
    record_id: str,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> MutationResult:
    """
    Delete a record and undo its effect on the balance.

    Deleting an unknown id is a no-op, so retries are safe.
    """
    record = state.records.get(record_id)
    if record is None:
        return MutationResult(state=state, outcome=MutationOutcome.NOT_FOUND)

    impact = reverse_impact(record)
    balance = state.balance + impact

    records = {key: value for key, value in state.records.items() if key != record_id}

    history = state.history
    event = None
    if impact != 0:
        event = BalanceEvent(
            description=f"Deleted: {record.category}",
            amount=abs(impact),
            flow=_flow_of(impact),
            kind=BalanceEventKind.REVERSAL,
            reversal_of=booking_kind(record),
            record_id=record.id,
            balance_after=balance,
        )
        history = _prepend(history, event, history_limit)
    else:
        history = history[:history_limit]

    return MutationResult(
        state=LedgerState(records=records, balance=balance, history=history),
        outcome=MutationOutcome.DELETED,
        event=event,
        impact=impact,
    )


def adjust_balance(
    state: LedgerState,
    amount: Decimal,
    direction: AdjustmentDirection,
    description: str = "",
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> MutationResult:
    """Deposit into or withdraw from the balance by hand."""
    amount = Decimal(str(amount))
    issues = _amount_issues(amount)
    if issues:
        return _rejected(state, issues)

    if direction == AdjustmentDirection.DEPOSIT:
        signed = amount
        kind = BalanceEventKind.MANUAL_DEPOSIT
    else:
        signed = -amount
        kind = BalanceEventKind.MANUAL_WITHDRAW
    balance = state.balance + signed

    event = BalanceEvent(
        description=description,
        amount=amount,
        flow=_flow_of(signed),
        kind=kind,
        balance_after=balance,
    )

    return MutationResult(
        state=LedgerState(
            records=state.records,
            balance=balance,
            history=_prepend(state.history, event, history_limit),
        ),
        outcome=MutationOutcome.ADJUSTED,
        event=event,
        impact=signed,
    )


def iter_history(state: LedgerState) -> Iterator[BalanceEvent]:
    """
    Walk the balance history, newest first.

    The generator is lazy and single-use; call again to restart.
    """
    for event in state.history:
        yield event
