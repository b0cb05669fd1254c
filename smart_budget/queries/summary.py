"""
Dashboard Figures

DESIGN DECISION: Summaries are computed DETERMINISTICALLY from the
ledger state on demand and never stored. They are simple sums;
nothing here changes the balance.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from smart_budget.models.record import (
    LedgerState,
    PayableRecord,
    ReceivableRecord,
    Record,
    RecordKind,
    is_settled,
)


class LedgerSummary(BaseModel):
    """Figures shown on the overview page."""

    balance: Decimal
    total_spent: Decimal = Field(
        ...,
        description="Expenses plus payables that have been paid"
    )
    outstanding_receivables: Decimal = Field(
        ...,
        description="Money owed to the user and not yet collected"
    )
    outstanding_payables: Decimal = Field(
        ...,
        description="Money the user owes and hasn't paid yet"
    )
    record_counts: dict[RecordKind, int] = Field(default_factory=dict)


def summarize(state: LedgerState) -> LedgerSummary:
    """Compute the overview figures for a ledger."""
    total_spent = Decimal("0")
    receivables = Decimal("0")
    payables = Decimal("0")
    counts = {kind: 0 for kind in RecordKind}

    for record in state.records.values():
        counts[RecordKind(record.kind)] += 1
        if isinstance(record, ReceivableRecord):
            if not is_settled(record):
                receivables += record.amount
        elif isinstance(record, PayableRecord):
            if is_settled(record):
                total_spent += record.amount
            else:
                payables += record.amount
        else:
            total_spent += record.amount

    return LedgerSummary(
        balance=state.balance,
        total_spent=total_spent,
        outstanding_receivables=receivables,
        outstanding_payables=payables,
        record_counts=counts,
    )


def list_records(
    state: LedgerState,
    kind: Optional[RecordKind] = None,
) -> list[Record]:
    """Records of one kind (or all), newest first."""
    records = [
        record for record in state.records.values()
        if kind is None or record.kind == RecordKind(kind)
    ]
    records.sort(key=lambda r: r.occurred_at, reverse=True)
    return records


def section_total(state: LedgerState, kind: RecordKind) -> Decimal:
    """Sum of all amounts of one kind, settled or not."""
    return sum(
        (record.amount for record in list_records(state, kind)),
        Decimal("0"),
    )
