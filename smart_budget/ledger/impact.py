"""
Balance Impact Rules

Given a record, how much does it move the cash balance?

- Expense: always ``-amount`` (paid on the spot)
- Receivable: ``+amount`` once collected, otherwise nothing
- Payable: ``-amount`` once paid, otherwise nothing

DESIGN DECISION: Forward and reverse impact are two separate functions.
An edit undoes the old record with ``reverse_impact`` and applies the
new one with ``forward_impact``; the two are computed independently
because a status change can flip the impact between zero and non-zero.
"""

from decimal import Decimal

from smart_budget.models.record import (
    BalanceEventKind,
    ExpenseRecord,
    PayableRecord,
    ReceivableRecord,
    Record,
    is_settled,
)


ZERO = Decimal("0")


def forward_impact(record: Record) -> Decimal:
    """Signed contribution of a record to the balance."""
    if isinstance(record, ExpenseRecord):
        return -record.amount
    if not is_settled(record):
        return ZERO
    if isinstance(record, ReceivableRecord):
        return record.amount
    if isinstance(record, PayableRecord):
        return -record.amount
    raise TypeError(f"Unknown record type: {type(record).__name__}")


def reverse_impact(record: Record) -> Decimal:
    """The balance change that undoes ``forward_impact(record)``."""
    return -forward_impact(record)


def booking_kind(record: Record) -> BalanceEventKind:
    """History event kind produced when the record is booked."""
    if isinstance(record, ExpenseRecord):
        return BalanceEventKind.EXPENSE_BOOKED
    if isinstance(record, ReceivableRecord):
        return BalanceEventKind.RECEIVABLE_COLLECTED
    if isinstance(record, PayableRecord):
        return BalanceEventKind.PAYABLE_SETTLED
    raise TypeError(f"Unknown record type: {type(record).__name__}")
