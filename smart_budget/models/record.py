"""
Core Data Models for Smart Budget

These models define the strict schemas for all ledger data.
They are designed to:
1. Enforce the ledger invariants at construction time
2. Provide clear validation error messages
3. Be serializable for local storage
4. Be immutable, so every change produces a new value

DESIGN DECISION: A record is a tagged union over its kind.
Each variant carries only the fields that mean something for it:
an expense has no settlement status, receivables and payables do.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from smart_budget.formatting import generate_id


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class RecordKind(str, Enum):
    """
    Kinds of financial record.

    The kind decides the sign of a record's effect on the balance.
    """
    EXPENSE = "expense"        # Paid immediately, always reduces cash
    RECEIVABLE = "receivable"  # Money owed to the user ("right")
    PAYABLE = "payable"        # Money the user owes ("debt")


class SettlementStatus(str, Enum):
    """Completion status of a receivable or payable."""
    UNSETTLED = "unsettled"
    SETTLED = "settled"


class CashFlow(str, Enum):
    """Direction of a balance change."""
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class BalanceEventKind(str, Enum):
    """
    What caused a balance change.

    REVERSAL events carry the kind they undo in ``reversal_of``.
    """
    MANUAL_DEPOSIT = "manual_deposit"
    MANUAL_WITHDRAW = "manual_withdraw"
    EXPENSE_BOOKED = "expense_booked"
    RECEIVABLE_COLLECTED = "receivable_collected"
    PAYABLE_SETTLED = "payable_settled"
    REVERSAL = "reversal"


class AdjustmentDirection(str, Enum):
    """Direction of a manual balance adjustment."""
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


# =============================================================================
# RECORD MODELS
# =============================================================================

class _RecordBase(BaseModel):
    """Fields shared by every kind of record."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=lambda: generate_id("txn"),
        min_length=1,
        description="Unique, immutable record ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive magnitude of the transaction"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category label (allowed values depend on the kind)"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Optional free text"
    )
    occurred_at: datetime = Field(
        default_factory=datetime.now,
        description="When the transaction happened"
    )

    @field_validator('occurred_at')
    @classmethod
    def normalize_occurred_at(cls, value: datetime) -> datetime:
        """Store timestamps as naive local time so records always compare."""
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class ExpenseRecord(_RecordBase):
    """
    An expense.

    Expenses are assumed to be paid on the spot, so there is no
    settlement status to track.
    """
    kind: Literal["expense"] = "expense"
    attachment_ref: Optional[str] = Field(
        default=None,
        description="Opaque reference to a receipt image"
    )


class _ObligationRecord(_RecordBase):
    """Fields shared by receivables and payables."""
    status: SettlementStatus = Field(
        default=SettlementStatus.UNSETTLED,
        description="Whether the money has changed hands yet"
    )
    expected_date: Optional[date] = Field(
        default=None,
        description="When the money is expected to change hands"
    )


class ReceivableRecord(_ObligationRecord):
    """Money owed to the user. Affects cash only once collected."""
    kind: Literal["receivable"] = "receivable"


class PayableRecord(_ObligationRecord):
    """Money the user owes. Affects cash only once paid."""
    kind: Literal["payable"] = "payable"


Record = Annotated[
    Union[ExpenseRecord, ReceivableRecord, PayableRecord],
    Field(discriminator="kind"),
]


def is_settled(record: Record) -> bool:
    """Expenses are always settled; obligations follow their status."""
    if isinstance(record, ExpenseRecord):
        return True
    return record.status == SettlementStatus.SETTLED


# =============================================================================
# BALANCE HISTORY
# =============================================================================

class BalanceEvent(BaseModel):
    """
    One entry in the bounded balance history.

    The amount is stored as a magnitude plus a direction;
    ``signed_amount`` combines the two.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: generate_id("bal"))
    occurred_at: datetime = Field(default_factory=datetime.now)
    description: str = ""
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Magnitude of the change"
    )
    flow: CashFlow
    kind: BalanceEventKind
    reversal_of: Optional[BalanceEventKind] = Field(
        default=None,
        description="Booking kind undone by a REVERSAL event"
    )
    record_id: Optional[str] = Field(
        default=None,
        description="Record that caused this change, if any"
    )
    balance_after: Decimal = Field(
        ...,
        description="Balance immediately after this event"
    )

    @model_validator(mode='after')
    def validate_reversal(self) -> 'BalanceEvent':
        """Only reversal events name a reversed kind."""
        if self.kind == BalanceEventKind.REVERSAL:
            if self.reversal_of is None:
                raise ValueError("Reversal events must name the reversed kind")
            if self.reversal_of == BalanceEventKind.REVERSAL:
                raise ValueError("A reversal cannot reverse another reversal")
        elif self.reversal_of is not None:
            raise ValueError("Only reversal events may set reversal_of")
        return self

    @property
    def signed_amount(self) -> Decimal:
        """Amount with its direction applied (outflows are negative)."""
        if self.flow == CashFlow.OUTFLOW:
            return -self.amount
        return self.amount


# =============================================================================
# LEDGER STATE
# =============================================================================

class LedgerState(BaseModel):
    """
    The complete reconciliation state.

    CRITICAL: ``balance`` is maintained independently of ``history``.
    Dropping old history entries never changes the balance.
    """
    model_config = ConfigDict(frozen=True)

    records: dict[str, Record] = Field(default_factory=dict)
    balance: Decimal = Field(default=Decimal("0"))
    history: tuple[BalanceEvent, ...] = Field(
        default=(),
        description="Balance events, newest first"
    )

    @model_validator(mode='after')
    def validate_record_keys(self) -> 'LedgerState':
        """Every record must be stored under its own id."""
        for key, record in self.records.items():
            if key != record.id:
                raise ValueError(
                    f"Record stored under '{key}' has id '{record.id}'"
                )
        return self
