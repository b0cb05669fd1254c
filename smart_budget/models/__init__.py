"""
Data Models Package

This package contains all Pydantic models used in Smart Budget.
All data flowing through the system must conform to these schemas.
"""

from smart_budget.models.record import (
    AdjustmentDirection,
    BalanceEvent,
    BalanceEventKind,
    CashFlow,
    ExpenseRecord,
    LedgerState,
    PayableRecord,
    ReceivableRecord,
    Record,
    RecordKind,
    SettlementStatus,
    is_settled,
)
from smart_budget.models.preferences import (
    DEFAULT_CURRENCY,
    SUPPORTED_CURRENCIES,
    AppState,
    Currency,
    Preferences,
    get_currency,
)
from smart_budget.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from smart_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "AdjustmentDirection",
    "BalanceEvent",
    "BalanceEventKind",
    "CashFlow",
    "ExpenseRecord",
    "LedgerState",
    "PayableRecord",
    "ReceivableRecord",
    "Record",
    "RecordKind",
    "SettlementStatus",
    "is_settled",
    # Preferences
    "DEFAULT_CURRENCY",
    "SUPPORTED_CURRENCIES",
    "AppState",
    "Currency",
    "Preferences",
    "get_currency",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
