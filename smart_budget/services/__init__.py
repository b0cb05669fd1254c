"""Services package."""

from smart_budget.services.storage import (
    AuditStorageInterface,
    CorruptStateError,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
    LedgerStorageInterface,
    SqliteLedgerStorage,
    StorageError,
    create_audit_storage,
    create_ledger_storage,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "CorruptStateError",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "JsonLinesAuditStorage",
    "LedgerStorageInterface",
    "SqliteLedgerStorage",
    "StorageError",
    "create_audit_storage",
    "create_ledger_storage",
]
