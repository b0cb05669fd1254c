"""
Storage Services Package

Provides abstract interfaces and concrete implementations for local storage.
The backend is picked from ``StorageSettings.backend``.
"""

from typing import Optional

from smart_budget.config import StorageSettings, get_settings
from smart_budget.services.storage.attachments import (
    AttachmentError,
    LocalAttachmentStore,
)
from smart_budget.services.storage.interface import (
    AuditStorageInterface,
    CorruptStateError,
    LedgerStorageInterface,
    StorageError,
)
from smart_budget.services.storage.json_file import (
    JsonFileLedgerStorage,
    JsonLinesAuditStorage,
)
from smart_budget.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)
from smart_budget.services.storage.sqlite import SqliteLedgerStorage


def create_ledger_storage(
    settings: Optional[StorageSettings] = None,
) -> LedgerStorageInterface:
    """Build the ledger store selected in the settings."""
    settings = settings or get_settings().storage
    if settings.backend == "sqlite":
        return SqliteLedgerStorage(settings.path)
    if settings.backend == "memory":
        return InMemoryLedgerStorage()
    return JsonFileLedgerStorage(settings.path)


def create_attachment_store(
    settings: Optional[StorageSettings] = None,
) -> LocalAttachmentStore:
    """Build the receipt image store."""
    settings = settings or get_settings().storage
    return LocalAttachmentStore(settings.attachments_dir)


def create_audit_storage(
    settings: Optional[StorageSettings] = None,
) -> Optional[AuditStorageInterface]:
    """Build the audit store, or None to keep audit events in the local log."""
    settings = settings or get_settings().storage
    if not settings.audit_log_path:
        return None
    return JsonLinesAuditStorage(settings.audit_log_path)


__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "AttachmentError",
    "CorruptStateError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "LocalAttachmentStore",
    "JsonFileLedgerStorage",
    "JsonLinesAuditStorage",
    "SqliteLedgerStorage",
    # Factories
    "create_attachment_store",
    "create_audit_storage",
    "create_ledger_storage",
]
