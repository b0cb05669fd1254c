"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Choose between a single JSON blob and a small SQLite database
2. Use in-memory storage for testing
3. Keep the reconciliation logic decoupled from persistence

The ledger is always saved and loaded as a whole (AppState).
There is exactly one writer per process: the LedgerController.

CONCURRENCY: If two processes (or browser tabs, or app instances)
share one store, the last save wins. There is no merging.
"""

from abc import ABC, abstractmethod
from typing import Optional

from smart_budget.models.audit import AuditEvent
from smart_budget.models.preferences import AppState


class LedgerStorageInterface(ABC):
    """
    Abstract interface for persisting the application state.

    Implementations raise StorageError subclasses on failure.
    The controller decides what a failure means for the session.
    """

    @abstractmethod
    async def load(self) -> Optional[AppState]:
        """
        Load the saved application state.

        Returns:
            The saved state, or None if nothing has been saved yet

        Raises:
            CorruptStateError: If saved data exists but can't be read
            StorageError: If the store can't be accessed
        """
        pass

    @abstractmethod
    async def save(self, state: AppState) -> bool:
        """
        Replace the saved state with ``state``.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """
        Delete everything saved.

        Returns:
            True if cleared successfully
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptStateError(StorageError):
    """Saved data exists but could not be parsed."""
    pass
