"""
In-Memory Storage

Keeps everything in the process. Used by the tests and when the
app is started with ``LEDGER_STORAGE_BACKEND=memory``.
"""

from typing import Optional

from smart_budget.models.audit import AuditEvent
from smart_budget.models.preferences import AppState
from smart_budget.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger storage backed by a serialized copy in memory."""

    def __init__(self, initial: Optional[AppState] = None):
        self._blob: Optional[str] = None
        self.save_count = 0
        if initial is not None:
            self._blob = initial.model_dump_json()

    async def load(self) -> Optional[AppState]:
        if self._blob is None:
            return None
        return AppState.model_validate_json(self._blob)

    async def save(self, state: AppState) -> bool:
        # Stored serialized, so callers can't alias the saved copy
        self._blob = state.model_dump_json()
        self.save_count += 1
        return True

    async def clear(self) -> bool:
        self._blob = None
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit storage backed by a list."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        events = sorted(self.events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
