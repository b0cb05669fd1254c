"""
JSON File Storage Implementation

DESIGN DECISION: The simplest useful store is one JSON file holding
the whole application state (records, balance, history, preferences).
1. Human-readable, easy to back up or inspect
2. No database setup required
3. Save is all-or-nothing thanks to write-then-rename

TRADEOFFS:
- The whole file is rewritten on every save (fine at personal scale)
- No locking: concurrent writers follow last-writer-wins
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from smart_budget.models.audit import AuditEvent
from smart_budget.models.preferences import AppState
from smart_budget.services.storage.interface import (
    AuditStorageInterface,
    CorruptStateError,
    LedgerStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


def _atomic_write(path: Path, content: str) -> None:
    """Write ``content`` to a temp file next to ``path``, then rename over it."""
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}_", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage in a single JSON file.

    The file holds ``AppState`` exactly as pydantic serializes it.
    """

    def __init__(self, path: str):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, content: str) -> None:
        _atomic_write(self._path, content)

    async def load(self) -> Optional[AppState]:
        """Load the state, or None if the file doesn't exist yet."""
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptStateError(f"Saved state in {self._path} is not UTF-8 text: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not content.strip():
            return None

        try:
            return AppState.model_validate_json(content)
        except ValidationError as e:
            raise CorruptStateError(f"Saved state in {self._path} is unreadable: {e}")

    async def save(self, state: AppState) -> bool:
        """Save the whole state atomically."""
        try:
            self._write(state.model_dump_json(indent=2))
            return True
        except OSError as e:
            raise StorageError(f"Failed to save state: {e}")

    async def clear(self) -> bool:
        """Delete the state file."""
        try:
            self._path.unlink(missing_ok=True)
            return True
        except OSError as e:
            raise StorageError(f"Failed to clear state: {e}")


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Audit storage as a JSON-lines file.

    Audit events are append-only.
    """

    def __init__(self, path: str):
        self._path = Path(path).expanduser()

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            with self._path.open("a", encoding="utf-8") as f:
                f.write(event.to_json_line() + "\n")
            return True
        except OSError as e:
            # Don't raise - audit logging should not break the main flow
            logger.warning("audit_write_failed", error=str(e), path=str(self._path))
            return False

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Get recent events."""
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Failed to read audit log: {e}")

        events = []
        for line in lines:
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate(json.loads(line)))
            except (ValueError, ValidationError):
                continue  # Skip malformed lines

        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
