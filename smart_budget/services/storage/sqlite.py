"""
SQLite Storage Implementation

A small multi-table local store:

- ``records``: one row per record (id, kind, JSON payload)
- ``meta``:    key/value rows for ``balance``, ``history`` and ``settings``

Every save replaces the full contents inside one transaction, so the
records and the balance can never be persisted out of step.
"""

import json
import sqlite3
from contextlib import closing
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter, ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from smart_budget.models.preferences import AppState, Preferences
from smart_budget.models.record import BalanceEvent, LedgerState, Record
from smart_budget.services.storage.interface import (
    CorruptStateError,
    LedgerStorageInterface,
    StorageError,
)


SCHEMA_VERSION = 2

_record_adapter = TypeAdapter(Record)
_history_adapter = TypeAdapter(list[BalanceEvent])

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id TEXT PRIMARY KEY,
    kind TEXT NOT NULL,
    payload TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class SqliteLedgerStorage(LedgerStorageInterface):
    """Ledger storage in a local SQLite database file."""

    def __init__(self, path: str):
        self._path = str(Path(path).expanduser()) if path != ":memory:" else path
        self._shared: Optional[sqlite3.Connection] = None
        if self._path == ":memory:":
            # An in-memory database only lives as long as its connection
            self._shared = sqlite3.connect(":memory:")

    def _connect(self) -> sqlite3.Connection:
        if self._shared is not None:
            conn = self._shared
        else:
            conn = sqlite3.connect(self._path)
        try:
            if conn.execute("PRAGMA user_version").fetchone()[0] < SCHEMA_VERSION:
                conn.executescript(_SCHEMA)
                conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
                conn.commit()
        except sqlite3.Error:
            self._release(conn)
            raise
        return conn

    def _release(self, conn: sqlite3.Connection) -> None:
        if conn is not self._shared:
            conn.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(sqlite3.OperationalError),
        reraise=True,
    )
    def _write(self, state: AppState) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM records")
                conn.executemany(
                    "INSERT INTO records (id, kind, payload) VALUES (?, ?, ?)",
                    [
                        (record.id, record.kind, record.model_dump_json())
                        for record in state.ledger.records.values()
                    ],
                )
                meta = {
                    "balance": json.dumps(str(state.ledger.balance)),
                    "history": _history_adapter.dump_json(
                        list(state.ledger.history)
                    ).decode("utf-8"),
                    "settings": state.preferences.model_dump_json(),
                }
                conn.executemany(
                    "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
                    list(meta.items()),
                )
        finally:
            self._release(conn)

    async def load(self) -> Optional[AppState]:
        """Load the state, or None if nothing has been saved."""
        try:
            conn = self._connect()
        except sqlite3.OperationalError as e:
            raise StorageError(f"Failed to open {self._path}: {e}")
        except sqlite3.DatabaseError as e:
            raise CorruptStateError(f"{self._path} is not a readable database: {e}")

        try:
            with closing(conn.cursor()) as cursor:
                record_rows = cursor.execute("SELECT payload FROM records").fetchall()
                meta = dict(cursor.execute("SELECT key, value FROM meta").fetchall())
        except sqlite3.DatabaseError as e:
            raise CorruptStateError(f"Saved state in {self._path} is unreadable: {e}")
        finally:
            self._release(conn)

        if not record_rows and not meta:
            return None

        try:
            records = [_record_adapter.validate_json(row[0]) for row in record_rows]
            ledger = LedgerState(
                records={record.id: record for record in records},
                balance=Decimal(json.loads(meta.get("balance", '"0"'))),
                history=tuple(_history_adapter.validate_json(meta.get("history", "[]"))),
            )
            preferences = (
                Preferences.model_validate_json(meta["settings"])
                if "settings" in meta
                else Preferences()
            )
        except (ValidationError, ValueError, ArithmeticError) as e:
            raise CorruptStateError(f"Saved state in {self._path} is unreadable: {e}")

        return AppState(ledger=ledger, preferences=preferences)

    async def save(self, state: AppState) -> bool:
        """Replace all saved rows with ``state`` in one transaction."""
        try:
            self._write(state)
            return True
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save state: {e}")

    async def clear(self) -> bool:
        """Delete all rows."""
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute("DELETE FROM records")
                    conn.execute("DELETE FROM meta")
            finally:
                self._release(conn)
            return True
        except sqlite3.Error as e:
            raise StorageError(f"Failed to clear state: {e}")
