"""
Application State Controller for Smart Budget

This module owns the single in-memory AppState and is the only caller
of the reconciliation engine. Every user action follows the same flow:

1. Validate input (reject with issues, state untouched)
2. Apply the pure ledger operation
3. Persist the new state (failure is logged, never fatal)
4. Audit what happened

DESIGN DECISION: The controller is the single writer. An asyncio lock
serializes "apply then persist", so one action's result is in place
before the next one starts. The in-memory state stays authoritative
for the session even when the store can't be written.
"""

import asyncio
from decimal import Decimal
from typing import Iterator, Optional
from uuid import UUID

from smart_budget.audit import AuditLogger, create_correlation_id
from smart_budget.config import AppSettings, get_settings
from smart_budget.ledger import (
    MutationOutcome,
    MutationResult,
    adjust_balance,
    iter_history,
    remove,
    upsert,
)
from smart_budget.models.preferences import AppState, Preferences, get_currency
from smart_budget.models.record import (
    AdjustmentDirection,
    BalanceEvent,
    LedgerState,
    Record,
    RecordKind,
    SettlementStatus,
    is_settled,
)
from smart_budget.queries import LedgerSummary, list_records, summarize
from smart_budget.services.storage import (
    LedgerStorageInterface,
    StorageError,
    create_audit_storage,
    create_ledger_storage,
)
from smart_budget.validation import RecordValidator


class LedgerController:
    """
    Holds the application state and applies every mutation to it.

    Usage:
        controller = LedgerController(storage=InMemoryLedgerStorage())
        await controller.start()
        result = await controller.deposit(Decimal("500"), "seed")
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[RecordValidator] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().app
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or RecordValidator(self._settings)
        self._lock = asyncio.Lock()
        self._state = self._default_state()
        self.last_persistence_error: Optional[str] = None

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def ledger(self) -> LedgerState:
        return self._state.ledger

    @property
    def preferences(self) -> Preferences:
        return self._state.preferences

    @property
    def validator(self) -> RecordValidator:
        return self._validator

    def history(self) -> Iterator[BalanceEvent]:
        """Balance history, newest first (lazy)."""
        return iter_history(self._state.ledger)

    def records(self, kind: Optional[RecordKind] = None) -> list[Record]:
        return list_records(self._state.ledger, kind)

    def summary(self) -> LedgerSummary:
        return summarize(self._state.ledger)

    def _default_state(self) -> AppState:
        return AppState(
            preferences=Preferences(
                currency=get_currency(self._settings.default_currency_code)
            )
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self, correlation_id: Optional[UUID] = None) -> AppState:
        """
        Load the saved state.

        A missing store or empty store starts from defaults.
        A failed load is logged and also starts from defaults.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._storage is None:
            return self._state

        try:
            saved = await self._storage.load()
        except StorageError as e:
            self.last_persistence_error = str(e)
            await self._audit_logger.log_load_failed(
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return self._state
        except Exception as e:
            # Store bug or unexpected data; the session still starts
            await self._on_unexpected_error("load", e, correlation_id)
            return self._state

        if saved is not None:
            self._state = saved
            await self._audit_logger.log_state_loaded(
                record_count=len(saved.ledger.records),
                balance=str(saved.ledger.balance),
                correlation_id=correlation_id,
            )
        return self._state

    async def _persist(self, correlation_id: UUID) -> bool:
        """Save the current state. Failures are reported, not raised."""
        if self._storage is None:
            return True
        try:
            await self._storage.save(self._state)
        except StorageError as e:
            self.last_persistence_error = str(e)
            await self._audit_logger.log_save_failed(
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return False
        except Exception as e:
            await self._on_unexpected_error("save", e, correlation_id)
            return False
        self.last_persistence_error = None
        await self._audit_logger.log_state_saved(
            record_count=len(self._state.ledger.records),
            correlation_id=correlation_id,
        )
        return True

    async def _on_unexpected_error(
        self,
        operation: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        """Record a store failure that isn't a StorageError."""
        self.last_persistence_error = f"{type(error).__name__}: {error}"
        await self._audit_logger.log_error(
            error_type=type(error).__name__,
            error_message=str(error),
            details={"operation": operation},
            correlation_id=correlation_id,
        )

    def _apply(self, result: MutationResult) -> None:
        self._state = self._state.model_copy(update={"ledger": result.state})

    async def _reject(
        self,
        result: MutationResult,
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> MutationResult:
        await self._audit_logger.log_validation_failed(
            entity_id=entity_id,
            issues=[
                {"field": i.field, "type": i.issue_type, "message": i.message}
                for i in result.issues
            ],
            correlation_id=correlation_id,
        )
        return result

    # =========================================================================
    # LEDGER OPERATIONS
    # =========================================================================

    async def submit_record(
        self,
        record: Record,
        correlation_id: Optional[UUID] = None,
    ) -> MutationResult:
        """
        Create a record, or replace the one with the same id.

        Returns:
            MutationResult; on validation errors the state is unchanged
            and ``issues`` explains why.
        """
        correlation_id = correlation_id or create_correlation_id()

        validation = self._validator.validate(record)
        if validation.has_errors:
            rejected = MutationResult(
                state=self._state.ledger,
                outcome=MutationOutcome.REJECTED,
                issues=validation.issues,
            )
            return await self._reject(rejected, record.id, correlation_id)

        async with self._lock:
            result = upsert(self._state.ledger, record, self._settings.history_limit)
            if not result.accepted:
                return await self._reject(result, record.id, correlation_id)

            self._apply(result)
            if result.outcome == MutationOutcome.CREATED:
                await self._audit_logger.log_record_created(
                    record_id=record.id,
                    kind=record.kind,
                    amount=str(record.amount),
                    impact=str(result.impact),
                    correlation_id=correlation_id,
                )
            else:
                await self._audit_logger.log_record_updated(
                    record_id=record.id,
                    kind=record.kind,
                    impact=str(result.impact),
                    correlation_id=correlation_id,
                )
            await self._persist(correlation_id)

        return result

    async def settle_record(
        self,
        record_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> MutationResult:
        """
        Mark a receivable as collected or a payable as paid.

        This is an edit through ``submit_record``; the balance moves by
        the record's settled impact. Settling twice (or settling an
        expense) is an edit with zero net impact.
        """
        record = self._state.ledger.records.get(record_id)
        if record is None:
            return MutationResult(
                state=self._state.ledger,
                outcome=MutationOutcome.NOT_FOUND,
            )
        if not is_settled(record):
            record = record.model_copy(update={"status": SettlementStatus.SETTLED})
        return await self.submit_record(record, correlation_id)

    async def delete_record(
        self,
        record_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> MutationResult:
        """Delete a record. Unknown ids are a harmless no-op."""
        correlation_id = correlation_id or create_correlation_id()

        async with self._lock:
            existing = self._state.ledger.records.get(record_id)
            result = remove(self._state.ledger, record_id, self._settings.history_limit)

            if result.outcome == MutationOutcome.NOT_FOUND:
                await self._audit_logger.log_record_not_found(
                    record_id=record_id,
                    correlation_id=correlation_id,
                )
                return result

            self._apply(result)
            await self._audit_logger.log_record_deleted(
                record_id=record_id,
                kind=existing.kind,
                impact=str(result.impact),
                correlation_id=correlation_id,
            )
            await self._persist(correlation_id)

        return result

    async def adjust_balance(
        self,
        amount: Decimal,
        direction: AdjustmentDirection,
        description: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> MutationResult:
        """Manually deposit into or withdraw from the balance."""
        correlation_id = correlation_id or create_correlation_id()

        async with self._lock:
            result = adjust_balance(
                self._state.ledger,
                amount,
                AdjustmentDirection(direction),
                description,
                self._settings.history_limit,
            )
            if not result.accepted:
                return await self._reject(result, None, correlation_id)

            self._apply(result)
            await self._audit_logger.log_balance_adjusted(
                direction=AdjustmentDirection(direction).value,
                amount=str(result.event.amount),
                balance_after=str(result.state.balance),
                correlation_id=correlation_id,
            )
            await self._persist(correlation_id)

        return result

    async def deposit(
        self,
        amount: Decimal,
        description: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> MutationResult:
        return await self.adjust_balance(
            amount, AdjustmentDirection.DEPOSIT, description, correlation_id
        )

    async def withdraw(
        self,
        amount: Decimal,
        description: str = "",
        correlation_id: Optional[UUID] = None,
    ) -> MutationResult:
        return await self.adjust_balance(
            amount, AdjustmentDirection.WITHDRAW, description, correlation_id
        )

    def latest_event(self) -> Optional[BalanceEvent]:
        return next(self.history(), None)

    # =========================================================================
    # PREFERENCES
    # =========================================================================

    async def _update_preferences(
        self,
        correlation_id: Optional[UUID] = None,
        **changes,
    ) -> Preferences:
        correlation_id = correlation_id or create_correlation_id()
        async with self._lock:
            preferences = self._state.preferences.model_copy(update=changes)
            self._state = self._state.model_copy(update={"preferences": preferences})
            await self._audit_logger.log_preferences_updated(
                changes={
                    key: value.code if key == "currency" else value
                    for key, value in changes.items()
                },
                correlation_id=correlation_id,
            )
            await self._persist(correlation_id)
        return preferences

    async def set_currency(
        self,
        code: str,
        correlation_id: Optional[UUID] = None,
    ) -> Preferences:
        """
        Change the display currency. Amounts are not converted.

        Raises:
            KeyError: If the currency is not supported
        """
        currency = get_currency(code)
        return await self._update_preferences(correlation_id, currency=currency)

    async def toggle_dark_mode(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> Preferences:
        return await self._update_preferences(
            correlation_id, dark_mode=not self._state.preferences.dark_mode
        )

    async def toggle_balance_visibility(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> Preferences:
        return await self._update_preferences(
            correlation_id, balance_hidden=not self._state.preferences.balance_hidden
        )

    # =========================================================================
    # RESET
    # =========================================================================

    async def clear_all(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> AppState:
        """
        Erase all data and reset to defaults.

        The in-memory reset always happens; a storage failure is logged.
        """
        correlation_id = correlation_id or create_correlation_id()
        async with self._lock:
            self._state = self._default_state()
            await self._audit_logger.log_state_cleared(correlation_id=correlation_id)
            if self._storage is not None:
                try:
                    await self._storage.clear()
                    self.last_persistence_error = None
                except StorageError as e:
                    self.last_persistence_error = str(e)
                    await self._audit_logger.log_save_failed(
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                except Exception as e:
                    await self._on_unexpected_error("clear", e, correlation_id)
        return self._state


def create_controller(
    use_storage: bool = True,
) -> LedgerController:
    """
    Factory function to create the application controller.

    Args:
        use_storage: Whether to use the configured local store.
                    Set to False for a session that is never saved.
    """
    storage = None
    audit_storage = None

    if use_storage:
        settings = get_settings().storage
        storage = create_ledger_storage(settings)
        audit_storage = create_audit_storage(settings)

    return LedgerController(
        storage=storage,
        audit_logger=AuditLogger(audit_storage),
    )
