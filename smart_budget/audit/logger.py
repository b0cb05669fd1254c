"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of balance changes, including edits
2. Debugging capability when saving or loading fails
3. A record of rejected input

The audit logger:
- Is async so it composes with the async storage calls
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from smart_budget.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from smart_budget.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, if configured (for persistence)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("smart_budget.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_record_created(
        self,
        record_id: str,
        kind: str,
        amount: str,
        impact: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new record."""
        event = AuditEventBuilder.record_created(
            record_id=record_id,
            kind=kind,
            amount=amount,
            impact=impact,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_record_updated(
        self,
        record_id: str,
        kind: str,
        impact: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an edit. Edits have no balance history entry, so this is their only trace."""
        event = AuditEventBuilder.record_updated(
            record_id=record_id,
            kind=kind,
            impact=impact,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_record_deleted(
        self,
        record_id: str,
        kind: str,
        impact: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a deletion."""
        event = AuditEventBuilder.record_deleted(
            record_id=record_id,
            kind=kind,
            impact=impact,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_record_not_found(
        self,
        record_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a delete of an unknown record."""
        event = AuditEventBuilder.record_not_found(
            record_id=record_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_adjusted(
        self,
        direction: str,
        amount: str,
        balance_after: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a manual deposit or withdrawal."""
        event = AuditEventBuilder.balance_adjusted(
            direction=direction,
            amount=amount,
            balance_after=balance_after,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        entity_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rejected input."""
        event = AuditEventBuilder.validation_failed(
            entity_id=entity_id,
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_state_loaded(
        self,
        record_count: int,
        balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.state_loaded(
            record_count=record_count,
            balance=balance,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_state_saved(
        self,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.state_saved(
            record_count=record_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_load_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.load_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_state_cleared(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.state_cleared(correlation_id=correlation_id)
        await self.log(event)

    async def log_preferences_updated(
        self,
        changes: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.preferences_updated(
            changes=changes,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., submitting a form).
    Pass it through all subsequent operations.
    """
    return uuid4()
