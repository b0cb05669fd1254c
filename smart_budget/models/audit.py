"""
Audit Models for Smart Budget

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every balance change
2. Debugging information when persistence fails
3. A record of rejected input

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
Unlike the bounded balance history, the audit trail also covers edits.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record lifecycle
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    RECORD_NOT_FOUND = "record_not_found"

    # Balance
    BALANCE_ADJUSTED = "balance_adjusted"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_SAVED = "state_saved"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"
    STATE_CLEARED = "state_cleared"

    # Preferences
    PREFERENCES_UPDATED = "preferences_updated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'record', 'balance', 'state')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one user action)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_json_line(self) -> str:
        """Serialize as one line of a JSON-lines audit file."""
        return json.dumps(self.to_log_dict(), ensure_ascii=False, default=str)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created(record_id, "expense", "100", "-100")
        event = AuditEventBuilder.save_failed("disk full", correlation_id)
    """

    @staticmethod
    def record_created(
        record_id: str,
        kind: str,
        amount: str,
        impact: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} created: {amount}",
            details={
                "kind": kind,
                "amount": amount,
                "balance_impact": impact,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        record_id: str,
        kind: str,
        impact: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} updated",
            details={
                "kind": kind,
                "balance_impact": impact,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        record_id: str,
        kind: str,
        impact: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} deleted",
            details={
                "kind": kind,
                "balance_impact": impact,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_not_found(
        record_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            entity_type="record",
            entity_id=record_id,
            correlation_id=correlation_id,
            description="Delete ignored: record not found",
        )

    @staticmethod
    def balance_adjusted(
        direction: str,
        amount: str,
        balance_after: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_ADJUSTED,
            entity_type="balance",
            correlation_id=correlation_id,
            description=f"Manual {direction}: {amount}",
            details={
                "direction": direction,
                "amount": amount,
                "balance_after": balance_after,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        entity_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="record",
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def state_loaded(
        record_count: int,
        balance: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"State loaded with {record_count} records",
            details={
                "record_count": record_count,
                "balance": balance,
            },
        )

    @staticmethod
    def state_saved(
        record_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"State saved with {record_count} records",
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def load_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            correlation_id=correlation_id,
            description="Failed to load saved state, starting empty",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            correlation_id=correlation_id,
            description="Failed to save state, in-memory state kept",
            error_message=error_message,
        )

    @staticmethod
    def state_cleared(
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            correlation_id=correlation_id,
            description="All data cleared",
            is_user_action=True,
        )

    @staticmethod
    def preferences_updated(
        changes: dict[str, Any],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_UPDATED,
            entity_type="preferences",
            correlation_id=correlation_id,
            description="Preferences updated",
            details=changes,
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
