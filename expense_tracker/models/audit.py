"""
Audit Models for Expense Tracker

Every change to the expense list and every trip to disk is logged.
This provides:
1. A trace of what the user did and when
2. Debugging information when a save or load goes wrong
3. The only record of write failures (they are never shown to the user)

DESIGN DECISION: Audit events are log lines only. Nothing reads them back.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # User actions
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    INPUT_REJECTED = "input_rejected"

    # Persistence
    EXPENSES_SAVED = "expenses_saved"
    SAVE_FAILED = "save_failed"
    EXPENSES_LOADED = "expenses_loaded"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
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
        description="Type of entity (e.g., 'expense', 'expense_file')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
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
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, "12.50", ["Food"])
        event = AuditEventBuilder.save_failed(3, "disk full")
    """

    @staticmethod
    def expense_added(
        expense_id: UUID,
        amount: str,
        tags: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {amount}",
            details={
                "amount": amount,
                "tags": tags,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: UUID,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense deleted: {amount}",
            details={
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(
        field: str,
        message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Input rejected on {field}",
            details={
                "field": field,
                "message": message,
            },
            is_user_action=True,
        )

    @staticmethod
    def expenses_saved(
        count: int,
        location: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_SAVED,
            entity_type="expense_file",
            description=f"Saved {count} expenses",
            details={
                "count": count,
                "location": location,
            },
        )

    @staticmethod
    def save_failed(
        count: int,
        location: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="expense_file",
            description=f"Failed to save {count} expenses; changes kept in memory only",
            details={
                "count": count,
                "location": location,
            },
            error_message="write failed",
        )

    @staticmethod
    def expenses_loaded(
        count: int,
        location: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            entity_type="expense_file",
            description=f"Loaded {count} expenses",
            details={
                "count": count,
                "location": location,
            },
        )
