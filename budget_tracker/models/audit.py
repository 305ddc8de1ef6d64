"""
Activity Event Models for Budget Tracker

Every significant action in the system is described by an AuditEvent
and written to the structured log. This provides:
1. Traceability of every mutation of the transaction list
2. Debugging information when a remote call degrades to a fallback

DESIGN DECISION: Events are logged, never persisted. Transactions have
no versioning or history; the log is for operators, not for users.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we log."""
    # Transaction store
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Preferences and view state
    REPORTING_WINDOW_CHANGED = "reporting_window_changed"
    DARK_MODE_CHANGED = "dark_mode_changed"

    # AI features
    INSIGHTS_REQUESTED = "insights_requested"
    INSIGHTS_GENERATED = "insights_generated"
    INSIGHTS_FALLBACK_USED = "insights_fallback_used"
    INSIGHTS_DISCARDED_STALE = "insights_discarded_stale"
    CATEGORY_SUGGESTED = "category_suggested"

    # System events
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about? (e.g. 'transaction', 'insights')
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
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
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_created(transaction_id, "expense", "12.50")
    """

    @staticmethod
    def transaction_created(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction created: {transaction_type} {amount}",
            details={"type": transaction_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction updated",
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        operation: str,
        issues: list[str],
        transaction_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction {operation} rejected with {len(issues)} issues",
            details={"operation": operation, "issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def reporting_window_changed(window: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORTING_WINDOW_CHANGED,
            description=f"Reporting window set to {window}",
            details={"window": window},
            is_user_action=True,
        )

    @staticmethod
    def dark_mode_changed(enabled: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DARK_MODE_CHANGED,
            description=f"Dark mode {'enabled' if enabled else 'disabled'}",
            details={"enabled": enabled},
            is_user_action=True,
        )

    @staticmethod
    def insights_requested(sequence: int, window: str, transaction_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_REQUESTED,
            entity_type="insights",
            entity_id=str(sequence),
            description=f"Insights requested for {transaction_count} transactions ({window})",
            details={"window": window, "transaction_count": transaction_count},
        )

    @staticmethod
    def insights_generated(sequence: int, insight_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_GENERATED,
            entity_type="insights",
            entity_id=str(sequence),
            description=f"Insights applied: {insight_count} items",
            details={"insight_count": insight_count},
        )

    @staticmethod
    def insights_fallback_used(window: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_FALLBACK_USED,
            severity=AuditSeverity.WARNING,
            entity_type="insights",
            description=f"Using local {window} fallback insight",
            details={"window": window},
            error_message=reason,
        )

    @staticmethod
    def insights_discarded_stale(sequence: int, latest: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_DISCARDED_STALE,
            severity=AuditSeverity.DEBUG,
            entity_type="insights",
            entity_id=str(sequence),
            description=f"Discarded insights #{sequence}, latest is #{latest}",
            details={"sequence": sequence, "latest": latest},
        )

    @staticmethod
    def category_suggested(suggestion: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_SUGGESTED,
            description=(
                f"Category suggested: {suggestion}" if suggestion
                else "No category suggestion available"
            ),
            details={"suggestion": suggestion},
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Stored value for {key} unreadable, using default",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="transaction",
            description=f"Transaction {operation} not saved, storage write failed",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def external_service_error(service: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service},
        )
