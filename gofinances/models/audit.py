"""
Audit Models for GoFinances

Every significant action in the system is logged for audit purposes.
This provides:
1. Complete traceability of sign-ins, sign-outs and ledger writes
2. Debugging information when things go wrong
3. A trail pointing at the exact record when stored data is corrupted

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the session and ledger lifecycle has its own event type.
    """
    # Session
    SESSION_RESTORED = "session_restored"
    SESSION_EMPTY = "session_empty"
    USER_SIGNED_IN = "user_signed_in"
    SIGN_IN_CANCELLED = "sign_in_cancelled"
    SIGN_IN_FAILED = "sign_in_failed"
    USER_SIGNED_OUT = "user_signed_out"

    # Ledger
    TRANSACTION_REJECTED = "transaction_rejected"
    TRANSACTION_SAVED = "transaction_saved"
    SAVE_FAILED = "save_failed"
    LEDGER_CLEARED = "ledger_cleared"

    # Summaries
    SUMMARY_GENERATED = "summary_generated"
    MALFORMED_RECORD = "malformed_record"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


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
    Every significant action creates one of these.
    """

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
        description="Type of entity (e.g., 'user', 'transaction', 'ledger')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one register submission)"
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
    error_code: Optional[str] = None
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
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_signed_in(user_id, "google")
        event = AuditEventBuilder.transaction_saved(transaction_id, user_id, "400", correlation_id)
    """

    @staticmethod
    def session_restored(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_RESTORED,
            entity_type="user",
            entity_id=user_id,
            description="Persisted session restored",
        )

    @staticmethod
    def session_empty() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_EMPTY,
            entity_type="user",
            description="No persisted session found",
        )

    @staticmethod
    def user_signed_in(
        user_id: str,
        provider: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_IN,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"User signed in with {provider}",
            details={"provider": provider},
            is_user_action=True,
        )

    @staticmethod
    def sign_in_cancelled(
        provider: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_CANCELLED,
            entity_type="user",
            correlation_id=correlation_id,
            description=f"User cancelled {provider} sign-in",
            details={"provider": provider},
            is_user_action=True,
        )

    @staticmethod
    def sign_in_failed(
        provider: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            correlation_id=correlation_id,
            description=f"Sign-in with {provider} failed",
            error_message=error_message,
            details={"provider": provider},
        )

    @staticmethod
    def user_signed_out(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_OUT,
            entity_type="user",
            entity_id=user_id,
            description="User signed out",
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        user_id: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Transaction rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def transaction_saved(
        transaction_id: str,
        user_id: str,
        amount: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction saved: {amount}",
            details={
                "user_id": user_id,
                "amount": amount,
            },
        )

    @staticmethod
    def save_failed(
        user_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Failed to persist transaction",
            error_message=error_message,
        )

    @staticmethod
    def ledger_cleared(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=user_id,
            description="All transactions deleted",
            is_user_action=True,
        )

    @staticmethod
    def summary_generated(
        user_id: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_GENERATED,
            severity=AuditSeverity.DEBUG,
            entity_type="ledger",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Summary generated from {transaction_count} transactions",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def malformed_record(
        user_id: str,
        index: Optional[int],
        record_id: Optional[str],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MALFORMED_RECORD,
            severity=AuditSeverity.ERROR,
            entity_type="transaction",
            entity_id=record_id,
            correlation_id=correlation_id,
            description="Corrupted transaction record detected",
            error_message=reason,
            details={
                "user_id": user_id,
                "index": index,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
