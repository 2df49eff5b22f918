"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Complete traceability of sign-ins and ledger writes
2. Debugging capability
3. A pointer to the exact record when stored data turns out corrupted

The audit logger:
- Is async so it can sit on the same await chain as the flows
- Never raises: a logging problem must not break a sign-in or a save
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from gofinances.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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

    Writes every event to the structured local log. Events are also kept
    in memory (bounded) so the current process can inspect its own trail.
    """

    def __init__(self, history_size: int = 500):
        self._logger = structlog.get_logger("gofinances.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    async def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[: len(self._history) - self._history_size]

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    async def log_session_restored(self, user_id: str) -> None:
        await self.log(AuditEventBuilder.session_restored(user_id))

    async def log_session_empty(self) -> None:
        await self.log(AuditEventBuilder.session_empty())

    async def log_user_signed_in(
        self,
        user_id: str,
        provider: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful sign-in."""
        event = AuditEventBuilder.user_signed_in(
            user_id=user_id,
            provider=provider,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_sign_in_cancelled(
        self,
        provider: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.sign_in_cancelled(
            provider=provider,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_sign_in_failed(
        self,
        provider: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.sign_in_failed(
            provider=provider,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_user_signed_out(self, user_id: Optional[str]) -> None:
        await self.log(AuditEventBuilder.user_signed_out(user_id))

    async def log_transaction_rejected(
        self,
        user_id: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log a register form that failed validation."""
        event = AuditEventBuilder.transaction_rejected(
            user_id=user_id,
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_saved(
        self,
        transaction_id: str,
        user_id: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        """Log a transaction append."""
        event = AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            user_id=user_id,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        user_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            user_id=user_id,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_ledger_cleared(self, user_id: str) -> None:
        await self.log(AuditEventBuilder.ledger_cleared(user_id))

    async def log_summary_generated(
        self,
        user_id: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.summary_generated(
            user_id=user_id,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_malformed_record(
        self,
        user_id: str,
        index: Optional[int],
        record_id: Optional[str],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a corrupted record found while aggregating."""
        event = AuditEventBuilder.malformed_record(
            user_id=user_id,
            index=index,
            record_id=record_id,
            reason=reason,
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

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        event = AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a register submission).
    Pass it through all subsequent operations.
    """
    return uuid4()
