"""
Audit Logger

DESIGN DECISION: Every ledger mutation and rejected entry is logged.
This provides:
1. Complete traceability
2. Debugging capability when a sentence is misread
3. User can see history of their entries

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.models.audit import AuditEvent, AuditEventBuilder
from src.services.storage import AuditStorageInterface


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


def configure_logging(debug_mode: bool = False) -> None:
    """Set the level of the "ledger" logger tree."""
    level = logging.DEBUG if debug_mode else logging.INFO
    logging.getLogger("ledger").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
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
        self._logger = structlog.get_logger("ledger.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                persisted = await self._storage.append_event(event)
                self._logger.debug(
                    "audit_event_persisted",
                    event_id=str(event.event_id),
                    persisted=persisted,
                )
                return persisted
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_entry_parsed(
        self,
        action_kind: str,
        counterparty: str,
        correlation_id: UUID,
    ) -> None:
        """Log a successfully interpreted entry."""
        await self.log(AuditEventBuilder.entry_parsed(
            action_kind=action_kind,
            counterparty=counterparty,
            correlation_id=correlation_id,
        ))

    async def log_parse_failed(
        self,
        text: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log an entry that matched no template."""
        await self.log(AuditEventBuilder.parse_failed(
            text=text,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        transaction_id: UUID,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.validation_failed(
            transaction_id=transaction_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_transaction_saved(
        self,
        transaction_id: UUID,
        counterparty: str,
        direction: str,
        amount: Optional[str],
        item: Optional[str],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            counterparty=counterparty,
            direction=direction,
            amount=amount,
            item=item,
            correlation_id=correlation_id,
        ))

    async def log_counterparty_settled(
        self,
        counterparty: str,
        settled_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.counterparty_settled(
            counterparty=counterparty,
            settled_count=settled_count,
            correlation_id=correlation_id,
        ))

    async def log_partial_payment(
        self,
        transaction_id: UUID,
        counterparty: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.partial_payment_recorded(
            transaction_id=transaction_id,
            counterparty=counterparty,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_counterparty_defaulted(
        self,
        counterparty: str,
        defaulted_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.counterparty_defaulted(
            counterparty=counterparty,
            defaulted_count=defaulted_count,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., one typed line).
    Pass it through all subsequent operations.
    """
    return uuid4()
