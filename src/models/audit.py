"""
Audit Models for the Debt Ledger

Every ledger mutation and every rejected entry is logged for audit purposes.
This provides:
1. Complete traceability of who was settled, paid or written off
2. Debugging information when an entry is misread
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from src.models.transaction import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Interpreting text entries
    ENTRY_PARSED = "entry_parsed"
    PARSE_FAILED = "parse_failed"
    VALIDATION_FAILED = "validation_failed"

    # Ledger mutations
    TRANSACTION_SAVED = "transaction_saved"
    COUNTERPARTY_SETTLED = "counterparty_settled"
    PARTIAL_PAYMENT_RECORDED = "partial_payment_recorded"
    COUNTERPARTY_DEFAULTED = "counterparty_defaulted"

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
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
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
        description="Type of entity (e.g., 'transaction', 'counterparty', 'entry')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    counterparty: Optional[str] = Field(
        default=None,
        description="Normalized counterparty the event concerns"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one submitted line)"
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
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "counterparty": self.counterparty,
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
        event = AuditEventBuilder.entry_parsed("add", "John", correlation_id)
        event = AuditEventBuilder.counterparty_settled("john", 2, correlation_id)
    """

    @staticmethod
    def entry_parsed(
        action_kind: str,
        counterparty: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_PARSED,
            entity_type="entry",
            counterparty=counterparty,
            correlation_id=correlation_id,
            description=f"Entry understood as '{action_kind}' for {counterparty[:100]}",
            details={
                "action": action_kind,
            },
            is_user_action=True,
        )

    @staticmethod
    def parse_failed(
        text: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="entry",
            correlation_id=correlation_id,
            description="Entry could not be understood",
            details={
                "text": text[:200],
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        transaction_id: UUID,
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def transaction_saved(
        transaction_id: UUID,
        counterparty: str,
        direction: str,
        amount: Optional[str],
        item: Optional[str],
        correlation_id: UUID
    ) -> AuditEvent:
        what = amount if amount is not None else (item or "item")
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            counterparty=counterparty,
            correlation_id=correlation_id,
            description=f"Transaction saved: {direction} {what} ({counterparty[:100]})",
            details={
                "direction": direction,
                "amount": amount,
                "item": item,
            },
        )

    @staticmethod
    def counterparty_settled(
        counterparty: str,
        settled_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COUNTERPARTY_SETTLED,
            entity_type="counterparty",
            counterparty=counterparty,
            correlation_id=correlation_id,
            description=f"Settled {settled_count} transactions with {counterparty[:100]}",
            details={
                "settled_count": settled_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def partial_payment_recorded(
        transaction_id: UUID,
        counterparty: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARTIAL_PAYMENT_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            counterparty=counterparty,
            correlation_id=correlation_id,
            description=f"Recorded payment of {amount} from {counterparty[:100]}",
            details={
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def counterparty_defaulted(
        counterparty: str,
        defaulted_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COUNTERPARTY_DEFAULTED,
            severity=AuditSeverity.WARNING,
            entity_type="counterparty",
            counterparty=counterparty,
            correlation_id=correlation_id,
            description=f"Marked {defaulted_count} transactions with {counterparty[:100]} as defaulted",
            details={
                "defaulted_count": defaulted_count,
            },
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
