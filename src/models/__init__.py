"""
Data Models Package

This package contains all Pydantic models used by the debt ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.transaction import (
    Direction,
    TransactionRecord,
    normalize_counterparty,
    ensure_utc,
    utc_now,
)
from src.models.actions import (
    AddTransaction,
    ParseError,
    ParseErrorKind,
    ParseFailure,
    ParseResult,
    Parsed,
    ParsedAction,
    SettleCounterparty,
)
from src.models.summary import (
    BalanceSummary,
    BorrowedItem,
    DebtorSummary,
)
from src.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Direction",
    "TransactionRecord",
    "normalize_counterparty",
    "ensure_utc",
    "utc_now",
    # Interpreter output
    "AddTransaction",
    "ParseError",
    "ParseErrorKind",
    "ParseFailure",
    "ParseResult",
    "Parsed",
    "ParsedAction",
    "SettleCounterparty",
    # Derived views
    "BalanceSummary",
    "BorrowedItem",
    "DebtorSummary",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
