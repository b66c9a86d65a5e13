"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the ledger core independent of any particular database
2. Use in-memory storage for testing
3. Add caching layers transparently

The interface is intentionally simple - we're not building a full ORM.
Just the operations the ledger needs.

Every counterparty lookup MUST use normalize_counterparty(), the same key
the aggregator groups by, or settlement and balances will disagree.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from src.models.audit import AuditEvent
from src.models.transaction import TransactionRecord


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.

    Reads must return self-consistent snapshots so the aggregator never
    observes a half-applied settlement.
    """

    @abstractmethod
    async def save_transaction(self, record: TransactionRecord) -> TransactionRecord:
        """
        Save a new transaction.

        Raises:
            DuplicateError: If a record with the same id already exists
        """
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: UUID) -> Optional[TransactionRecord]:
        """Retrieve a transaction by id, None if it does not exist."""
        pass

    @abstractmethod
    async def update_transaction(self, record: TransactionRecord) -> TransactionRecord:
        """
        Replace an existing transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        pass

    @abstractmethod
    async def delete_transaction(self, transaction_id: UUID) -> bool:
        """
        Delete a transaction by id.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        counterparty: Optional[str] = None,
        include_settled: bool = True,
    ) -> list[TransactionRecord]:
        """
        List transactions, newest first.

        Args:
            counterparty: Only this counterparty (normalized match)
            include_settled: Include settled history

        Returns:
            A snapshot; later writes do not affect it
        """
        pass

    @abstractmethod
    async def settle_all(self, counterparty: str) -> int:
        """
        Mark every unsettled record for a counterparty as settled.

        Returns:
            Number of records settled (0 is a no-op, not an error)
        """
        pass

    @abstractmethod
    async def record_partial_payment(
        self,
        counterparty: str,
        amount: Decimal,
        now: Optional[datetime] = None,
    ) -> TransactionRecord:
        """
        Append a counter-transaction for a payment received.

        Existing records are never modified.

        Raises:
            InvalidPaymentError: If amount is not positive
        """
        pass

    @abstractmethod
    async def mark_defaulted(self, counterparty: str) -> int:
        """
        Write off unsettled lending-side records for a counterparty.

        Returns:
            Number of records written off
        """
        pass

    @abstractmethod
    async def total_owed(self, counterparty: str) -> Decimal:
        """Signed unsettled balance (positive = owed to the user)."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """All events for a correlation ID, in chronological order."""
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        """All events for a specific entity, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """The most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
