"""
In-Memory Storage Implementation

Reference implementation of the storage interfaces. Rows are kept in the
same plain key-value form a real backend would persist
(TransactionRecord.to_record_dict), so the conversion path is exercised
exactly as it would be against a database.

Settlement delegates to src.ledger.settlement, which guarantees the same
counterparty matching as the aggregator.

TRADEOFFS:
- Nothing survives a restart (fine for tests and a local session)
- Filtering happens in Python
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from src.ledger.settlement import (
    build_partial_payment,
    plan_mark_defaulted,
    plan_settle_all,
    total_owed as ledger_total_owed,
)
from src.models.audit import AuditEvent
from src.models.transaction import TransactionRecord, normalize_counterparty
from src.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    TransactionStorageInterface,
)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Transaction storage backed by a dict of plain rows."""

    def __init__(self, records: Optional[list[TransactionRecord]] = None):
        self._rows: dict[str, dict[str, Any]] = {}
        for record in records or []:
            self._rows[str(record.id)] = record.to_record_dict()

    def _snapshot(self) -> list[TransactionRecord]:
        return [TransactionRecord.from_record_dict(row) for row in self._rows.values()]

    def _write(self, records: list[TransactionRecord]) -> None:
        for record in records:
            self._rows[str(record.id)] = record.to_record_dict()

    async def save_transaction(self, record: TransactionRecord) -> TransactionRecord:
        key = str(record.id)
        if key in self._rows:
            raise DuplicateError(f"Transaction {key} already exists")
        self._rows[key] = record.to_record_dict()
        return record

    async def get_transaction(self, transaction_id: UUID) -> Optional[TransactionRecord]:
        row = self._rows.get(str(transaction_id))
        return TransactionRecord.from_record_dict(row) if row else None

    async def update_transaction(self, record: TransactionRecord) -> TransactionRecord:
        key = str(record.id)
        if key not in self._rows:
            raise NotFoundError(f"Transaction {key} not found")
        self._rows[key] = record.to_record_dict()
        return record

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        key = str(transaction_id)
        if key not in self._rows:
            raise NotFoundError(f"Transaction {key} not found")
        del self._rows[key]
        return True

    async def list_transactions(
        self,
        counterparty: Optional[str] = None,
        include_settled: bool = True,
    ) -> list[TransactionRecord]:
        records = self._snapshot()

        if counterparty is not None:
            key = normalize_counterparty(counterparty)
            records = [r for r in records if r.normalized_counterparty == key]
        if not include_settled:
            records = [r for r in records if not r.settled]

        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    async def settle_all(self, counterparty: str) -> int:
        updates = plan_settle_all(self._snapshot(), counterparty)
        self._write(updates)
        return len(updates)

    async def record_partial_payment(
        self,
        counterparty: str,
        amount: Decimal,
        now: Optional[datetime] = None,
    ) -> TransactionRecord:
        payment = build_partial_payment(counterparty, amount, now)
        return await self.save_transaction(payment)

    async def mark_defaulted(self, counterparty: str) -> int:
        updates = plan_mark_defaulted(self._snapshot(), counterparty)
        self._write(updates)
        return len(updates)

    async def total_owed(self, counterparty: str) -> Decimal:
        return ledger_total_owed(self._snapshot(), counterparty)

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
