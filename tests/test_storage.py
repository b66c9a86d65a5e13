"""Tests for the in-memory stores and the settlement contract."""

import pytest
from decimal import Decimal
from uuid import uuid4

from conftest import NOW, make_record
from src.interpreter import interpret
from src.ledger import (
    DEFAULTED_MARKER,
    PARTIAL_PAYMENT_NOTE,
    InvalidPaymentError,
    build_partial_payment,
    plan_mark_defaulted,
    plan_settle_all,
    total_owed,
)
from src.models.audit import AuditEventBuilder
from src.models.transaction import Direction
from src.services.storage import (
    DuplicateError,
    InMemoryTransactionStorage,
    NotFoundError,
)


class TestSettlementPlanning:
    """The pure side of settlement: what would be written."""

    def test_settle_all_matches_normalized_name(self):
        records = [
            make_record("Bob", 10),
            make_record(" BOB ", 20),
            make_record("Bobby", 30),
        ]
        planned = plan_settle_all(records, "bob")
        assert len(planned) == 2
        assert all(r.settled for r in planned)

    def test_blank_counterparty_matches_nothing(self):
        assert plan_settle_all([make_record("Bob", 10)], "  ") == []
        assert total_owed([make_record("Bob", 10)], "") == Decimal("0")

    def test_partial_payment_rejects_non_positive(self):
        with pytest.raises(InvalidPaymentError):
            build_partial_payment("Bob", Decimal("0"))
        with pytest.raises(InvalidPaymentError):
            build_partial_payment("Bob", Decimal("-5"))

    def test_partial_payment_requires_counterparty(self):
        with pytest.raises(InvalidPaymentError):
            build_partial_payment(" ", Decimal("5"))

    def test_defaulted_leaves_payments_alone(self):
        records = [
            make_record("Bob", 100, notes="rent"),
            make_record("Bob", 30, Direction.BORROWED),
        ]
        [written_off] = plan_mark_defaulted(records, "bob")
        assert written_off.direction is Direction.LENT
        assert written_off.settled is True
        assert written_off.notes == "rent" + DEFAULTED_MARKER


class TestInMemoryTransactionStorage:
    """CRUD behaviour of the reference store."""

    @pytest.mark.asyncio
    async def test_save_and_get(self, storage):
        record = make_record("John", 50)
        await storage.save_transaction(record)
        assert await storage.get_transaction(record.id) == record
        assert len(storage) == 1

    @pytest.mark.asyncio
    async def test_save_duplicate_raises(self, storage):
        record = make_record("John", 50)
        await storage.save_transaction(record)
        with pytest.raises(DuplicateError):
            await storage.save_transaction(record)

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, storage):
        assert await storage.get_transaction(uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown_raise(self, storage):
        with pytest.raises(NotFoundError):
            await storage.update_transaction(make_record("John", 50))
        with pytest.raises(NotFoundError):
            await storage.delete_transaction(uuid4())

    @pytest.mark.asyncio
    async def test_update_replaces_row(self, storage):
        record = make_record("John", 50)
        await storage.save_transaction(record)
        await storage.update_transaction(record.model_copy(update={"notes": "fixed"}))
        assert (await storage.get_transaction(record.id)).notes == "fixed"

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        record = make_record("John", 50)
        await storage.save_transaction(record)
        assert await storage.delete_transaction(record.id) is True
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_list_filters_and_orders_newest_first(self):
        older = make_record("John", 10, days_ago=5)
        newer = make_record("john", 20, days_ago=1)
        settled = make_record("John", 30, settled=True)
        other = make_record("Sarah", 40)
        storage = InMemoryTransactionStorage([older, newer, settled, other])

        listed = await storage.list_transactions(counterparty=" JOHN ")
        assert [r.id for r in listed] == [settled.id, newer.id, older.id]

        active = await storage.list_transactions(
            counterparty="john", include_settled=False
        )
        assert [r.id for r in active] == [newer.id, older.id]


class TestStoreSettlement:
    """Settlement applied through the store."""

    @pytest.mark.asyncio
    async def test_settle_with_bob(self):
        """A typed settle line clears both open Bob records."""
        storage = InMemoryTransactionStorage([
            make_record("Bob", 30),
            make_record("bob", 15, Direction.BORROWED),
            make_record("Sarah", 40),
        ])
        result = interpret("settle with bob", now=NOW)
        assert result.action.name == "Bob"

        assert await storage.settle_all(result.action.name) == 2
        assert await storage.total_owed("bob") == Decimal("0")
        assert await storage.total_owed("sarah") == Decimal("40")

    @pytest.mark.asyncio
    async def test_settle_all_is_idempotent(self):
        storage = InMemoryTransactionStorage([make_record("Bob", 30)])
        assert await storage.settle_all("Bob") == 1
        assert await storage.settle_all("Bob") == 0

    @pytest.mark.asyncio
    async def test_settle_unknown_is_a_no_op(self, storage):
        assert await storage.settle_all("nobody") == 0

    @pytest.mark.asyncio
    async def test_partial_payment_appends_counter_transaction(self):
        original = make_record("John", 100, days_ago=10)
        storage = InMemoryTransactionStorage([original])
        before = await storage.total_owed("john")

        payment = await storage.record_partial_payment(" John ", Decimal("25"), NOW)

        assert len(storage) == 2
        assert await storage.total_owed("john") == before - Decimal("25")
        assert payment.direction is Direction.BORROWED
        assert payment.settled is False
        assert payment.notes == PARTIAL_PAYMENT_NOTE
        assert payment.counterparty == "John"
        assert (await storage.get_transaction(original.id)).settled is False

    @pytest.mark.asyncio
    async def test_invalid_partial_payment_stores_nothing(self, storage):
        with pytest.raises(InvalidPaymentError):
            await storage.record_partial_payment("John", Decimal("0"))
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_mark_defaulted(self):
        storage = InMemoryTransactionStorage([
            make_record("Bob", 100),
            make_record("Bob", 40),
            make_record("Bob", 30, Direction.BORROWED),
        ])
        assert await storage.mark_defaulted("BOB") == 2
        assert await storage.total_owed("bob") == Decimal("-30")

        active = await storage.list_transactions("bob", include_settled=False)
        assert [r.direction for r in active] == [Direction.BORROWED]

    @pytest.mark.asyncio
    async def test_snapshots_are_copies(self, storage):
        """Settling never changes a list the caller already holds."""
        await storage.save_transaction(make_record("Bob", 30))
        snapshot = await storage.list_transactions()
        await storage.settle_all("bob")
        assert snapshot[0].settled is False


class TestInMemoryAuditStorage:
    """Append-only audit log."""

    @pytest.mark.asyncio
    async def test_events_by_correlation_id(self, audit_storage):
        correlation_id = uuid4()
        await audit_storage.append_event(AuditEventBuilder.counterparty_settled(
            counterparty="bob", settled_count=1, correlation_id=correlation_id,
        ))
        await audit_storage.append_event(AuditEventBuilder.counterparty_settled(
            counterparty="amy", settled_count=0, correlation_id=uuid4(),
        ))
        events = await audit_storage.get_events_by_correlation_id(correlation_id)
        assert [e.counterparty for e in events] == ["bob"]
        assert len(await audit_storage.get_recent_events(limit=1)) == 1

    @pytest.mark.asyncio
    async def test_events_by_entity(self, audit_storage):
        transaction_id = uuid4()
        await audit_storage.append_event(AuditEventBuilder.partial_payment_recorded(
            transaction_id=transaction_id,
            counterparty="john",
            amount="25",
            correlation_id=uuid4(),
        ))
        events = await audit_storage.get_events_by_entity("transaction", transaction_id)
        assert len(events) == 1
