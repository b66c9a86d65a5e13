"""
Tests for the Debt Ledger

Test strategy:
1. Unit tests for pure components (models, interpreter, aggregator, validator)
2. Integration tests for flows against the in-memory stores
3. No real storage backends in tests
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from src.models.transaction import (
    Direction,
    TransactionRecord,
    normalize_counterparty,
)
from src.models.actions import (
    AddTransaction,
    ParseError,
    ParseErrorKind,
    ParseFailure,
    Parsed,
    SettleCounterparty,
)
from src.models.summary import BalanceSummary, BorrowedItem, DebtorSummary
from src.models.validation import ValidationIssue, ValidationResult
from src.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionRecord:
    """Tests for the core ledger record."""

    def test_record_defaults(self):
        """New records are unsettled and stamped with an id and time."""
        record = TransactionRecord(
            counterparty="John",
            amount=Decimal("50"),
            direction=Direction.LENT,
        )
        assert record.settled is False
        assert record.id is not None
        assert record.created_at.tzinfo is not None

    def test_record_is_frozen(self):
        """Records cannot be mutated in place."""
        record = TransactionRecord(counterparty="John", direction=Direction.LENT)
        with pytest.raises(Exception):
            record.settled = True

    def test_naive_datetimes_become_utc(self):
        """Naive timestamps are interpreted as UTC."""
        record = TransactionRecord(
            counterparty="John",
            direction=Direction.LENT,
            created_at=datetime(2024, 1, 1, 9, 0),
        )
        assert record.created_at.tzinfo == timezone.utc

    def test_rejects_negative_interest_rate(self):
        with pytest.raises(ValueError):
            TransactionRecord(
                counterparty="John",
                amount=Decimal("50"),
                direction=Direction.LENT,
                interest_rate=Decimal("-0.1"),
            )

    def test_signed_amount_follows_direction(self):
        """Lent is positive, borrowed is negative."""
        lent = TransactionRecord(
            counterparty="John", amount=Decimal("40"), direction=Direction.LENT
        )
        borrowed = TransactionRecord(
            counterparty="John", amount=Decimal("40"), direction=Direction.BORROWED
        )
        assert lent.signed_amount == Decimal("40")
        assert borrowed.signed_amount == Decimal("-40")

    def test_item_record_contributes_nothing(self):
        """A record with both item and amount is treated as an item."""
        record = TransactionRecord(
            counterparty="John",
            amount=Decimal("40"),
            item="drill",
            direction=Direction.LENT,
        )
        assert record.is_item is True
        assert record.signed_amount == Decimal("0")

    def test_record_dict_keeps_every_field(self):
        """to_record_dict output rebuilds the same record."""
        record = TransactionRecord(
            counterparty="Sarah",
            amount=Decimal("30.50"),
            direction=Direction.BORROWED,
            due_date=datetime(2024, 7, 1, tzinfo=timezone.utc),
            interest_rate=Decimal("0.1"),
            notes="for the concert",
            phone="(555) 123-4567",
        )
        row = record.to_record_dict()
        assert row["amount"] == "30.50"
        assert row["direction"] == "borrowed"
        assert TransactionRecord.from_record_dict(row) == record

    def test_from_record_dict_accepts_string_booleans(self):
        """Rows from text-only backends carry 'TRUE'/'FALSE'."""
        row = {
            "id": str(uuid4()),
            "counterparty": "Bob",
            "amount": "10",
            "direction": "lent",
            "settled": "TRUE",
            "created_at": "2024-06-01T00:00:00+00:00",
            "item": "",
        }
        record = TransactionRecord.from_record_dict(row)
        assert record.settled is True
        assert record.item is None

    def test_from_record_dict_rejects_bad_amount(self):
        with pytest.raises(ValueError):
            TransactionRecord.from_record_dict({
                "counterparty": "Bob",
                "amount": "ten",
                "direction": "lent",
            })


class TestNormalizeCounterparty:
    """Tests for the counterparty grouping key."""

    @pytest.mark.parametrize("name", ["John", "JOHN", " john ", "\tjohn\n"])
    def test_variants_share_a_key(self, name):
        assert normalize_counterparty(name) == "john"

    def test_empty_values(self):
        assert normalize_counterparty(None) == ""
        assert normalize_counterparty("   ") == ""


class TestActionModels:
    """Tests for interpreter output models."""

    def test_parsed_and_failure_flags(self):
        draft = TransactionRecord(counterparty="Bob", direction=Direction.LENT)
        parsed = Parsed(action=AddTransaction(draft=draft))
        failure = ParseFailure(error=ParseError(
            kind=ParseErrorKind.EMPTY_INPUT,
            message="Nothing written.",
        ))
        assert parsed.ok is True
        assert failure.ok is False

    def test_action_discriminated_by_kind(self):
        """A plain dict is routed to the right action by its kind."""
        parsed = Parsed.model_validate({"action": {"kind": "settle", "name": "Bob"}})
        assert isinstance(parsed.action, SettleCounterparty)
        assert parsed.action.name == "Bob"

    def test_settle_requires_a_name(self):
        with pytest.raises(ValueError):
            SettleCounterparty(name="")


class TestSummaryModels:
    """Tests for derived summary views."""

    def test_debtor_direction_flags(self):
        owes = DebtorSummary(name="John", principal=Decimal("80"), total=Decimal("80"))
        owed = DebtorSummary(name="Sarah", principal=Decimal("-30"), total=Decimal("-30"))
        assert owes.owes_me and not owes.i_owe
        assert owed.i_owe and not owed.owes_me

    def test_needs_attention_for_overdue_item(self):
        """An overdue item flags the debtor even when money is not overdue."""
        summary = DebtorSummary(
            name="John",
            principal=Decimal("0"),
            total=Decimal("0"),
            items=[BorrowedItem(
                name="drill", they_have_mine=True, is_overdue=True, days_overdue=2
            )],
        )
        assert summary.is_overdue is False
        assert summary.needs_attention is True
        assert len(summary.overdue_items) == 1

    def test_balance_net(self):
        balance = BalanceSummary(owed_to_me=Decimal("100"), i_owe=Decimal("30"))
        assert balance.net_balance == Decimal("70")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_PARSED,
            description="Entry understood",
        )
        assert event.event_type == AuditEventType.ENTRY_PARSED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            description="Transaction saved",
            counterparty="john",
            details={"amount": "50"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_saved"
        assert log_dict["counterparty"] == "john"
        assert log_dict["details"]["amount"] == "50"

    def test_builder_counterparty_settled(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.counterparty_settled(
            counterparty="bob",
            settled_count=2,
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.COUNTERPARTY_SETTLED
        assert event.details["settled_count"] == 2
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_builder_defaulted_is_warning(self):
        event = AuditEventBuilder.counterparty_defaulted(
            counterparty="bob",
            defaulted_count=1,
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING

    def test_builder_truncates_long_counterparty(self):
        """Descriptions stay within the column limit."""
        event = AuditEventBuilder.entry_parsed(
            action_kind="add",
            counterparty="x" * 1000,
            correlation_id=uuid4(),
        )
        assert len(event.description) <= 500


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            transaction_id=uuid4(),
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            transaction_id=uuid4(),
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="interest_rate",
                    issue_type="ignored",
                    message="Rate ignored",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_issue_severity_is_restricted(self):
        with pytest.raises(ValueError):
            ValidationIssue(
                field="amount",
                issue_type="missing",
                message="x",
                severity="fatal",
            )
