"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.config import LedgerSettings
from src.models.transaction import Direction, TransactionRecord
from src.services.storage import InMemoryAuditStorage, InMemoryTransactionStorage


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_record(
    counterparty: str = "John",
    amount=None,
    direction: Direction = Direction.LENT,
    days_ago: int = 0,
    **kwargs,
) -> TransactionRecord:
    """Build a record created `days_ago` days before NOW."""
    if amount is not None and not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return TransactionRecord(
        counterparty=counterparty,
        amount=amount,
        direction=direction,
        created_at=NOW - timedelta(days=days_ago),
        **kwargs,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def ledger_settings():
    """Defaults, independent of any LEDGER_* variables in the environment."""
    return LedgerSettings(_env_file=None)


@pytest.fixture
def storage():
    return InMemoryTransactionStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()
