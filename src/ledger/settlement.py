"""
Settlement Contract

The ledger owns WHAT a settlement does; the store owns applying it.
Each function here is pure: it takes a snapshot and returns the records to
write. Stores call these so their counterparty matching is identical to the
aggregator's grouping.

    settle-all           every unsettled record for the counterparty
    partial payment      append a counter-transaction, mutate nothing
    mark defaulted       settle only the unsettled LENT records, annotated
    total owed           signed sum of unsettled money, before interest

Operations that match nothing are no-ops.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from src.models.transaction import (
    Direction,
    TransactionRecord,
    normalize_counterparty,
    utc_now,
)


PARTIAL_PAYMENT_NOTE = "Partial payment"
DEFAULTED_MARKER = " [DEFAULTED - WON'T PAY]"


class InvalidPaymentError(ValueError):
    """A payment amount that is not a positive number."""
    pass


def _unsettled_for(
    records: Iterable[TransactionRecord],
    counterparty: str,
) -> list[TransactionRecord]:
    key = normalize_counterparty(counterparty)
    if not key:
        return []
    return [
        r for r in records
        if not r.settled and r.normalized_counterparty == key
    ]


def plan_settle_all(
    records: Iterable[TransactionRecord],
    counterparty: str,
) -> list[TransactionRecord]:
    """Settled copies of every unsettled record for the counterparty."""
    return [
        r.model_copy(update={"settled": True})
        for r in _unsettled_for(records, counterparty)
    ]


def build_partial_payment(
    counterparty: str,
    amount: Decimal,
    now: Optional[datetime] = None,
) -> TransactionRecord:
    """
    A counter-transaction for money the counterparty paid back.

    Borrowed direction so it nets against what they owe; unsettled so the
    next aggregation picks it up.
    """
    if not normalize_counterparty(counterparty):
        raise InvalidPaymentError("Counterparty is required for a payment")
    if amount is None or amount <= 0:
        raise InvalidPaymentError(f"Payment must be greater than zero, got {amount}")
    return TransactionRecord(
        counterparty=counterparty.strip(),
        amount=amount,
        direction=Direction.BORROWED,
        settled=False,
        created_at=now or utc_now(),
        notes=PARTIAL_PAYMENT_NOTE,
    )


def plan_mark_defaulted(
    records: Iterable[TransactionRecord],
    counterparty: str,
) -> list[TransactionRecord]:
    """
    Write off what the counterparty owes.

    Payments they already made (borrowed side) are left untouched.
    """
    return [
        r.model_copy(update={
            "settled": True,
            "notes": (r.notes or "") + DEFAULTED_MARKER,
        })
        for r in _unsettled_for(records, counterparty)
        if r.direction is Direction.LENT
    ]


def total_owed(
    records: Iterable[TransactionRecord],
    counterparty: str,
) -> Decimal:
    """Signed balance with the counterparty (positive = owed to the user)."""
    return sum(
        (r.signed_amount for r in _unsettled_for(records, counterparty)),
        Decimal("0"),
    )
