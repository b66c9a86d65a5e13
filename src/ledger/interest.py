"""
Interest Accrual Calculator

Simple weekly interest, charged only on money lent by the user:

    interest = amount x weekly_rate x whole_weeks_elapsed

Interest only steps up at 7-day boundaries and never decreases as time
passes. Records on the borrowing side (including payments) never accrue.
"""

from datetime import datetime
from decimal import Decimal

from src.models.transaction import Direction, TransactionRecord, ensure_utc


ZERO = Decimal("0")


def elapsed_days(start: datetime, end: datetime) -> int:
    """Whole days from start to end, never negative."""
    return max(0, (ensure_utc(end) - ensure_utc(start)).days)


def elapsed_weeks(start: datetime, end: datetime) -> int:
    """Whole weeks from start to end, never negative."""
    return elapsed_days(start, end) // 7


def accrues_interest(record: TransactionRecord) -> bool:
    return (
        not record.settled
        and not record.is_item
        and record.direction is Direction.LENT
        and record.amount is not None
        and record.amount > 0
        and record.interest_rate is not None
        and record.interest_rate > 0
    )


def accrued_interest(record: TransactionRecord, now: datetime) -> Decimal:
    """Interest accrued on a single record as of `now`."""
    if not accrues_interest(record):
        return ZERO
    weeks = elapsed_weeks(record.created_at, now)
    return record.amount * record.interest_rate * weeks
