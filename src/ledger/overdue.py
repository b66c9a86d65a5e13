"""
Overdue Evaluator

Money: a debt owed to the user becomes overdue once the grace period after
its oldest unsettled record has passed, or once an explicit due date on a
lending-side record has passed.

Items: overdue only when an explicit due date exists and is in the past.
"""

from datetime import datetime
from typing import Iterable, Optional

from src.ledger.interest import elapsed_days
from src.models.transaction import Direction, TransactionRecord, ensure_utc


DEFAULT_GRACE_PERIOD_DAYS = 7


def money_days_overdue(
    records: Iterable[TransactionRecord],
    now: datetime,
    grace_period_days: int = DEFAULT_GRACE_PERIOD_DAYS,
) -> int:
    """
    Days past due for a group of unsettled monetary records.

    The caller decides whether the balance is actually owed to the user.
    """
    oldest: Optional[datetime] = None
    earliest_due: Optional[datetime] = None

    for record in records:
        if record.settled or record.is_item:
            continue
        if oldest is None or record.created_at < oldest:
            oldest = record.created_at
        if record.direction is Direction.LENT and record.due_date is not None:
            if earliest_due is None or record.due_date < earliest_due:
                earliest_due = record.due_date

    if earliest_due is not None:
        return elapsed_days(earliest_due, now)
    if oldest is None:
        return 0
    return max(0, elapsed_days(oldest, now) - grace_period_days)


def item_overdue(due_date: Optional[datetime], now: datetime) -> tuple[bool, int]:
    """(is_overdue, days_overdue) for a borrowed item."""
    if due_date is None or ensure_utc(now) <= ensure_utc(due_date):
        return False, 0
    return True, elapsed_days(due_date, now)
