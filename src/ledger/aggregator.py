"""
Debt Ledger Aggregator

Builds one DebtorSummary per counterparty from a snapshot of records.

DESIGN DECISION: This is a pure function of (records, now, grace period).
Summaries are recomputed on every view refresh instead of being cached and
patched in place, so they can never drift from the records.

Grouping uses normalize_counterparty(), the same key the stores use for
settlement, so "John", "JOHN" and " john " are one person everywhere.
"""

from datetime import datetime
from typing import Iterable, Optional

from src.ledger.interest import ZERO, accrued_interest
from src.ledger.overdue import DEFAULT_GRACE_PERIOD_DAYS, item_overdue, money_days_overdue
from src.models.summary import BalanceSummary, BorrowedItem, DebtorSummary
from src.models.transaction import (
    Direction,
    TransactionRecord,
    ensure_utc,
    normalize_counterparty,
)


class _Group:
    """Unsettled records for one counterparty, split by kind."""

    def __init__(self, name: str):
        self.name = name
        self.money: list[TransactionRecord] = []
        self.items: list[TransactionRecord] = []
        self.notes: Optional[str] = None

    def add(self, record: TransactionRecord) -> None:
        if record.is_item:
            self.items.append(record)
        else:
            self.money.append(record)
        if self.notes is None and record.notes and record.notes.strip():
            self.notes = record.notes


def _borrowed_item(record: TransactionRecord, now: datetime) -> BorrowedItem:
    is_overdue, days = item_overdue(record.due_date, now)
    return BorrowedItem(
        name=record.item or "",
        due_date=record.due_date,
        they_have_mine=record.direction is Direction.LENT,
        is_overdue=is_overdue,
        days_overdue=days,
    )


def _summarize_group(
    group: _Group,
    now: datetime,
    grace_period_days: int,
) -> DebtorSummary:
    principal = sum((r.signed_amount for r in group.money), ZERO)
    interest = sum((accrued_interest(r, now) for r in group.money), ZERO)

    days_overdue = 0
    if principal > 0:
        days_overdue = money_days_overdue(group.money, now, grace_period_days)

    return DebtorSummary(
        name=group.name,
        principal=principal,
        accrued_interest=interest,
        total=principal + interest,
        is_overdue=days_overdue > 0,
        days_overdue=days_overdue,
        items=[_borrowed_item(r, now) for r in group.items],
        notes=group.notes,
    )


def summarize(
    records: Iterable[TransactionRecord],
    now: datetime,
    grace_period_days: int = DEFAULT_GRACE_PERIOD_DAYS,
) -> list[DebtorSummary]:
    """
    Aggregate a record snapshot into per-counterparty summaries.

    Settled records are ignored. Counterparties with no active record are
    omitted. Output follows first-appearance order; use sort_summaries()
    for display ordering.
    """
    now = ensure_utc(now)
    groups: dict[str, _Group] = {}

    for record in records:
        if record.settled:
            continue
        key = record.normalized_counterparty
        if not key:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = _Group(record.counterparty.strip())
        group.add(record)

    return [
        _summarize_group(group, now, grace_period_days)
        for group in groups.values()
    ]


def balance_summary(summaries: Iterable[DebtorSummary]) -> BalanceSummary:
    """Totals owed to and by the user across all counterparties."""
    owed_to_me = ZERO
    i_owe = ZERO
    for summary in summaries:
        if summary.total > 0:
            owed_to_me += summary.total
        elif summary.total < 0:
            i_owe += -summary.total
    return BalanceSummary(owed_to_me=owed_to_me, i_owe=i_owe)


def sort_summaries(
    summaries: Iterable[DebtorSummary],
    overdue_first: bool = True,
) -> list[DebtorSummary]:
    """
    Display ordering: largest totals first.

    With overdue_first, anyone needing attention is listed before everyone
    else.
    """
    if overdue_first:
        key = lambda s: (not s.needs_attention, -s.total)
    else:
        key = lambda s: -s.total
    return sorted(summaries, key=key)


def find_summary(
    summaries: Iterable[DebtorSummary],
    name: str,
) -> Optional[DebtorSummary]:
    target = normalize_counterparty(name)
    for summary in summaries:
        if normalize_counterparty(summary.name) == target:
            return summary
    return None
