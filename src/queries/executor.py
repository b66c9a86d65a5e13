"""
Ledger Query Execution

DESIGN DECISION: Every query takes ONE snapshot from storage and derives
its answer from it with the pure aggregator. Nothing here caches
summaries or writes to storage, so an answer can never be staler than the
snapshot it was computed from.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.config import LedgerSettings, get_settings
from src.ledger import (
    Reminder,
    balance_summary,
    build_reminder,
    find_summary,
    sort_summaries,
    summarize,
)
from src.models.summary import BalanceSummary, DebtorSummary
from src.models.transaction import Direction, TransactionRecord, ensure_utc, utc_now
from src.services.storage import TransactionStorageInterface


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class DueItem(BaseModel):
    """An item that has to come back (or go back) soon."""
    model_config = ConfigDict(frozen=True)

    counterparty: str
    item: str
    due_date: datetime
    they_have_mine: bool


class LedgerQueryExecutor:
    """
    Read-side queries over transaction storage.

    GUARANTEES:
    - Only returns figures derived from stored records
    - Settled records never contribute to balances
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        settings: Optional[LedgerSettings] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings().ledger

    async def _snapshot(self) -> list[TransactionRecord]:
        try:
            return await self._storage.list_transactions(include_settled=False)
        except Exception as e:
            raise QueryExecutionError(f"Could not read transactions: {e}") from e

    async def debtors(self, now: Optional[datetime] = None) -> list[DebtorSummary]:
        """All active counterparties, overdue first, then largest totals."""
        records = await self._snapshot()
        summaries = summarize(
            records,
            now or utc_now(),
            grace_period_days=self._settings.grace_period_days,
        )
        return sort_summaries(summaries)

    async def debtor(
        self,
        name: str,
        now: Optional[datetime] = None,
    ) -> Optional[DebtorSummary]:
        return find_summary(await self.debtors(now), name)

    async def balance(self, now: Optional[datetime] = None) -> BalanceSummary:
        return balance_summary(await self.debtors(now))

    async def overdue(self, now: Optional[datetime] = None) -> list[DebtorSummary]:
        """Counterparties with overdue money or overdue items."""
        return [s for s in await self.debtors(now) if s.needs_attention]

    async def items_due_within(
        self,
        days: int,
        now: Optional[datetime] = None,
    ) -> list[DueItem]:
        """Unsettled items due between now and `days` from now, soonest first."""
        now = ensure_utc(now or utc_now())
        horizon = now + timedelta(days=days)

        due = [
            DueItem(
                counterparty=r.counterparty.strip(),
                item=r.item,
                due_date=r.due_date,
                they_have_mine=r.direction is Direction.LENT,
            )
            for r in await self._snapshot()
            if r.is_item and r.due_date is not None and now <= r.due_date <= horizon
        ]
        return sorted(due, key=lambda d: d.due_date)

    async def reminders(self, now: Optional[datetime] = None) -> list[Reminder]:
        """Escalating reminder text for everyone whose money is overdue."""
        reminders = []
        for summary in await self.debtors(now):
            reminder = build_reminder(summary, self._settings.currency_symbol)
            if reminder is not None:
                reminders.append(reminder)
        return reminders
