"""Debt ledger aggregation, interest, overdue and settlement package."""

from src.ledger.aggregator import (
    balance_summary,
    find_summary,
    sort_summaries,
    summarize,
)
from src.ledger.interest import accrued_interest, elapsed_days, elapsed_weeks
from src.ledger.overdue import (
    DEFAULT_GRACE_PERIOD_DAYS,
    item_overdue,
    money_days_overdue,
)
from src.ledger.reminders import EscalationLevel, Reminder, build_reminder
from src.ledger.settlement import (
    DEFAULTED_MARKER,
    PARTIAL_PAYMENT_NOTE,
    InvalidPaymentError,
    build_partial_payment,
    plan_mark_defaulted,
    plan_settle_all,
    total_owed,
)

__all__ = [
    "DEFAULTED_MARKER",
    "DEFAULT_GRACE_PERIOD_DAYS",
    "EscalationLevel",
    "InvalidPaymentError",
    "PARTIAL_PAYMENT_NOTE",
    "Reminder",
    "accrued_interest",
    "balance_summary",
    "build_partial_payment",
    "build_reminder",
    "elapsed_days",
    "elapsed_weeks",
    "find_summary",
    "item_overdue",
    "money_days_overdue",
    "plan_mark_defaulted",
    "plan_settle_all",
    "sort_summaries",
    "summarize",
    "total_owed",
]
