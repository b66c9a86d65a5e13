"""
Reminder Escalation

The longer a debt is overdue, the firmer the reminder:

    1-7 days     friendly
    8-14 days    overdue
    15-30 days   urgent
    31-60 days   final
    61+ days     collections
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.models.summary import DebtorSummary


class EscalationLevel(str, Enum):
    FRIENDLY = "friendly"
    OVERDUE = "overdue"
    URGENT = "urgent"
    FINAL = "final"
    COLLECTIONS = "collections"

    @classmethod
    def for_days(cls, days_overdue: int) -> "EscalationLevel":
        if days_overdue <= 7:
            return cls.FRIENDLY
        if days_overdue <= 14:
            return cls.OVERDUE
        if days_overdue <= 30:
            return cls.URGENT
        if days_overdue <= 60:
            return cls.FINAL
        return cls.COLLECTIONS

    @property
    def heading(self) -> str:
        return _HEADINGS[self]

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def severity(self) -> str:
        return _SEVERITIES[self]


_HEADINGS = {
    EscalationLevel.FRIENDLY: "Friendly Reminder",
    EscalationLevel.OVERDUE: "Payment Overdue",
    EscalationLevel.URGENT: "Urgent Notice",
    EscalationLevel.FINAL: "Final Notice",
    EscalationLevel.COLLECTIONS: "Collections Notice",
}

_MESSAGES = {
    EscalationLevel.FRIENDLY: (
        "Just a friendly reminder that your payment is now due. "
        "Please settle at your earliest convenience."
    ),
    EscalationLevel.OVERDUE: (
        "Your payment is now overdue. "
        "Please get in touch to arrange payment."
    ),
    EscalationLevel.URGENT: (
        "This is an urgent notice regarding your overdue payment. "
        "Immediate payment is required."
    ),
    EscalationLevel.FINAL: (
        "FINAL NOTICE: This debt must be settled immediately."
    ),
    EscalationLevel.COLLECTIONS: (
        "COLLECTIONS NOTICE: This account is seriously overdue. "
        "Contact me immediately to resolve this matter."
    ),
}

_SEVERITIES = {
    EscalationLevel.FRIENDLY: "LOW",
    EscalationLevel.OVERDUE: "MEDIUM",
    EscalationLevel.URGENT: "HIGH",
    EscalationLevel.FINAL: "CRITICAL",
    EscalationLevel.COLLECTIONS: "MAXIMUM",
}


class Reminder(BaseModel):
    """A reminder ready to hand to whatever sends messages."""
    model_config = ConfigDict(frozen=True)

    name: str
    level: EscalationLevel
    days_overdue: int
    amount_due: Decimal
    text: str


def format_amount(amount: Decimal, currency_symbol: str = "$") -> str:
    return f"{currency_symbol}{amount.quantize(Decimal('0.01')):,}"


def build_reminder(
    summary: DebtorSummary,
    currency_symbol: str = "$",
) -> Optional[Reminder]:
    """Reminder text for an overdue debtor, or None if nothing is due."""
    if not summary.is_overdue or not summary.owes_me:
        return None

    level = EscalationLevel.for_days(summary.days_overdue)
    lines = [
        level.heading,
        "",
        f"Hi {summary.name},",
        "",
        level.message,
        "",
        f"Amount due: {format_amount(summary.total, currency_symbol)}",
        f"Days overdue: {summary.days_overdue}",
    ]
    if summary.has_interest:
        lines.append(
            f"Includes interest: {format_amount(summary.accrued_interest, currency_symbol)}"
        )

    return Reminder(
        name=summary.name,
        level=level,
        days_overdue=summary.days_overdue,
        amount_due=summary.total,
        text="\n".join(lines),
    )
