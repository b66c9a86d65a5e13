"""
Action Builder

Combines a template match with the extracted modifiers into the command
the rest of the system consumes.
"""

from datetime import datetime

from src.interpreter.modifiers import Modifiers
from src.interpreter.templates import MatchKind, TemplateMatch
from src.ledger.settlement import PARTIAL_PAYMENT_NOTE
from src.models.actions import AddTransaction, ParsedAction, SettleCounterparty
from src.models.transaction import Direction, TransactionRecord


def build_action(
    match: TemplateMatch,
    modifiers: Modifiers,
    now: datetime,
) -> ParsedAction:
    if match.kind is MatchKind.SETTLE:
        return SettleCounterparty(name=match.name)

    if match.kind is MatchKind.PAYMENT:
        # Counter-transaction: nets against the debt, never settles it.
        # Payments carry no due date and never accrue interest.
        draft = TransactionRecord(
            counterparty=match.name,
            amount=match.amount,
            direction=Direction.BORROWED,
            settled=False,
            created_at=now,
            notes=PARTIAL_PAYMENT_NOTE,
            phone=modifiers.phone,
        )
        return AddTransaction(draft=draft)

    draft = TransactionRecord(
        counterparty=match.name,
        amount=match.amount,
        direction=match.direction,
        created_at=now,
        due_date=modifiers.due_date,
        interest_rate=modifiers.interest_rate,
        notes=modifiers.notes,
        phone=modifiers.phone,
    )
    return AddTransaction(draft=draft)
