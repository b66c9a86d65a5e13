"""
Derived Ledger Views

Debtor summaries are rebuilt from a record snapshot on every query.
They have no identity of their own and are never stored or mutated.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BorrowedItem(BaseModel):
    """A physical item lent to or borrowed from a counterparty."""
    model_config = ConfigDict(frozen=True)

    name: str
    due_date: Optional[datetime] = None
    they_have_mine: bool = Field(
        ...,
        description="True when the counterparty holds the user's item"
    )
    is_overdue: bool = False
    days_overdue: int = Field(default=0, ge=0)


class DebtorSummary(BaseModel):
    """
    Everything the ledger knows about one counterparty.

    Positive amounts are owed to the user, negative amounts are owed by
    the user.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    principal: Decimal = Field(
        ...,
        description="Net signed amount before interest"
    )
    accrued_interest: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Simple weekly interest on lending-side records"
    )
    total: Decimal = Field(
        ...,
        description="principal + accrued_interest"
    )
    is_overdue: bool = False
    days_overdue: int = Field(default=0, ge=0)
    items: list[BorrowedItem] = Field(default_factory=list)
    notes: Optional[str] = Field(
        default=None,
        description="First non-empty note among unsettled records"
    )

    @property
    def owes_me(self) -> bool:
        return self.total > 0

    @property
    def i_owe(self) -> bool:
        return self.total < 0

    @property
    def has_interest(self) -> bool:
        return self.accrued_interest > 0

    @property
    def has_items(self) -> bool:
        return bool(self.items)

    @property
    def overdue_items(self) -> list[BorrowedItem]:
        return [item for item in self.items if item.is_overdue]

    @property
    def needs_attention(self) -> bool:
        """Money is overdue or at least one item is overdue."""
        return self.is_overdue or bool(self.overdue_items)


class BalanceSummary(BaseModel):
    """Ledger-wide totals across all counterparties."""
    model_config = ConfigDict(frozen=True)

    owed_to_me: Decimal = Field(default=Decimal("0"), ge=0)
    i_owe: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def net_balance(self) -> Decimal:
        return self.owed_to_me - self.i_owe
