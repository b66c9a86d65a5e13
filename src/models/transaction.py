"""
Core Transaction Model for the Debt Ledger

A transaction record is one loan, repayment or borrowed item between the
user and a counterparty. Records are owned by the store; the interpreter
produces drafts and the aggregator reads snapshots.

DESIGN DECISION: Records are frozen. A store "updates" a record by saving a
copy made with model_copy(update=...), so a snapshot handed to the
aggregator can never change underneath it.

DESIGN DECISION: The amount/item exclusivity rule is NOT enforced here.
The validator reports violations; the aggregator treats them defensively.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_counterparty(name: Optional[str]) -> str:
    """
    Grouping key for a counterparty: trimmed and case-folded.

    Every comparison site (store lookups, settlement, aggregation) must use
    this, otherwise "John" and " john " end up as two ledgers.
    """
    if not name:
        return ""
    return name.strip().casefold()


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Direction(str, Enum):
    """
    Direction of a transaction, relative to the user.

    LENT: the counterparty owes the user (positive balance).
    BORROWED: the user owes the counterparty, or the counterparty paid back.
    """
    LENT = "lent"
    BORROWED = "borrowed"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.LENT else -1


class TransactionRecord(BaseModel):
    """
    A single ledger entry.

    Exactly one of `amount` / `item` should be populated.
    Settled records stay retrievable but are excluded from balances.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )

    counterparty: str = Field(
        ...,
        description="The other party, as written by the user"
    )

    # Money or item
    amount: Optional[Decimal] = Field(
        default=None,
        description="Amount of money, sign carried by direction"
    )
    item: Optional[str] = Field(
        default=None,
        description="Name of a borrowed physical item"
    )

    direction: Direction = Field(
        ...,
        description="Lent (owed to the user) or borrowed"
    )
    settled: bool = Field(
        default=False,
        description="Settled records are excluded from aggregation"
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Origin of the interest and overdue clocks"
    )
    due_date: Optional[datetime] = None

    interest_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Weekly interest as a fraction (0.10 = 10% per week)"
    )
    notes: Optional[str] = None
    phone: Optional[str] = None

    @field_validator('created_at', 'due_date')
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive timestamps are taken to be UTC."""
        return ensure_utc(v) if v is not None else None

    @property
    def normalized_counterparty(self) -> str:
        return normalize_counterparty(self.counterparty)

    @property
    def is_item(self) -> bool:
        return bool(self.item)

    @property
    def signed_amount(self) -> Decimal:
        """
        Contribution to the balance owed to the user.

        Item records and records without an amount contribute zero.
        """
        if self.is_item or self.amount is None:
            return Decimal("0")
        return self.amount * self.direction.sign

    def to_record_dict(self) -> dict[str, Any]:
        """
        Convert to a plain key-value structure for persistence or export.

        All values are strings, booleans or None.
        """
        return {
            "id": str(self.id),
            "counterparty": self.counterparty,
            "amount": str(self.amount) if self.amount is not None else None,
            "item": self.item,
            "direction": self.direction.value,
            "settled": self.settled,
            "created_at": self.created_at.isoformat(),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "interest_rate": (
                str(self.interest_rate) if self.interest_rate is not None else None
            ),
            "notes": self.notes,
            "phone": self.phone,
        }

    @classmethod
    def from_record_dict(cls, row: dict[str, Any]) -> "TransactionRecord":
        """Rebuild a record from the output of to_record_dict()."""

        def optional_decimal(key: str) -> Optional[Decimal]:
            value = row.get(key)
            if value in (None, ""):
                return None
            try:
                return Decimal(str(value))
            except InvalidOperation as e:
                raise ValueError(f"Invalid decimal for {key}: {value!r}") from e

        def optional_datetime(key: str) -> Optional[datetime]:
            value = row.get(key)
            if not value:
                return None
            if isinstance(value, datetime):
                return value
            return datetime.fromisoformat(value)

        settled = row.get("settled", False)
        if isinstance(settled, str):
            settled = settled.strip().lower() == "true"

        data = {
            "counterparty": row["counterparty"],
            "amount": optional_decimal("amount"),
            "item": row.get("item") or None,
            "direction": Direction(row["direction"]),
            "settled": settled,
            "due_date": optional_datetime("due_date"),
            "interest_rate": optional_decimal("interest_rate"),
            "notes": row.get("notes") or None,
            "phone": row.get("phone") or None,
        }
        if row.get("id"):
            data["id"] = UUID(str(row["id"]))
        created_at = optional_datetime("created_at")
        if created_at is not None:
            data["created_at"] = created_at
        return cls(**data)
