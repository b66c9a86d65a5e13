"""
Interpreter Output Models

The interpreter never raises for user input. It returns one of two values:

    Parsed(action=AddTransaction | SettleCounterparty)
    ParseFailure(error=ParseError)

DESIGN DECISION: The outcome is an explicit tagged union, not an exception.
Callers must look at `ok` (or the type) before touching the action, which
forces the failure case to be handled at the call site.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from src.models.transaction import TransactionRecord


class AddTransaction(BaseModel):
    """Add a new record (loan, debt, or counter-transaction) to the ledger."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["add"] = "add"
    draft: TransactionRecord


class SettleCounterparty(BaseModel):
    """Mark every unsettled record with a counterparty as settled."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["settle"] = "settle"
    name: str = Field(..., min_length=1)


ParsedAction = Annotated[
    Union[AddTransaction, SettleCounterparty],
    Field(discriminator="kind"),
]


class ParseErrorKind(str, Enum):
    """Why a line of text could not be interpreted."""
    EMPTY_INPUT = "empty_input"
    NO_TEMPLATE_MATCHED = "no_template_matched"


class ParseError(BaseModel):
    """
    An invalid-format failure.

    `message` is meant to be shown to the user verbatim.
    """
    model_config = ConfigDict(frozen=True)

    kind: ParseErrorKind
    message: str


class Parsed(BaseModel):
    """Successful interpretation."""
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    action: ParsedAction


class ParseFailure(BaseModel):
    """Failed interpretation."""
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    error: ParseError


ParseResult = Union[Parsed, ParseFailure]
