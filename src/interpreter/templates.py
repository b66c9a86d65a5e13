"""
Template Matcher

An ordered list of independent sentence templates. Each template either
returns a TemplateMatch or None ("not mine, try the next one").

DESIGN DECISION: The order in TEMPLATES is a correctness requirement.
For example "settle with john" must be claimed before anything else looks
at it, and "john paid 25" is a payment, never a debt. Do not reorder.
"""

from decimal import Decimal
from enum import Enum
from typing import Callable, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from src.interpreter.amounts import resolve_amount
from src.models.transaction import Direction


class MatchKind(str, Enum):
    ADD = "add"
    SETTLE = "settle"
    PAYMENT = "payment"


class TemplateMatch(BaseModel):
    """What a template recognised, before modifiers are applied."""
    model_config = ConfigDict(frozen=True)

    template: str
    kind: MatchKind
    name: str
    amount: Optional[Decimal] = None
    direction: Optional[Direction] = None


Template = Callable[[Sequence[str], Mapping[str, Decimal]], Optional[TemplateMatch]]


def display_name(token: str) -> str:
    """'sarah' -> 'Sarah'."""
    return token.capitalize()


def _index(words: Sequence[str], *targets: str, start: int = 0) -> Optional[int]:
    for i in range(start, len(words)):
        if words[i] in targets:
            return i
    return None


def match_settle(words, abbreviations) -> Optional[TemplateMatch]:
    """settle with <name> / settled with <name>"""
    if "settle" not in words and "settled" not in words:
        return None
    with_idx = _index(words, "with")
    if with_idx is None or with_idx + 1 >= len(words):
        return None
    return TemplateMatch(
        template="settle",
        kind=MatchKind.SETTLE,
        name=display_name(words[with_idx + 1]),
    )


def match_owes(words, abbreviations) -> Optional[TemplateMatch]:
    """<name> owes [me] <amount>"""
    owes_idx = _index(words, "owes", "owe")
    if owes_idx is None or owes_idx == 0:
        return None
    name = words[owes_idx - 1]
    if name == "i":
        return None

    amount_idx = owes_idx + 1
    if amount_idx < len(words) and words[amount_idx] == "me":
        amount_idx += 1

    amount = resolve_amount(words, amount_idx, abbreviations)
    if amount is None:
        return None
    return TemplateMatch(
        template="owes",
        kind=MatchKind.ADD,
        name=display_name(name),
        amount=amount,
        direction=Direction.LENT,
    )


def match_i_owe(words, abbreviations) -> Optional[TemplateMatch]:
    """i owe <name> <amount>"""
    if not words or words[0] != "i":
        return None
    owe_idx = _index(words, "owe")
    if owe_idx is None or owe_idx + 2 >= len(words):
        return None

    amount = resolve_amount(words, owe_idx + 2, abbreviations)
    if amount is None:
        return None
    return TemplateMatch(
        template="i_owe",
        kind=MatchKind.ADD,
        name=display_name(words[owe_idx + 1]),
        amount=amount,
        direction=Direction.BORROWED,
    )


def _match_verb_preposition(
    words: Sequence[str],
    abbreviations: Mapping[str, Decimal],
    verb: str,
    preposition: str,
    direction: Direction,
) -> Optional[TemplateMatch]:
    verb_idx = _index(words, verb)
    if verb_idx is None or verb_idx + 1 >= len(words):
        return None

    amount = resolve_amount(words, verb_idx + 1, abbreviations)
    if amount is None:
        return None

    prep_idx = _index(words, preposition, start=verb_idx + 2)
    if prep_idx is None or prep_idx + 1 >= len(words):
        return None
    return TemplateMatch(
        template=verb,
        kind=MatchKind.ADD,
        name=display_name(words[prep_idx + 1]),
        amount=amount,
        direction=direction,
    )


def match_lent(words, abbreviations) -> Optional[TemplateMatch]:
    """lent <amount> to <name>"""
    return _match_verb_preposition(words, abbreviations, "lent", "to", Direction.LENT)


def match_borrowed(words, abbreviations) -> Optional[TemplateMatch]:
    """borrowed <amount> from <name>"""
    return _match_verb_preposition(
        words, abbreviations, "borrowed", "from", Direction.BORROWED
    )


def match_paid(words, abbreviations) -> Optional[TemplateMatch]:
    """
    <name> paid [me] [<amount>] / paid <name> [<amount>]

    With an amount this is a payment (a counter-transaction that nets
    against the debt); without one it settles the counterparty.
    """
    paid_idx = _index(words, "paid")
    if paid_idx is None:
        return None

    if paid_idx > 0:
        name_idx, amount_idx = paid_idx - 1, paid_idx + 1
    elif paid_idx + 1 < len(words):
        name_idx, amount_idx = paid_idx + 1, paid_idx + 2
    else:
        return None

    if amount_idx < len(words) and words[amount_idx] == "me":
        amount_idx += 1

    name = display_name(words[name_idx])
    amount = resolve_amount(words, amount_idx, abbreviations)
    if amount is None:
        return TemplateMatch(template="paid", kind=MatchKind.SETTLE, name=name)
    return TemplateMatch(
        template="paid",
        kind=MatchKind.PAYMENT,
        name=name,
        amount=amount,
        direction=Direction.BORROWED,
    )


TEMPLATES: tuple[Template, ...] = (
    match_settle,
    match_owes,
    match_i_owe,
    match_lent,
    match_borrowed,
    match_paid,
)


def match_templates(
    words: Sequence[str],
    abbreviations: Mapping[str, Decimal],
) -> Optional[TemplateMatch]:
    """Return the first template that recognises the tokens."""
    for template in TEMPLATES:
        match = template(words, abbreviations)
        if match is not None:
            return match
    return None
