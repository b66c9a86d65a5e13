"""
Amount Resolver

Turns one or two tokens into a quantity of money, expanding slang
abbreviations along the way:

    "50"        -> 50
    "$30.50"    -> 30.50
    "2 notes"   -> 200      (two-token: number + unit)
    "2notes"    -> 200      (embedded multiplier)
    "5k"        -> 5000
    "note"      -> 100      (bare abbreviation, multiplier 1)

A failed resolution returns None. The calling template treats that as
"this template does not apply" and the next template is tried.
"""

import re
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping, Optional, Sequence


DEFAULT_ABBREVIATIONS: Mapping[str, Decimal] = MappingProxyType({
    "note": Decimal("100"),
    "k": Decimal("1000"),
    "point": Decimal("1"),
    "half": Decimal("50"),
    "quarter": Decimal("25"),
    "dime": Decimal("10"),
    "nickel": Decimal("5"),
    "buck": Decimal("1"),
})

_NUMBER_RE = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)$")
_PLAIN_NOISE_RE = re.compile(r"[$€£¥₹,]")
_NON_NUMERIC_RE = re.compile(r"[^0-9.]")


def parse_number(token: str) -> Optional[Decimal]:
    """Parse a token that is nothing but a decimal number."""
    if not _NUMBER_RE.match(token):
        return None
    try:
        return Decimal(token)
    except InvalidOperation:
        return None


def _strip_plural(word: str) -> str:
    return word[:-1] if word.endswith("s") else word


def parse_amount_token(
    token: str,
    abbreviations: Mapping[str, Decimal],
) -> Optional[Decimal]:
    """
    Resolve a single token.

    Order: plain number, number with an abbreviation suffix, bare
    abbreviation, then digits scraped out of whatever is left.

    The scrape runs last so an embedded unit still counts: "2notes" is
    200, not 2.
    """
    lower = token.lower()

    # "50", "$50", "1,200.00"
    plain = parse_number(_PLAIN_NOISE_RE.sub("", lower))
    if plain is not None:
        return plain

    # "2notes", "5k", "3bucks" - longest key first so "notes" beats "s"
    for abbr in sorted(abbreviations, key=len, reverse=True):
        for suffix in (abbr + "s", abbr):
            if lower.endswith(suffix) and len(lower) > len(suffix):
                multiplier = parse_number(lower[:-len(suffix)].strip())
                if multiplier is not None:
                    return multiplier * abbreviations[abbr]

    # "note", "notes", "buck"
    if lower in abbreviations:
        return abbreviations[lower]
    stripped = _strip_plural(lower)
    if stripped in abbreviations:
        return abbreviations[stripped]

    # Last resort: "50ish" -> 50
    cleaned = _NON_NUMERIC_RE.sub("", lower)
    if cleaned:
        return parse_number(cleaned)
    return None


def resolve_amount(
    words: Sequence[str],
    start: int,
    abbreviations: Mapping[str, Decimal] = DEFAULT_ABBREVIATIONS,
) -> Optional[Decimal]:
    """
    Resolve an amount beginning at words[start].

    The two-token form ("2 notes") is tried before the single token, so
    "2 notes" is 200 rather than 2.
    """
    if start < 0 or start >= len(words):
        return None

    if start + 1 < len(words):
        multiplier = parse_number(words[start])
        if multiplier is not None:
            unit = words[start + 1].lower()
            for candidate in (unit, _strip_plural(unit)):
                if candidate in abbreviations:
                    return multiplier * abbreviations[candidate]

    return parse_amount_token(words[start], abbreviations)
