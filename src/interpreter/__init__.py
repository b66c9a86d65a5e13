"""
Natural-Language Transaction Interpreter

Turns one typed line into a ledger command:

    interpret("john owes me 2 notes")      -> add, John, 200, lent
    interpret("i owe sarah 30.50")         -> add, Sarah, 30.50, borrowed
    interpret("settle with bob")           -> settle, Bob
    interpret("hello")                     -> failure with a hint

This is not a general NLP engine. It recognises a fixed set of sentence
templates and fails explicitly otherwise. Failures are returned as values.
"""

from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from src.interpreter.actions import PARTIAL_PAYMENT_NOTE, build_action
from src.interpreter.amounts import (
    DEFAULT_ABBREVIATIONS,
    parse_amount_token,
    resolve_amount,
)
from src.interpreter.modifiers import Modifiers, extract_modifiers
from src.interpreter.templates import TEMPLATES, MatchKind, TemplateMatch, match_templates
from src.models.actions import ParseError, ParseErrorKind, ParseFailure, ParseResult, Parsed
from src.models.transaction import utc_now


EMPTY_INPUT_HINT = "Nothing written. Try 'john owes 50'."
NO_MATCH_HINT = "Didn't catch that. Try 'john owes 50 due 2 weeks at 10%'."


def interpret(
    text: str,
    abbreviations: Optional[Mapping[str, Decimal]] = None,
    now: Optional[datetime] = None,
) -> ParseResult:
    """
    Interpret one line of text.

    Args:
        text: What the user typed
        abbreviations: Amount slang table. Replaces the default table
                       entirely when given.
        now: Clock used for created_at and relative due dates

    Returns:
        Parsed(action) or ParseFailure(error)
    """
    stripped = (text or "").strip()
    if not stripped:
        return ParseFailure(error=ParseError(
            kind=ParseErrorKind.EMPTY_INPUT,
            message=EMPTY_INPUT_HINT,
        ))

    table = DEFAULT_ABBREVIATIONS if abbreviations is None else abbreviations
    words = stripped.casefold().split()

    match = match_templates(words, table)
    if match is None:
        return ParseFailure(error=ParseError(
            kind=ParseErrorKind.NO_TEMPLATE_MATCHED,
            message=NO_MATCH_HINT,
        ))

    now = now or utc_now()
    modifiers = extract_modifiers(stripped, now)
    return Parsed(action=build_action(match, modifiers, now))


__all__ = [
    "DEFAULT_ABBREVIATIONS",
    "EMPTY_INPUT_HINT",
    "MatchKind",
    "Modifiers",
    "NO_MATCH_HINT",
    "PARTIAL_PAYMENT_NOTE",
    "TEMPLATES",
    "TemplateMatch",
    "build_action",
    "extract_modifiers",
    "interpret",
    "match_templates",
    "parse_amount_token",
    "resolve_amount",
]
