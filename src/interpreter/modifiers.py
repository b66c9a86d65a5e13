"""
Modifier Extractor

Scans the whole original line for optional extras, independent of which
sentence template matched:

    "due 2 weeks", "due in 3 days", "due tomorrow"  -> due date
    "at 10%"                                         -> weekly interest 0.10
    "(has my watch)"                                 -> notes
    "555-123-4567"                                   -> phone "(555) 123-4567"
"""

import re
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, ConfigDict


_DUE_RE = re.compile(r"due\s+(?:in\s+)?(\d+)\s*(hour|day|week|month)s?\b")
_DUE_TOMORROW_RE = re.compile(r"due\s+tomorrow\b")
_DUE_NEXT_WEEK_RE = re.compile(r"due\s+next\s+week\b")
_INTEREST_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_NOTES_RE = re.compile(r"\(([^()]*)\)")

# Tried in order; the first hit wins
_PHONE_PATTERNS = (
    re.compile(r"(?<!\d)\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"),
    re.compile(r"(?<!\d)\d{3}[-.\s]\d{4}(?!\d)"),
    re.compile(r"(?<!\d)\d{10}(?!\d)"),
)

_DAYS_PER_UNIT = {
    "day": 1,
    "week": 7,
    "month": 30,
}


class Modifiers(BaseModel):
    """Optional extras found anywhere in a line."""
    model_config = ConfigDict(frozen=True)

    due_date: Optional[datetime] = None
    interest_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    phone: Optional[str] = None


def extract_due_date(text: str, now: datetime) -> Optional[datetime]:
    """Relative due date: hours, days, weeks (7 days) or months (30 days)."""
    lower = text.lower()

    match = _DUE_RE.search(lower)
    if match:
        count = int(match.group(1))
        unit = match.group(2)
        # Past datetime.max: keep the entry, drop the due date
        try:
            if unit == "hour":
                return now + timedelta(hours=count)
            return now + timedelta(days=count * _DAYS_PER_UNIT[unit])
        except (OverflowError, ValueError):
            return None

    if _DUE_TOMORROW_RE.search(lower):
        return now + timedelta(days=1)
    if _DUE_NEXT_WEEK_RE.search(lower):
        return now + timedelta(days=7)
    return None


def extract_interest_rate(text: str) -> Optional[Decimal]:
    """Percentage as a fraction: "10%" -> Decimal("0.10")."""
    match = _INTEREST_RE.search(text)
    if not match:
        return None
    try:
        return Decimal(match.group(1)) / 100
    except InvalidOperation:
        return None


def format_phone_number(digits: str) -> str:
    """(AAA) EEE-SSSS for ten digits, EEE-SSSS for seven."""
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 7:
        return f"{digits[:3]}-{digits[3:]}"
    return digits


def _find_phone(text: str) -> Optional[re.Match]:
    for pattern in _PHONE_PATTERNS:
        match = pattern.search(text)
        if match and sum(c.isdigit() for c in match.group(0)) >= 7:
            return match
    return None


def extract_phone_number(text: str) -> Optional[str]:
    match = _find_phone(text)
    if match is None:
        return None
    digits = "".join(c for c in match.group(0) if c.isdigit())
    return format_phone_number(digits)


def extract_notes(text: str) -> Optional[str]:
    """
    First parenthesized text, verbatim.

    The "(555)" area code of a phone number is not a note.
    """
    phone = _find_phone(text)
    for match in _NOTES_RE.finditer(text):
        if phone and phone.start() <= match.start() < phone.end():
            continue
        note = match.group(1)
        if note.strip():
            return note
    return None


def extract_modifiers(text: str, now: datetime) -> Modifiers:
    """Run every extractor over the original (un-lowered) line."""
    return Modifiers(
        due_date=extract_due_date(text, now),
        interest_rate=extract_interest_rate(text),
        notes=extract_notes(text),
        phone=extract_phone_number(text),
    )
