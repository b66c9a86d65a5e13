"""
Transaction Draft Validation

DESIGN DECISION: Validation happens before anything is written:

- Counterparty present, not too long, no injection patterns
- Money records: amount present, positive, below the configured ceiling
- Item records: name not too long, no injection patterns
- Amount and item are mutually exclusive
- Notes not too long

IMPORTANT: Validation NEVER silently fixes issues.
It reports them. Sanitizing is a separate, explicit step.
"""

import re
import unicodedata
from typing import Optional

from src.config import LedgerSettings, get_settings
from src.models.transaction import Direction, TransactionRecord
from src.models.validation import ValidationIssue, ValidationResult


INJECTION_PATTERNS = (
    "<script", "</script>", "javascript:", "eval(", "onclick=", "onerror=",
    "'; drop table", "1=1", "or 1=1", "' or '", "\" or \"",
    "../", "..\\", "%00", "\x00",
)

# Control and zero-width characters that break storage backends
_INVISIBLE_RE = re.compile("[\x00-\x1f\x7f\u200b\u200c\u200d\ufeff]")
_PARTY_DISALLOWED_RE = re.compile(r"[^\w\s.\-']")
_SCRIPT_RE = re.compile(r"</?script>?|javascript:", re.IGNORECASE)


def contains_injection_pattern(value: str) -> bool:
    lowered = value.lower()
    return any(pattern in lowered for pattern in INJECTION_PATTERNS)


class TransactionValidator:
    """Validates and sanitizes transaction drafts before they are stored."""

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger

    def _check_party(self, draft: TransactionRecord) -> list[ValidationIssue]:
        issues = []
        party = draft.counterparty.strip()

        if not party:
            issues.append(ValidationIssue(
                field="counterparty",
                issue_type="missing",
                message="Name cannot be empty",
                severity="error",
                suggested_fix="Say who the money is with, e.g. 'john owes 50'",
            ))
            return issues

        if len(party) > self._settings.max_party_length:
            issues.append(ValidationIssue(
                field="counterparty",
                issue_type="too_long",
                message=f"Name exceeds maximum length of {self._settings.max_party_length}",
                severity="error",
            ))

        if contains_injection_pattern(party):
            issues.append(ValidationIssue(
                field="counterparty",
                issue_type="injection_attempt",
                message="Name contains suspicious patterns",
                severity="error",
            ))
        return issues

    def _check_money(self, draft: TransactionRecord) -> list[ValidationIssue]:
        issues = []
        if draft.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required for money transactions",
                severity="error",
            ))
        elif draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))
        elif draft.amount > self._settings.max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount exceeds maximum allowed value",
                severity="error",
            ))

        if draft.interest_rate is not None and draft.direction is Direction.BORROWED:
            issues.append(ValidationIssue(
                field="interest_rate",
                issue_type="ignored",
                message="Interest only accrues on money you lent; this rate will be ignored",
                severity="warning",
            ))
        return issues

    def _check_item(self, draft: TransactionRecord) -> list[ValidationIssue]:
        issues = []
        item = draft.item or ""

        if draft.amount is not None:
            issues.append(ValidationIssue(
                field="item",
                issue_type="inconsistent",
                message="A transaction is either money or an item, not both",
                severity="error",
                suggested_fix="Log the money and the item as separate entries",
            ))
        if len(item) > self._settings.max_item_length:
            issues.append(ValidationIssue(
                field="item",
                issue_type="too_long",
                message=f"Item description exceeds maximum length of {self._settings.max_item_length}",
                severity="error",
            ))
        if contains_injection_pattern(item):
            issues.append(ValidationIssue(
                field="item",
                issue_type="injection_attempt",
                message="Item description contains suspicious patterns",
                severity="error",
            ))
        return issues

    def validate(self, draft: TransactionRecord) -> ValidationResult:
        """
        Validate a draft.

        Returns:
            ValidationResult with all issues found
        """
        issues = self._check_party(draft)

        if draft.is_item:
            issues.extend(self._check_item(draft))
        else:
            issues.extend(self._check_money(draft))

        if draft.notes and len(draft.notes) > self._settings.max_notes_length:
            issues.append(ValidationIssue(
                field="notes",
                issue_type="too_long",
                message=f"Notes exceed maximum length of {self._settings.max_notes_length}",
                severity="error",
            ))

        return ValidationResult(
            transaction_id=draft.id,
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
            warnings=[issue.message for issue in issues if issue.severity == "warning"],
        )

    def sanitize(self, draft: TransactionRecord) -> TransactionRecord:
        """
        Return a cleaned copy of the draft.

        Party: letters, digits, spaces and . - ' only.
        Item: no angle brackets, double quotes become single quotes.
        Notes: script markers removed.
        """
        s = self._settings

        def base(value: str) -> str:
            value = unicodedata.normalize("NFC", value.strip())
            return _INVISIBLE_RE.sub("", value)

        party = _PARTY_DISALLOWED_RE.sub("", base(draft.counterparty))
        party = party[:s.max_party_length].strip()

        item = draft.item
        if item is not None:
            item = base(item).replace("<", "").replace(">", "").replace('"', "'")
            item = item[:s.max_item_length]

        notes = draft.notes
        if notes is not None:
            notes = _SCRIPT_RE.sub("", base(notes))[:s.max_notes_length]

        return draft.model_copy(update={
            "counterparty": party,
            "item": item,
            "notes": notes,
        })

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """What we show the user when an entry is refused or flagged."""
        if result.is_valid and not result.warnings:
            return "✅ Looks good."

        lines = []
        errors = [i for i in result.issues if i.severity == "error"]
        if errors:
            lines.append("❌ This entry can't be saved:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please note:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
