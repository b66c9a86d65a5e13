"""
Main Orchestrator for the Debt Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Entry (typed line → interpret → validate → store → audit)
2. Settlement (partial payment, write-off, settle-all by name)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is stored unless the sentence was understood
- Nothing is stored if validation reports an error
- Every step is audited

The interpreter and aggregator are pure; this is the only layer that
talks to storage on behalf of a typed line.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from src.audit import AuditLogger, configure_logging, create_correlation_id
from src.config import AppSettings, LedgerSettings, get_settings
from src.interpreter import interpret
from src.ledger.reminders import format_amount
from src.models.actions import AddTransaction, SettleCounterparty
from src.models.transaction import Direction, TransactionRecord
from src.models.validation import ValidationIssue
from src.queries import LedgerQueryExecutor
from src.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    StorageError,
    TransactionStorageInterface,
)
from src.validation import TransactionValidator


class EntryOutcome(BaseModel):
    """What happened to one submitted line."""

    success: bool
    message: str
    action: Optional[Union[AddTransaction, SettleCounterparty]] = None
    record: Optional[TransactionRecord] = None
    settled_count: int = 0
    issues: list[ValidationIssue] = Field(default_factory=list)


def describe_record(record: TransactionRecord, currency_symbol: str = "$") -> str:
    """One-line confirmation shown after a record is stored."""
    name = record.counterparty.strip()

    if record.is_item:
        if record.direction is Direction.LENT:
            text = f"{name} has your {record.item}"
        else:
            text = f"You have {name}'s {record.item}"
    else:
        amount = format_amount(record.amount, currency_symbol)
        if record.direction is Direction.LENT:
            text = f"{name} owes you {amount}"
        else:
            text = f"You owe {name} {amount}"

    if record.due_date is not None:
        text += f", due {record.due_date:%Y-%m-%d}"
    if record.interest_rate:
        rate = (record.interest_rate * 100).normalize()
        text += f", {rate:f}% weekly"
    return text


class EntryFlow:
    """
    Orchestrates one typed line.

    Flow:
    1. Interpret → Parsed or ParseFailure (failure ends the flow)
    2. Validate → add actions only; any error ends the flow
    3. Persist → save_transaction or settle_all
    4. Audit → every outcome, under one correlation id
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._settings = settings or get_settings().ledger
        self._storage = storage
        self._validator = validator or TransactionValidator(self._settings)
        self._audit_logger = audit_logger

    async def submit(
        self,
        text: str,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> EntryOutcome:
        """
        Interpret and apply one line of text.

        Returns:
            EntryOutcome. Input problems are reported in the outcome;
            only storage failures raise.
        """
        correlation_id = correlation_id or create_correlation_id()

        result = interpret(text, abbreviations=self._settings.abbreviations, now=now)

        if not result.ok:
            if self._audit_logger:
                await self._audit_logger.log_parse_failed(
                    text=text or "",
                    reason=result.error.kind.value,
                    correlation_id=correlation_id,
                )
            return EntryOutcome(success=False, message=result.error.message)

        action = result.action
        if self._audit_logger:
            name = action.name if action.kind == "settle" else action.draft.counterparty
            await self._audit_logger.log_entry_parsed(
                action_kind=action.kind,
                counterparty=name,
                correlation_id=correlation_id,
            )

        try:
            if action.kind == "settle":
                return await self._settle(action, correlation_id)
            return await self._add(action, correlation_id)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type="storage_error",
                    error_message=str(e),
                    details={"action": action.kind},
                    correlation_id=correlation_id,
                )
            raise

    async def _add(self, action: AddTransaction, correlation_id: UUID) -> EntryOutcome:
        draft = action.draft
        validation = self._validator.validate(draft)
        if validation.is_valid:
            draft = self._validator.sanitize(draft)
            validation = self._validator.validate(draft)

        if not validation.is_valid:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    transaction_id=draft.id,
                    issues=[issue.model_dump() for issue in validation.issues],
                    correlation_id=correlation_id,
                )
            return EntryOutcome(
                success=False,
                message=self._validator.get_user_friendly_summary(validation),
                action=action,
                issues=validation.issues,
            )

        record = await self._storage.save_transaction(draft)

        if self._audit_logger:
            await self._audit_logger.log_transaction_saved(
                transaction_id=record.id,
                counterparty=record.normalized_counterparty,
                direction=record.direction.value,
                amount=str(record.amount) if record.amount is not None else None,
                item=record.item,
                correlation_id=correlation_id,
            )

        message = describe_record(record, self._settings.currency_symbol)
        if validation.warnings:
            message += "\n" + self._validator.get_user_friendly_summary(validation)

        return EntryOutcome(
            success=True,
            message=message,
            action=action,
            record=record,
            issues=validation.issues,
        )

    async def _settle(
        self,
        action: SettleCounterparty,
        correlation_id: UUID,
    ) -> EntryOutcome:
        count = await self._storage.settle_all(action.name)

        if self._audit_logger:
            await self._audit_logger.log_counterparty_settled(
                counterparty=action.name,
                settled_count=count,
                correlation_id=correlation_id,
            )

        if count:
            message = f"Settled {count} record(s) with {action.name}."
        else:
            message = f"Nothing open with {action.name}."
        return EntryOutcome(
            success=True,
            message=message,
            action=action,
            settled_count=count,
        )


class SettlementFlow:
    """
    Settlement operations invoked directly (not from a typed line).

    Invalid payments raise InvalidPaymentError before anything is stored.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    async def settle(
        self,
        counterparty: str,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        correlation_id = correlation_id or create_correlation_id()
        count = await self._storage.settle_all(counterparty)

        if self._audit_logger:
            await self._audit_logger.log_counterparty_settled(
                counterparty=counterparty,
                settled_count=count,
                correlation_id=correlation_id,
            )
        return count

    async def record_payment(
        self,
        counterparty: str,
        amount: Decimal,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> TransactionRecord:
        """Record money received without settling anything."""
        correlation_id = correlation_id or create_correlation_id()
        payment = await self._storage.record_partial_payment(counterparty, amount, now)

        if self._audit_logger:
            await self._audit_logger.log_partial_payment(
                transaction_id=payment.id,
                counterparty=payment.normalized_counterparty,
                amount=str(payment.amount),
                correlation_id=correlation_id,
            )
        return payment

    async def mark_defaulted(
        self,
        counterparty: str,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """Write off what the counterparty owes. Returns records written off."""
        correlation_id = correlation_id or create_correlation_id()
        count = await self._storage.mark_defaulted(counterparty)

        if self._audit_logger:
            await self._audit_logger.log_counterparty_defaulted(
                counterparty=counterparty,
                defaulted_count=count,
                correlation_id=correlation_id,
            )
        return count


def create_app_components(
    storage: Optional[TransactionStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    settings: Optional[LedgerSettings] = None,
    app_settings: Optional[AppSettings] = None,
) -> tuple[EntryFlow, SettlementFlow, LedgerQueryExecutor]:
    """
    Factory function to create all application components.

    Args:
        storage: Transaction storage. Defaults to an in-memory store.
        audit_storage: Audit storage. Defaults to an in-memory log.
        settings: Ledger settings. Defaults to the environment.
        app_settings: Application settings (log level). Defaults to the
                      environment.

    Returns:
        (entry_flow, settlement_flow, query_executor)
    """
    settings = settings or get_settings().ledger
    app_settings = app_settings or get_settings().app
    configure_logging(app_settings.debug_mode)

    storage = storage if storage is not None else InMemoryTransactionStorage()
    audit_storage = audit_storage if audit_storage is not None else InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)

    entry_flow = EntryFlow(
        storage=storage,
        audit_logger=audit_logger,
        settings=settings,
    )
    settlement_flow = SettlementFlow(
        storage=storage,
        audit_logger=audit_logger,
    )
    query_executor = LedgerQueryExecutor(storage, settings)

    return entry_flow, settlement_flow, query_executor
