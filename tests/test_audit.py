"""Tests for the audit logger."""

import logging
import pytest
from unittest.mock import AsyncMock

from src.audit import AuditLogger, configure_logging, create_correlation_id
from src.models.audit import AuditEventBuilder, AuditEventType
from src.services.storage import InMemoryAuditStorage


class TestAuditLogger:

    @pytest.mark.asyncio
    async def test_local_only_logging_succeeds(self):
        logger = AuditLogger()
        await logger.log_parse_failed("hello", "no_template_matched", create_correlation_id())

    @pytest.mark.asyncio
    async def test_events_persisted_with_correlation_id(self, audit_storage):
        logger = AuditLogger(audit_storage)
        correlation_id = create_correlation_id()

        await logger.log_entry_parsed("settle", "Bob", correlation_id)
        await logger.log_counterparty_settled("Bob", 2, correlation_id)

        events = await audit_storage.get_events_by_correlation_id(correlation_id)
        assert [e.event_type for e in events] == [
            AuditEventType.ENTRY_PARSED,
            AuditEventType.COUNTERPARTY_SETTLED,
        ]

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_raise(self):
        storage = AsyncMock(spec=InMemoryAuditStorage)
        storage.append_event.side_effect = RuntimeError("offline")
        logger = AuditLogger(storage)

        event_logged = await logger.log(AuditEventBuilder.system_error("boom", "details"))
        assert event_logged is False


@pytest.fixture
def ledger_log_level():
    logger = logging.getLogger("ledger")
    original = logger.level
    yield logger
    logger.setLevel(original)


class TestConfigureLogging:
    """debug_mode drives the level of the "ledger" loggers."""

    def test_debug_mode_enables_debug(self, ledger_log_level):
        configure_logging(debug_mode=True)
        assert ledger_log_level.level == logging.DEBUG
        assert logging.getLogger("ledger.audit").isEnabledFor(logging.DEBUG)

    def test_default_is_info(self, ledger_log_level):
        configure_logging()
        assert ledger_log_level.level == logging.INFO
        assert not logging.getLogger("ledger.audit").isEnabledFor(logging.DEBUG)
