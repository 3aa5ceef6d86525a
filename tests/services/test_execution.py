"""Tests for ActionExecutor and AuditRecorder."""

from __future__ import annotations

from structlog.testing import capture_logs

from bulkblock.domain.expiry import StandardExpiryParser
from bulkblock.domain.models import ModerationAction
from bulkblock.domain.outcomes import AuditStatus, ExecutionStatus
from bulkblock.services.audit import AuditRecorder
from bulkblock.services.execution import ActionExecutor
from tests.services.fakes import MemoryAccounts, MemoryAuditLog, MemoryBlocks

ACTION = ModerationAction(reason="Spam", expiry="infinite", performer="Admin")


class TestActionExecutor:
    def test_blocks_account(self) -> None:
        blocks = MemoryBlocks()
        executor = ActionExecutor(MemoryAccounts("Alice"), blocks, StandardExpiryParser())
        result = executor.execute("Alice", ACTION)
        assert result.ok
        assert result.status == ExecutionStatus.BLOCKED
        assert result.block_id == 1
        block = blocks.inserted[0]
        assert block.target.name == "Alice"
        assert (block.performer, block.reason) == ("Admin", "Spam")
        assert block.expiry.is_infinite

    def test_store_refusal_becomes_block_failed(self) -> None:
        blocks = MemoryBlocks(fail_for=frozenset({"Alice"}))
        executor = ActionExecutor(MemoryAccounts("Alice"), blocks, StandardExpiryParser())
        with capture_logs() as logs:
            result = executor.execute("Alice", ACTION)
        assert result.status == ExecutionStatus.BLOCK_FAILED
        assert result.message == "Failed to block Alice."
        assert any(entry["event"] == "block.failed" for entry in logs)

    def test_missing_account_becomes_block_failed(self) -> None:
        blocks = MemoryBlocks()
        executor = ActionExecutor(MemoryAccounts(), blocks, StandardExpiryParser())
        result = executor.execute("Ghost", ACTION)
        assert result.status == ExecutionStatus.BLOCK_FAILED
        assert blocks.insert_calls == 0

    def test_unparseable_expiry_becomes_block_failed(self) -> None:
        action = ModerationAction(reason="Spam", expiry="whenever", performer="Admin")
        executor = ActionExecutor(MemoryAccounts("Alice"), MemoryBlocks(), StandardExpiryParser())
        assert executor.execute("Alice", action).status == ExecutionStatus.BLOCK_FAILED


class TestAuditRecorder:
    def test_records_block_entry(self) -> None:
        audit_log = MemoryAuditLog()
        result = AuditRecorder(audit_log, StandardExpiryParser()).record("Alice", ACTION)
        assert result.ok
        assert result.log_id == 1
        entry = audit_log.entries[0]
        assert (entry.log_type, entry.action) == ("block", "block")
        assert (entry.target, entry.performer, entry.comment) == ("Alice", "Admin", "Spam")
        assert entry.params == {"duration": "infinity", "flags": ""}

    def test_finite_duration_recorded_verbatim(self) -> None:
        audit_log = MemoryAuditLog()
        action = ModerationAction(reason="Spam", expiry="1 week", performer="Admin")
        AuditRecorder(audit_log, StandardExpiryParser()).record("Alice", action)
        assert audit_log.entries[0].params["duration"] == "1 week"

    def test_write_failure_becomes_audit_failed(self) -> None:
        audit_log = MemoryAuditLog(fail_for=frozenset({"Alice"}))
        with capture_logs() as logs:
            result = AuditRecorder(audit_log, StandardExpiryParser()).record("Alice", ACTION)
        assert result.status == AuditStatus.AUDIT_FAILED
        assert result.message == "Blocked Alice, but the block could not be logged."
        assert any(entry["event"] == "audit.failed" for entry in logs)
