"""Action executor: applies the block to one validated identifier."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from bulkblock.domain.errors import ExpiryParseError, StoreError
from bulkblock.domain.models import Block
from bulkblock.domain.outcomes import ExecutionResult, ExecutionStatus, format_message

if TYPE_CHECKING:
    from bulkblock.domain.models import ModerationAction
    from bulkblock.domain.ports import AccountLookup, BlockStore, ExpiryParser

log = structlog.get_logger(__name__)


class ActionExecutor:
    """Builds and inserts a block record for a single identifier.

    Failures never propagate: a missing account, an unparseable expiry,
    or a store refusal all become a ``block_failed`` result.
    """

    def __init__(
        self,
        accounts: AccountLookup,
        blocks: BlockStore,
        expiry_parser: ExpiryParser,
    ) -> None:
        self._accounts = accounts
        self._blocks = blocks
        self._expiry_parser = expiry_parser

    def execute(self, identifier: str, action: ModerationAction) -> ExecutionResult:
        try:
            account = self._accounts.resolve(identifier)
            if account is None:
                return self._failed(identifier, "account not found")
            block = Block(
                target=account,
                performer=action.performer,
                reason=action.reason,
                expiry=self._expiry_parser.parse(action.expiry),
            )
            block_id = self._blocks.insert(block)
        except (StoreError, ExpiryParseError) as exc:
            return self._failed(identifier, str(exc))

        log.info("block.applied", target=identifier, block_id=block_id, performer=action.performer)
        return ExecutionResult(
            identifier=identifier,
            status=ExecutionStatus.BLOCKED,
            block_id=block_id,
        )

    @staticmethod
    def _failed(identifier: str, error: str) -> ExecutionResult:
        log.warning("block.failed", target=identifier, error=error)
        return ExecutionResult(
            identifier=identifier,
            status=ExecutionStatus.BLOCK_FAILED,
            message=format_message(ExecutionStatus.BLOCK_FAILED, identifier),
        )
