"""QueryService: read-only views of accounts, blocks, and the audit log.

Three surfaces:
- list_accounts: registered accounts with their current block state
- list_blocks: active (unexpired) blocks
- audit_log: most recent audit entries first
"""

from __future__ import annotations

from bulkblock.domain.errors import StoreError
from bulkblock.services.base import BaseService
from bulkblock.services.contracts import (
    AccountListData,
    AuditListData,
    BlockListData,
    dump_validated,
)
from bulkblock.services.result import ServiceError, ServiceResult
from bulkblock.services.telemetry import traced


class QueryService(BaseService):
    """Handles listing queries for the CLI."""

    @traced
    def list_accounts(self) -> ServiceResult:
        site = self._site
        try:
            items = [
                {
                    "id": account.id,
                    "name": account.name,
                    "blocked": site.blocks.find_active_block(account) is not None,
                }
                for account in site.accounts.list_accounts()
            ]
        except StoreError as exc:
            return _store_failure("list_accounts", exc)
        data = dump_validated(AccountListData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_accounts", data=data)

    @traced
    def list_blocks(self) -> ServiceResult:
        try:
            active = self._site.blocks.list_active()
        except StoreError as exc:
            return _store_failure("list_blocks", exc)
        items = [
            {
                "id": block.id,
                "target": block.target.name,
                "performer": block.performer,
                "reason": block.reason,
                "expiry": block.expiry.duration,
            }
            for block in active
        ]
        data = dump_validated(BlockListData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op="list_blocks", data=data)

    @traced
    def audit_log(self, *, limit: int = 50) -> ServiceResult:
        """Return up to *limit* audit entries, newest first."""
        op = "audit_log"
        if limit < 1:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(code="INVALID_LIMIT", message="Limit must be at least 1"),
            )
        try:
            items = self._site.audit_log.list_entries(limit=limit)
        except StoreError as exc:
            return _store_failure(op, exc)
        data = dump_validated(AuditListData, {"count": len(items), "items": items})
        return ServiceResult(ok=True, op=op, data=data)


def _store_failure(op: str, exc: StoreError) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="STORE_ERROR", message=str(exc)),
    )
