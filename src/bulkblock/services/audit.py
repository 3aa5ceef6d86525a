"""Audit recorder: one log entry per applied block."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from bulkblock.domain.errors import ExpiryParseError, StoreError
from bulkblock.domain.models import AuditEntry
from bulkblock.domain.outcomes import AuditResult, AuditStatus, format_message

if TYPE_CHECKING:
    from bulkblock.domain.models import ModerationAction
    from bulkblock.domain.ports import AuditLogStore, ExpiryParser

log = structlog.get_logger(__name__)


class AuditRecorder:
    """Writes block entries to the audit log store.

    A failed write is reported as ``audit_failed`` so operators can tell
    "blocked but not logged" apart from "never blocked".
    """

    def __init__(self, audit_log: AuditLogStore, expiry_parser: ExpiryParser) -> None:
        self._audit_log = audit_log
        self._expiry_parser = expiry_parser

    def record(self, identifier: str, action: ModerationAction) -> AuditResult:
        try:
            duration = self._expiry_parser.parse(action.expiry).duration
            entry = AuditEntry(
                log_type=action.action_type,
                action=action.action_type,
                target=identifier,
                performer=action.performer,
                comment=action.reason,
                params={"duration": duration, "flags": ""},
            )
            log_id = self._audit_log.append(entry)
        except (StoreError, ExpiryParseError) as exc:
            log.error("audit.failed", target=identifier, error=str(exc))
            return AuditResult(
                identifier=identifier,
                status=AuditStatus.AUDIT_FAILED,
                message=format_message(AuditStatus.AUDIT_FAILED, identifier),
            )
        return AuditResult(identifier=identifier, status=AuditStatus.RECORDED, log_id=log_id)
