"""Bulk block pipeline: the single entry point for a submission.

Pipeline: NORMALIZE → VALIDATE → (REJECT | EXECUTE → REPORT)

Validation is an atomic gate: one invalid identifier rejects the batch and
nothing is written. Execution is per-item best effort: a failure is
recorded in the report and the next identifier is processed. Blocks that
were already applied in the same run are never undone.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from bulkblock.domain.errors import StoreError
from bulkblock.domain.identifiers import normalize
from bulkblock.domain.lifecycle import BatchState, is_valid_transition
from bulkblock.domain.models import ModerationAction
from bulkblock.domain.outcomes import (
    BatchReport,
    BatchValidation,
    ExecutionResult,
    ExecutionStatus,
)
from bulkblock.services.audit import AuditRecorder
from bulkblock.services.base import BaseService
from bulkblock.services.contracts import BatchReportData, ValidationData, dump_validated
from bulkblock.services.execution import ActionExecutor
from bulkblock.services.result import ServiceError, ServiceResult
from bulkblock.services.telemetry import record_state, trace_span, traced
from bulkblock.services.validation import BatchValidator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkblock.infrastructure.site import Site

log = structlog.get_logger(__name__)


class _BatchRun:
    """Tracks the lifecycle state of one submission."""

    def __init__(self) -> None:
        self.state = BatchState.IDLE
        self.log = log.bind(batch_id=uuid.uuid4().hex[:8])

    def advance(self, target: BatchState) -> None:
        if not is_valid_transition(self.state, target):
            msg = f"Invalid batch transition: {self.state} -> {target}"
            raise RuntimeError(msg)
        self.log.debug("batch.state", previous=str(self.state), state=str(target))
        record_state(str(target))
        self.state = target


class BatchOrchestrator:
    """Drives normalization, validation, execution, and audit for a batch."""

    def __init__(
        self,
        validator: BatchValidator,
        executor: ActionExecutor,
        recorder: AuditRecorder,
    ) -> None:
        self._validator = validator
        self._executor = executor
        self._recorder = recorder

    @classmethod
    def for_site(cls, site: Site) -> BatchOrchestrator:
        """Wire the pipeline components to a site's stores."""
        return cls(
            validator=BatchValidator(site.name_oracle, site.accounts, site.blocks),
            executor=ActionExecutor(site.accounts, site.blocks, site.expiry_parser),
            recorder=AuditRecorder(site.audit_log, site.expiry_parser),
        )

    def normalize(self, raw_text: str) -> list[str]:
        return normalize(raw_text)

    def validate(self, candidates: Sequence[str], submitted: bool) -> BatchValidation:
        return self._validator.validate(candidates, submitted)

    def submit(
        self,
        raw_text: str,
        reason: str,
        expiry_text: str,
        submitted: bool,
        *,
        performer: str,
    ) -> BatchReport:
        """Run one submission and return its report.

        Nothing happens unless *submitted* is true. A submitted batch raises
        :class:`pydantic.ValidationError` when *reason*, *expiry_text*, or
        *performer* is blank, and :class:`StoreError` when the stores cannot
        be read during validation.
        """
        if not submitted:
            return BatchReport()
        action = ModerationAction(reason=reason, expiry=expiry_text, performer=performer)

        run = _BatchRun()

        run.advance(BatchState.NORMALIZING)
        with trace_span("normalize") as phase:
            candidates = self.normalize(raw_text)
            if phase is not None:
                phase.count("lines", len(raw_text.splitlines()))
                phase.count("candidates", len(candidates))

        run.advance(BatchState.VALIDATING)
        with trace_span("validate") as phase:
            validation = self.validate(candidates, submitted)
            if phase is not None:
                phase.count("failures", len(validation.outcomes))

        if not validation.valid:
            run.advance(BatchState.REJECTED)
            run.log.info(
                "batch.rejected",
                candidates=len(candidates),
                errors=len(validation.outcomes),
            )
            run.advance(BatchState.DONE)
            return BatchReport(errors=validation.messages, rejected=True)

        run.advance(BatchState.EXECUTING)
        items: list[ExecutionResult] = []
        with trace_span("execute") as phase:
            for identifier in candidates:
                item = self._apply(identifier, action)
                items.append(item)
                if phase is not None:
                    phase.count(str(item.status))

        run.advance(BatchState.REPORTING)
        report = BatchReport(
            success_count=sum(1 for item in items if item.ok),
            errors=[item.message for item in items if item.message],
            items=items,
        )
        run.log.info(
            "batch.done",
            performer=action.performer,
            success_count=report.success_count,
            errors=len(report.errors),
        )
        run.advance(BatchState.DONE)
        return report

    def _apply(self, identifier: str, action: ModerationAction) -> ExecutionResult:
        """Block then log one identifier. Success requires both steps."""
        result = self._executor.execute(identifier, action)
        if not result.ok:
            return result
        audit = self._recorder.record(identifier, action)
        if audit.ok:
            return result
        return result.model_copy(
            update={"status": ExecutionStatus.AUDIT_FAILED, "message": audit.message}
        )


class BulkBlockService(BaseService):
    """CLI-facing wrapper around :class:`BatchOrchestrator`."""

    def __init__(self, site: Site) -> None:
        super().__init__(site)
        self._orchestrator = BatchOrchestrator.for_site(site)

    @traced
    def validate(self, raw_text: str) -> ServiceResult:
        """Normalize and validate without writing anything."""
        op = "validate"
        candidates = self._orchestrator.normalize(raw_text)
        try:
            validation = self._orchestrator.validate(candidates, submitted=True)
        except StoreError as exc:
            return _store_failure(op, exc)
        data = dump_validated(
            ValidationData,
            {
                "identifiers": candidates,
                "count": len(candidates),
                "valid": validation.valid,
                "outcomes": [
                    {"kind": str(o.kind), "identifier": o.identifier, "message": o.message}
                    for o in validation.outcomes
                ],
            },
        )
        if validation.valid:
            return ServiceResult(ok=True, op=op, data=data)
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code="VALIDATION_FAILED",
                message=f"{len(validation.outcomes)} identifier(s) failed validation",
                detail={"errors": validation.messages},
            ),
        )

    @traced
    def block(
        self,
        raw_text: str,
        *,
        reason: str,
        expiry: str | None = None,
        performer: str | None = None,
    ) -> ServiceResult:
        """Submit a batch: validate all identifiers, then block each one."""
        op = "bulk_block"
        warnings: list[str] = []
        defaults = self._site.settings.block
        expiry = expiry or defaults.default_expiry
        performer = performer or defaults.default_performer

        try:
            report = self._orchestrator.submit(
                raw_text, reason, expiry, submitted=True, performer=performer
            )
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="INVALID_REQUEST",
                    message=f"Required field(s) missing: {', '.join(fields)}",
                ),
            )
        except StoreError as exc:
            return _store_failure(op, exc)

        blocked = [item for item in report.items if item.ok]
        if blocked:
            duration = self._site.expiry_parser.parse(expiry).duration
            for item in blocked:
                self._dispatch_event(
                    "post_block",
                    {
                        "target": item.identifier,
                        "performer": performer,
                        "reason": reason,
                        "duration": duration,
                        "block_id": item.block_id,
                    },
                    warnings,
                )
        self._dispatch_event(
            "post_batch",
            {
                "performer": performer,
                "success_count": report.success_count,
                "error_count": len(report.errors),
                "rejected": report.rejected,
            },
            warnings,
        )

        data = dump_validated(BatchReportData, _report_payload(report, performer, reason, expiry))
        if not report.has_errors:
            return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

        if report.rejected:
            error = ServiceError(
                code="BATCH_REJECTED",
                message=f"{len(report.errors)} identifier(s) failed validation; nothing was blocked",
            )
        else:
            error = ServiceError(
                code="BATCH_PARTIAL",
                message=f"{len(report.errors)} of {len(report.items)} blocks failed",
            )
        return ServiceResult(ok=False, op=op, data=data, warnings=warnings, error=error)


def _report_payload(
    report: BatchReport, performer: str, reason: str, expiry: str
) -> dict[str, Any]:
    return {
        "performer": performer,
        "reason": reason,
        "expiry": expiry,
        "success_count": report.success_count,
        "rejected": report.rejected,
        "errors": report.errors,
        "items": [item.model_dump(mode="json") for item in report.items],
    }


def _store_failure(op: str, exc: StoreError) -> ServiceResult:
    log.error("batch.store_error", op=op, error=str(exc))
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="STORE_ERROR", message=str(exc)),
    )
