"""Tagged per-item outcomes and the aggregate batch report.

Validation outcomes gate the whole batch; execution and audit results are
independent per identifier. Every failure carries a human-readable message
with the offending identifier embedded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field


class ValidationKind(StrEnum):
    """Why a candidate (or the whole batch) failed validation."""

    EMPTY_BATCH = "empty_batch"
    INVALID_FORMAT = "invalid_format"
    NOT_FOUND = "not_found"
    ALREADY_BLOCKED = "already_blocked"


class ExecutionStatus(StrEnum):
    """Final state of one identifier after the executing phase."""

    BLOCKED = "blocked"
    BLOCK_FAILED = "block_failed"
    AUDIT_FAILED = "audit_failed"


class AuditStatus(StrEnum):
    RECORDED = "recorded"
    AUDIT_FAILED = "audit_failed"


MESSAGES: dict[str, str] = {
    ValidationKind.EMPTY_BATCH: "No usernames were supplied.",
    ValidationKind.INVALID_FORMAT: "Invalid username: {identifier}",
    ValidationKind.NOT_FOUND: "User {identifier} does not exist.",
    ValidationKind.ALREADY_BLOCKED: "User {identifier} is already blocked.",
    ExecutionStatus.BLOCK_FAILED: "Failed to block {identifier}.",
    ExecutionStatus.AUDIT_FAILED: "Blocked {identifier}, but the block could not be logged.",
}


def format_message(kind: str, identifier: str | None = None) -> str:
    """Render the message template for *kind* with *identifier* embedded."""
    return MESSAGES[kind].format(identifier=identifier)


class ValidationOutcome(BaseModel):
    """One failing validation diagnostic."""

    model_config = {"frozen": True}

    kind: ValidationKind
    identifier: str | None = None

    @property
    def message(self) -> str:
        return format_message(self.kind, self.identifier)


@dataclass(frozen=True)
class BatchValidation:
    """Result of validating a batch. Valid only when nothing failed."""

    outcomes: tuple[ValidationOutcome, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.outcomes

    @property
    def messages(self) -> list[str]:
        return [outcome.message for outcome in self.outcomes]


class ExecutionResult(BaseModel):
    """Outcome of applying the action to a single identifier."""

    model_config = {"frozen": True}

    identifier: str
    status: ExecutionStatus
    message: str | None = None
    block_id: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == ExecutionStatus.BLOCKED


class AuditResult(BaseModel):
    """Outcome of writing the audit entry for a single identifier."""

    model_config = {"frozen": True}

    identifier: str
    status: AuditStatus
    message: str | None = None
    log_id: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == AuditStatus.RECORDED


class BatchReport(BaseModel):
    """Aggregate returned to the caller for one submission.

    Attributes:
        success_count: Identifiers that were both blocked and logged.
        errors: One message per failed item (or per validation outcome),
            in submission order.
        rejected: True when validation rejected the batch and nothing ran.
        items: Per-identifier execution results (empty when rejected).
    """

    model_config = {"frozen": True}

    success_count: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)
    rejected: bool = False
    items: list[ExecutionResult] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
