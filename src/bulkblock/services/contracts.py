"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions fail fast in tests.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class OutcomeItem(BaseModel):
    """One failing validation diagnostic."""

    kind: Literal["empty_batch", "invalid_format", "not_found", "already_blocked"]
    identifier: str | None = None
    message: str


class ValidationData(BaseModel):
    """Payload contract for ``BulkBlockService.validate``."""

    identifiers: list[str]
    count: int
    valid: bool
    outcomes: list[OutcomeItem]


class ReportItem(BaseModel):
    """Per-identifier execution result."""

    identifier: str
    status: Literal["blocked", "block_failed", "audit_failed"]
    message: str | None = None
    block_id: int | None = None


class BatchReportData(BaseModel):
    """Payload contract for ``BulkBlockService.block``."""

    performer: str
    reason: str
    expiry: str
    success_count: int = Field(ge=0)
    rejected: bool
    errors: list[str]
    items: list[ReportItem]


class AccountItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    blocked: bool


class BlockItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    target: str
    performer: str
    reason: str
    expiry: str


class AuditItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    type: str
    action: str
    target: str
    performer: str
    comment: str
    params: dict[str, Any]
    timestamp: str


class AccountListData(BaseModel):
    """Payload contract for ``QueryService.list_accounts``."""

    count: int
    items: list[AccountItem]


class BlockListData(BaseModel):
    """Payload contract for ``QueryService.list_blocks``."""

    count: int
    items: list[BlockItem]


class AuditListData(BaseModel):
    """Payload contract for ``QueryService.audit_log``."""

    count: int
    items: list[AuditItem]
