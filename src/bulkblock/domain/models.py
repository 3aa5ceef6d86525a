"""Domain records exchanged with collaborator stores."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from bulkblock.domain.expiry import Expiry

BLOCK_ACTION = "block"


class ModerationAction(BaseModel):
    """The action requested for every identifier in one submission."""

    model_config = {"frozen": True}

    reason: str
    expiry: str
    performer: str
    action_type: str = BLOCK_ACTION

    @field_validator("reason", "expiry", "performer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Account(BaseModel):
    """A resolved account in the account store."""

    model_config = {"frozen": True}

    id: int
    name: str
    registered: bool = True


class Block(BaseModel):
    """A block record targeting one account."""

    model_config = {"frozen": True}

    target: Account
    performer: str
    reason: str
    expiry: Expiry
    id: int | None = None
    expires_at: datetime | None = None


class AuditEntry(BaseModel):
    """One structured audit log entry."""

    model_config = {"frozen": True}

    log_type: str = BLOCK_ACTION
    action: str = BLOCK_ACTION
    target: str
    performer: str
    comment: str
    params: dict[str, Any] = Field(default_factory=dict)
