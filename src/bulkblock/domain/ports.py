"""Collaborator interfaces the pipeline calls through.

The account store, block store, and audit log are external services.
Implementations live in the infrastructure layer (or in a host
application); the pipeline only depends on these protocols.
"""

from __future__ import annotations

from typing import Protocol

from bulkblock.domain.expiry import Expiry
from bulkblock.domain.models import Account, AuditEntry, Block


class NameOracle(Protocol):
    """Decides whether a string is a syntactically legal account name."""

    def is_valid(self, name: str) -> bool: ...


class AccountLookup(Protocol):
    """Resolves account names to registered accounts."""

    def resolve(self, name: str) -> Account | None: ...


class BlockStore(Protocol):
    """Reads and writes block records.

    ``insert`` raises :class:`~bulkblock.domain.errors.BlockInsertError`
    on any refusal, including a competing active block for the target.
    """

    def find_active_block(self, account: Account) -> Block | None: ...

    def insert(self, block: Block) -> int: ...


class AuditLogStore(Protocol):
    """Appends audit entries; raises ``AuditWriteError`` on failure."""

    def append(self, entry: AuditEntry) -> int: ...


class ExpiryParser(Protocol):
    """Parses expiry text; raises ``ExpiryParseError`` on malformed input."""

    def parse(self, text: str) -> Expiry: ...
