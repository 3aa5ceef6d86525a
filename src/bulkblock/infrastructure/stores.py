"""SQL-backed implementations of the collaborator store protocols.

Each store owns short transactions via ``engine.begin()``. Database errors
are translated into the domain's store exceptions so that callers never
depend on SQLAlchemy.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bulkblock.domain.errors import AuditWriteError, BlockInsertError, StoreError
from bulkblock.domain.expiry import INFINITY, Expiry, ExpiryKind
from bulkblock.domain.models import Account, AuditEntry, Block
from bulkblock.infrastructure.database.schema import accounts, audit_log, blocks

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def _expiry_from_column(value: str) -> tuple[Expiry, datetime | None]:
    """Rebuild an :class:`Expiry` from the stored ``blocks.expiry`` column."""
    if value == INFINITY:
        return Expiry(raw=INFINITY, kind=ExpiryKind.INFINITE), None
    at = datetime.fromisoformat(value)
    return Expiry(raw=value, kind=ExpiryKind.ABSOLUTE, at=at), at


def _is_expired(value: str, now: datetime) -> bool:
    if value == INFINITY:
        return False
    return datetime.fromisoformat(value) <= now


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class SqlAccountLookup:
    """Account store backed by the ``accounts`` table."""

    def __init__(self, engine: Engine, *, clock: Clock = utc_now) -> None:
        self._engine = engine
        self._clock = clock

    def resolve(self, name: str) -> Account | None:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(select(accounts).where(accounts.c.name == name)).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not look up account {name}: {exc}") from exc
        if row is None:
            return None
        return Account(id=row.id, name=row.name, registered=True)

    def register(self, name: str) -> Account:
        """Create the account if missing. Returns the stored account."""
        try:
            with self._engine.begin() as conn:
                row = conn.execute(select(accounts).where(accounts.c.name == name)).first()
                if row is not None:
                    return Account(id=row.id, name=row.name)
                result = conn.execute(
                    insert(accounts).values(name=name, registered_at=self._clock().isoformat())
                )
                account_id = result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not register account {name}: {exc}") from exc
        logger.debug("Registered account %s (id=%s)", name, account_id)
        return Account(id=int(account_id), name=name)

    def list_accounts(self) -> list[Account]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(select(accounts).order_by(accounts.c.name)).fetchall()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not list accounts: {exc}") from exc
        return [Account(id=row.id, name=row.name) for row in rows]


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class SqlBlockStore:
    """Block store backed by the ``blocks`` table.

    At most one row exists per account. Expired rows are purged for the
    target before a new block is inserted.
    """

    def __init__(self, engine: Engine, *, clock: Clock = utc_now) -> None:
        self._engine = engine
        self._clock = clock

    def find_active_block(self, account: Account) -> Block | None:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(blocks).where(blocks.c.account_id == account.id)
                ).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read blocks for {account.name}: {exc}") from exc
        if row is None or _is_expired(row.expiry, self._clock()):
            return None
        return self._to_block(row, account)

    def insert(self, block: Block) -> int:
        now = self._clock()
        try:
            expires_at = block.expiry.resolve(now)
        except (ValueError, OverflowError) as exc:
            msg = f"Cannot resolve expiry {block.expiry.raw!r} for {block.target.name}"
            raise BlockInsertError(msg) from exc
        expiry_value = INFINITY if expires_at is None else expires_at.isoformat()
        try:
            with self._engine.begin() as conn:
                self._purge_expired(conn, block.target.id, now)
                result = conn.execute(
                    insert(blocks).values(
                        account_id=block.target.id,
                        target=block.target.name,
                        performer=block.performer,
                        reason=block.reason,
                        expiry=expiry_value,
                        created=now.isoformat(),
                    )
                )
        except IntegrityError as exc:
            msg = f"{block.target.name} already has an active block"
            raise BlockInsertError(msg) from exc
        except SQLAlchemyError as exc:
            msg = f"Could not store block for {block.target.name}: {exc}"
            raise BlockInsertError(msg) from exc
        return int(result.inserted_primary_key[0])

    def list_active(self) -> list[Block]:
        now = self._clock()
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(blocks, accounts.c.name.label("account_name"))
                    .join(accounts, accounts.c.id == blocks.c.account_id)
                    .order_by(blocks.c.id)
                ).fetchall()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not list blocks: {exc}") from exc
        return [
            self._to_block(row, Account(id=row.account_id, name=row.account_name))
            for row in rows
            if not _is_expired(row.expiry, now)
        ]

    @staticmethod
    def _purge_expired(conn: Connection, account_id: int, now: datetime) -> None:
        row = conn.execute(
            select(blocks.c.id, blocks.c.expiry).where(blocks.c.account_id == account_id)
        ).first()
        if row is not None and _is_expired(row.expiry, now):
            conn.execute(delete(blocks).where(blocks.c.id == row.id))
            logger.debug("Purged expired block %s", row.id)

    @staticmethod
    def _to_block(row: Row[Any], account: Account) -> Block:
        expiry, expires_at = _expiry_from_column(row.expiry)
        return Block(
            id=row.id,
            target=account,
            performer=row.performer,
            reason=row.reason,
            expiry=expiry,
            expires_at=expires_at,
        )


# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------


class SqlAuditLog:
    """Audit log store backed by the ``audit_log`` table."""

    def __init__(self, engine: Engine, *, clock: Clock = utc_now) -> None:
        self._engine = engine
        self._clock = clock

    def append(self, entry: AuditEntry) -> int:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    insert(audit_log).values(
                        log_type=entry.log_type,
                        action=entry.action,
                        target=entry.target,
                        performer=entry.performer,
                        comment=entry.comment,
                        params=json.dumps(entry.params),
                        timestamp=self._clock().isoformat(),
                    )
                )
        except SQLAlchemyError as exc:
            msg = f"Could not write audit entry for {entry.target}: {exc}"
            raise AuditWriteError(msg) from exc
        return int(result.inserted_primary_key[0])

    def list_entries(self, *, limit: int = 50) -> list[dict[str, Any]]:
        """Most recent entries first."""
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(audit_log).order_by(audit_log.c.id.desc()).limit(limit)
                ).fetchall()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read audit log: {exc}") from exc
        return [
            {
                "id": row.id,
                "type": row.log_type,
                "action": row.action,
                "target": row.target,
                "performer": row.performer,
                "comment": row.comment,
                "params": json.loads(row.params),
                "timestamp": row.timestamp,
            }
            for row in rows
        ]
