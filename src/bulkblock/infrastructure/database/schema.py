"""SQLAlchemy Core table definitions for the reference site store.

One active block per account is enforced by the unique ``account_id``
constraint on ``blocks``: a competing insert for the same target fails
inside the database rather than in application code.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, Table, Text

metadata = MetaData()

accounts = Table(
    "accounts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
    Column("registered_at", Text, nullable=False),
)

blocks = Table(
    "blocks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, ForeignKey("accounts.id"), nullable=False, unique=True),
    Column("target", Text, nullable=False),
    Column("performer", Text, nullable=False),
    Column("reason", Text, nullable=False),
    Column("expiry", Text, nullable=False),  # "infinity" or ISO 8601
    Column("created", Text, nullable=False),
)

audit_log = Table(
    "audit_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("log_type", Text, nullable=False),
    Column("action", Text, nullable=False),
    Column("target", Text, nullable=False),
    Column("performer", Text, nullable=False),
    Column("comment", Text, nullable=False),
    Column("params", Text, nullable=False),  # JSON object
    Column("timestamp", Text, nullable=False),
)

Index("ix_audit_log_target", audit_log.c.target)
Index("ix_audit_log_type", audit_log.c.log_type)
