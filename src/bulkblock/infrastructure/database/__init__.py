"""SQLite database engine and schema via SQLAlchemy Core."""

from bulkblock.infrastructure.database.engine import init_database
from bulkblock.infrastructure.database.schema import accounts, audit_log, blocks, metadata

__all__ = [
    "accounts",
    "audit_log",
    "blocks",
    "init_database",
    "metadata",
]
