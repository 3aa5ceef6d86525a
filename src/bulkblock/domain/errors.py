"""Exceptions raised by collaborator stores and parsers.

These never escape the pipeline: the executor and recorder convert them
into tagged per-item results.
"""

from __future__ import annotations


class StoreError(Exception):
    """A collaborator store rejected a read or write."""


class BlockInsertError(StoreError):
    """The block store refused to persist a block."""


class AuditWriteError(StoreError):
    """The audit log store refused to append an entry."""


class ExpiryParseError(ValueError):
    """Expiry text is neither a duration, a timestamp, nor an infinity sentinel."""
