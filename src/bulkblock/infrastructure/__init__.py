"""Infrastructure layer: SQL-backed account, block, and audit stores.

This layer implements the collaborator protocols from
:mod:`bulkblock.domain.ports`. It must never import from services,
commands, or output.
"""
