"""Command: show the block audit log."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bulkblock.commands._base import BlockCommand

if TYPE_CHECKING:
    from bulkblock.commands._context import AppContext


@click.command(
    cls=BlockCommand,
    examples="""\
  bulkblock log
  bulkblock log --limit 10
  bulkblock -v log""",
)
@click.option("--limit", default=50, type=int, help="Max entries.")
@click.pass_obj
def log(app: AppContext, limit: int) -> None:
    """Show recent audit log entries, newest first."""
    from bulkblock.services.query import QueryService

    app.emit(QueryService(app.site).audit_log(limit=limit))
