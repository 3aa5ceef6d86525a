"""Command: list active blocks."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bulkblock.commands._base import BlockCommand

if TYPE_CHECKING:
    from bulkblock.commands._context import AppContext


@click.command(
    cls=BlockCommand,
    examples="""\
  bulkblock blocks
  bulkblock --json blocks""",
)
@click.pass_obj
def blocks(app: AppContext) -> None:
    """List blocks that have not expired."""
    from bulkblock.services.query import QueryService

    app.emit(QueryService(app.site).list_blocks())
