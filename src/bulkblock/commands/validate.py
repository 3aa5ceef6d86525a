"""Command: validate a username list without blocking anyone."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from bulkblock.commands._base import BlockCommand

if TYPE_CHECKING:
    from bulkblock.commands._context import AppContext


@click.command(
    cls=BlockCommand,
    examples="""\
  bulkblock validate usernames.txt
  printf 'Alice\\nBob\\n' | bulkblock validate -
  bulkblock --json validate usernames.txt""",
)
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def validate(app: AppContext, source: TextIO) -> None:
    """Check every username in SOURCE (one per line, '-' for stdin)."""
    from bulkblock.services.bulk_block import BulkBlockService

    app.emit(BulkBlockService(app.site).validate(source.read()))
