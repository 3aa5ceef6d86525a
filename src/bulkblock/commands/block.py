"""Command: block every username in a list."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from bulkblock.commands._base import BlockCommand

if TYPE_CHECKING:
    from bulkblock.commands._context import AppContext


def complete_expiry(
    ctx: click.Context | None, param: click.Parameter | None, incomplete: str
) -> list[str]:
    """Shell completion for --expiry from the site's ``[block] expiry_options``."""
    from bulkblock.config.settings import BlockSettings

    options = BlockSettings.from_cli().block.expiry_options
    return [option for option in options if option.startswith(incomplete)]


@click.command(
    cls=BlockCommand,
    examples="""\
  bulkblock block spammers.txt --reason "Spam accounts"
  bulkblock block spammers.txt --reason "Vandalism" --expiry "1 week"
  cat list.txt | bulkblock block - --reason "Sockpuppets" --performer Admin
  bulkblock --json block spammers.txt --reason "Spam" --expiry 2030-01-01T00:00:00Z""",
)
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--reason", required=True, help="Reason recorded on each block.")
@click.option(
    "--expiry",
    default=None,
    shell_complete=complete_expiry,
    help="Block duration, e.g. 'infinite', '3 days', or an ISO timestamp.",
)
@click.option("--performer", default=None, help="Account name recorded as the blocker.")
@click.pass_obj
def block(
    app: AppContext,
    source: TextIO,
    reason: str,
    expiry: str | None,
    performer: str | None,
) -> None:
    """Block every username in SOURCE (one per line, '-' for stdin).

    The whole list is validated first; a single invalid, unknown, or
    already-blocked name rejects the batch and nothing is blocked.
    """
    from bulkblock.services.bulk_block import BulkBlockService

    result = BulkBlockService(app.site).block(
        source.read(),
        reason=reason,
        expiry=expiry,
        performer=performer,
    )
    app.emit(result)
