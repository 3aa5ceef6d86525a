"""Command: site initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from bulkblock.commands._base import BlockCommand

if TYPE_CHECKING:
    from bulkblock.commands._context import AppContext

_INIT_EXAMPLES = """\
  bulkblock init
  bulkblock init /srv/wiki --name community-wiki"""


@click.command("init", cls=BlockCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Site name (defaults to the directory name).")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None) -> None:
    """Initialize a new bulkblock site."""
    from bulkblock.services.init import InitService

    app.emit(InitService.init_site(Path(path), name=name))
