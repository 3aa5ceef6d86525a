"""``bulkblock`` entry point: global output flags plus the subcommands."""

from __future__ import annotations

from typing import Any

import click

from bulkblock import __version__
from bulkblock.commands import register_commands
from bulkblock.commands._context import AppContext
from bulkblock.config.settings import BlockSettings


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="bulkblock")
@click.option("-c", "--config", "config_path", help="Read settings from this TOML file.")
@click.option("--json", "json_output", is_flag=True, help="Emit results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the essentials.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and phase timings.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: Any) -> None:
    """bulkblock: block many user accounts in one validated batch."""
    ctx.obj = AppContext(BlockSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
