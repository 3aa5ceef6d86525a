"""Command group: manage the account store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bulkblock.commands._base import BlockGroup

if TYPE_CHECKING:
    from bulkblock.commands._context import AppContext

_ACCOUNT_EXAMPLES = """\
  bulkblock account add Alice Bob
  bulkblock account list
  bulkblock --json account list"""


@click.group(cls=BlockGroup, examples=_ACCOUNT_EXAMPLES)
@click.pass_obj
def account(app: AppContext) -> None:
    """Register and list accounts."""


@account.command(
    examples="""\
  bulkblock account add Alice
  bulkblock account add "Spam bot" Vandal42"""
)
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def add(app: AppContext, names: tuple[str, ...]) -> None:
    """Register one or more account names."""
    from bulkblock.services.accounts import AccountService

    app.emit(AccountService(app.site).register(names))


@account.command(
    "list",
    examples="""\
  bulkblock account list
  bulkblock -q account list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List registered accounts and whether each is blocked."""
    from bulkblock.services.query import QueryService

    app.emit(QueryService(app.site).list_accounts())
