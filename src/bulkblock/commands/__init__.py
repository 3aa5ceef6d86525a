"""Subcommands of the ``bulkblock`` group.

Command modules are imported inside :func:`register_commands` so importing
this package stays cheap.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module, attribute)
_COMMANDS = (
    ("init_cmd", "init_cmd"),
    ("account", "account"),
    ("validate", "validate"),
    ("block", "block"),
    ("blocks", "blocks"),
    ("log", "log"),
)


def register_commands(cli: click.Group) -> None:
    for module_name, attr in _COMMANDS:
        module = importlib.import_module(f"{__name__}.{module_name}")
        cli.add_command(getattr(module, attr))
