"""Click classes that accept an ``examples=`` text block.

Commands built with them gain an eager ``--examples`` flag that prints the
block and exits, so ``--help`` can stay short.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    examples: str | None
    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(self.examples)
            ctx.exit(0)


class BlockCommand(_ExamplesMixin, click.Command):
    pass


class BlockGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`BlockCommand` by default."""

    command_class = BlockCommand
