"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Opens the Site lazily and routes results to
stdout/stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bulkblock.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from bulkblock.config.settings import BlockSettings
    from bulkblock.infrastructure.site import Site
    from bulkblock.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The site is opened on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: BlockSettings) -> None:
        self.settings = settings
        self._site: Site | None = None

        from bulkblock.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from bulkblock.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def site(self) -> Site:
        """The site instance (created lazily on first access)."""
        if self._site is None:
            from bulkblock.infrastructure.site import Site

            self._site = Site(self.settings)
            self._site.init_plugins()
        return self._site

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
