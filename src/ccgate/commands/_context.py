"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``.  Runs async service calls against a freshly opened
RuleStore and centralizes result emission (stdout/stderr + exit codes).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import click

from ccgate.output.formatters import OutputSettings, format_result
from ccgate.services.notify import ConsoleNotifier

if TYPE_CHECKING:
    from ccgate.config.settings import CcgateSettings
    from ccgate.services.notify import Notifier
    from ccgate.services.result import ServiceResult
    from ccgate.services.store import RuleStore


class AppContext:
    """State shared through Click's command hierarchy.

    The rule store is opened per command inside :meth:`run`, so
    ``--help`` and ``--version`` never touch storage.
    """

    def __init__(self, settings: CcgateSettings, notifier: Notifier | None = None) -> None:
        self.settings = settings
        self.notifier: Notifier = notifier or ConsoleNotifier()

        from ccgate.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    def run(self, call: Callable[[RuleStore], Awaitable[ServiceResult]]) -> ServiceResult:
        """Open the rule store, await ``call(store)``, and close it again."""
        from ccgate.services.store import open_rule_store

        async def _main() -> ServiceResult:
            async with open_rule_store(self.settings) as store:
                return await call(store)

        return asyncio.run(_main())

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr.
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
