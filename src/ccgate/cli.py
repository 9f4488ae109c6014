"""ccgate entry point: global flags, settings, and subcommand registration."""

from __future__ import annotations

import click

from ccgate import __version__
from ccgate.commands import register_commands
from ccgate.commands._base import CcgateGroup
from ccgate.commands._context import AppContext
from ccgate.config.settings import CcgateSettings

_ROOT_EXAMPLES = """\
  ccgate rules add acme.com erin@acme.com
  ccgate check --requester bob@acme.com --cc erin@acme.com
  ccgate --offline --json rules list
  CCGATE_REMOTE__INSTALLATION_ID=42 ccgate rules list"""


@click.group(cls=CcgateGroup, examples=_ROOT_EXAMPLES, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ccgate")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only domains or the bare outcome.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging, including storage requests.")
@click.option("--log-json", is_flag=True, help="Emit log records to stderr as JSON lines.")
@click.option("--no-interact", is_flag=True, help="Never prompt; destructive edits proceed.")
@click.option("--offline", is_flag=True, help="Skip the remote store; use the local file.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read this ccgate.toml instead of searching upward.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """ccgate: block ticket saves until the domain's admin is CC'd."""
    ctx.obj = AppContext(CcgateSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
