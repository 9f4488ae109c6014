"""Command group: manage domain → required admin rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ccgate.commands._base import CcgateGroup

if TYPE_CHECKING:
    from ccgate.commands._context import AppContext

_RULES_EXAMPLES = """\
  ccgate rules list
  ccgate rules add acme.com erin@acme.com
  ccgate rules remove acme.com --yes
  ccgate --json rules list"""


def _confirmed(app: AppContext, yes: bool, prompt: str) -> bool:
    """Ask before destructive edits unless skipped by --yes or --no-interact."""
    if yes or app.settings.no_interact:
        return True
    return click.confirm(prompt, default=False)


@click.group(cls=CcgateGroup, examples=_RULES_EXAMPLES)
@click.pass_obj
def rules(app: AppContext) -> None:
    """Manage which admin must be CC'd for each requester domain."""


@rules.command(
    "list",
    examples="""\
  ccgate rules list
  ccgate -q rules list
  ccgate --json rules list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """Show all rules, sorted by domain."""
    from ccgate.services.rules import RuleService

    app.emit(app.run(lambda store: RuleService(store).list_rules()))


@rules.command(
    examples="""\
  ccgate rules add acme.com erin@acme.com
  ccgate rules add @Globex.com Hank@Globex.com"""
)
@click.argument("domain")
@click.argument("email")
@click.pass_obj
def add(app: AppContext, domain: str, email: str) -> None:
    """Require EMAIL to be CC'd on tickets from DOMAIN (replaces any existing rule)."""
    from ccgate.services.rules import RuleService

    app.emit(app.run(lambda store: RuleService(store).add_rule(domain, email)))


@rules.command(
    examples="""\
  ccgate rules remove acme.com
  ccgate rules remove acme.com --yes"""
)
@click.argument("domain")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation.")
@click.pass_obj
def remove(app: AppContext, domain: str, yes: bool) -> None:
    """Remove the rule for DOMAIN."""
    from ccgate.services.rules import RuleService

    if not _confirmed(app, yes, f"Remove rule for {domain}?"):
        click.echo("Cancelled.")
        return
    app.emit(app.run(lambda store: RuleService(store, app.notifier).remove_rule(domain)))


@rules.command(
    examples="""\
  ccgate rules clear
  ccgate --no-interact rules clear"""
)
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation.")
@click.pass_obj
def clear(app: AppContext, yes: bool) -> None:
    """Remove every rule."""
    from ccgate.services.rules import RuleService

    if not _confirmed(app, yes, "Remove ALL rules?"):
        click.echo("Cancelled.")
        return
    app.emit(app.run(lambda store: RuleService(store).clear_rules()))
