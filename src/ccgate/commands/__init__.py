"""Subcommand modules for ccgate.

Provides register_commands() which uses deferred imports to keep
``ccgate --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``rules`` group and the standalone ``check`` command."""
    from ccgate.commands.check import check
    from ccgate.commands.rules import rules

    cli.add_command(rules)
    cli.add_command(check)
