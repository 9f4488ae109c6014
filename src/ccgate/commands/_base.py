"""Click classes shared by every ccgate command.

Each command may carry an ``examples`` block.  It is shown by an eager
``--examples`` flag and advertised in the ``--help`` epilog, so help text
stays a one-screen summary of options.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click

EXAMPLES_HINT = "Run with --examples for sample invocations."


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    command = ctx.command
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(getattr(command, "examples", "") or "")
    ctx.exit(0)


def _with_examples(
    cmd: click.Command, examples: str | None, kwargs: dict[str, Any]
) -> str | None:
    """Normalize *examples* and register ``--examples`` on *cmd*."""
    if not examples:
        return None
    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=_print_examples,
            help="Show usage examples and exit.",
        )
    )
    if kwargs.get("epilog") is None:
        cmd.epilog = EXAMPLES_HINT
    return textwrap.indent(textwrap.dedent(examples).strip("\n"), "  ")


class CcgateCommand(click.Command):
    """Leaf command; accepts ``examples=`` like any other keyword."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = _with_examples(self, examples, kwargs)


class CcgateGroup(click.Group):
    """Group whose subcommands and subgroups use the ccgate classes."""

    command_class = CcgateCommand
    group_class = type

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = _with_examples(self, examples, kwargs)
