"""Command: evaluate a ticket against the rules, as the save hook would."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

import click

from ccgate.commands._base import CcgateCommand

if TYPE_CHECKING:
    from ccgate.commands._context import AppContext


def _load_ticket_payload(stream: IO[str]) -> dict[str, Any]:
    try:
        data = json.load(stream)
    except ValueError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--ticket") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object", param_hint="--ticket")
    return data


@click.command(
    cls=CcgateCommand,
    examples="""\
  ccgate check --requester bob@acme.com --cc erin@acme.com
  ccgate check --ticket ticket.json
  cat ticket.json | ccgate --json check --ticket -""",
)
@click.option("--requester", default=None, help="Requester email address.")
@click.option("--cc", "ccs", multiple=True, help="Collaborator email (repeatable).")
@click.option(
    "--ticket",
    "ticket_file",
    type=click.File("r"),
    default=None,
    help="Ticket JSON payload (use - for stdin).",
)
@click.pass_obj
def check(
    app: AppContext,
    requester: str | None,
    ccs: tuple[str, ...],
    ticket_file: IO[str] | None,
) -> None:
    """Check whether a ticket may be saved; exits 1 when the save is blocked."""
    from ccgate.domain.tickets import Collaborator, Ticket
    from ccgate.services.enforce import EnforcementService

    if ticket_file is not None:
        ticket = Ticket.from_payload(_load_ticket_payload(ticket_file))
    else:
        ticket = Ticket(
            requester_email=requester,
            collaborators=[Collaborator(email=cc) for cc in ccs],
        )
    app.emit(app.run(lambda store: EnforcementService(store).check_ticket(ticket)))
