"""Save-time enforcement predicate.

Stateless: one call per save attempt, no I/O.  Fails open whenever the
requester's domain cannot be determined or no rule covers it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import BaseModel

from ccgate.domain.rules import domain_of, normalize_email, normalize_ruleset


class Decision(BaseModel):
    """Outcome of :func:`evaluate`."""

    model_config = {"frozen": True}

    allow: bool
    message: str | None = None
    domain: str | None = None
    required_admin: str | None = None


def denial_message(required_admin: str, domain: str) -> str:
    """Human-readable reason shown when a save is blocked."""
    return f"Admin {required_admin} must be CC'd before saving (for @{domain})."


def evaluate(
    requester_email: str | None,
    collaborator_emails: Iterable[str | None],
    ruleset: Mapping[str, str],
) -> Decision:
    """Decide whether a ticket from *requester_email* may be saved.

    Args:
        requester_email: The ticket requester's address, possibly None.
        collaborator_emails: Addresses CC'd on the ticket; None entries are ignored.
        ruleset: Snapshot of domain → required admin email.

    Returns:
        A Decision.  ``allow`` is False only when a rule exists for the
        requester's domain, the requester is not that admin, and the admin
        is missing from the collaborators.
    """
    requester = normalize_email(requester_email)
    domain = domain_of(requester)
    if domain is None:
        return Decision(allow=True)

    rules = normalize_ruleset(dict(ruleset))
    required_admin = rules.get(domain)
    if not required_admin:
        return Decision(allow=True, domain=domain)

    if requester == required_admin:
        return Decision(allow=True, domain=domain, required_admin=required_admin)

    cc_emails = {normalize_email(e) for e in collaborator_emails if e is not None}
    if required_admin in cc_emails:
        return Decision(allow=True, domain=domain, required_admin=required_admin)

    return Decision(
        allow=False,
        message=denial_message(required_admin, domain),
        domain=domain,
        required_admin=required_admin,
    )
