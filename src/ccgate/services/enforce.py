"""EnforcementService — the ticket save hook.

Loads a RuleSet snapshot, runs the enforcement predicate, and turns a
deny decision into a blocked save with a user-facing message.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ccgate.domain.enforcement import evaluate
from ccgate.domain.rules import normalize_email
from ccgate.services.base import BaseService
from ccgate.services.result import SAVE_BLOCKED, ServiceError, ServiceResult

if TYPE_CHECKING:
    from ccgate.domain.enforcement import Decision
    from ccgate.domain.tickets import Ticket

logger = logging.getLogger(__name__)


class SaveBlocked(Exception):
    """Raised by :meth:`EnforcementService.on_ticket_save` to halt a save."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EnforcementService(BaseService):
    """Decides whether a ticket may be saved."""

    async def decide(self, ticket: Ticket) -> Decision:
        ruleset = await self._store.load_all()
        decision = evaluate(ticket.requester_email, ticket.collaborator_emails, ruleset)
        if decision.allow and decision.required_admin is not None:
            if normalize_email(ticket.requester_email) == decision.required_admin:
                logger.debug(
                    "Admin (%s) is requester, skipping enforcement", decision.required_admin
                )
        if not decision.allow and decision.message:
            self._notify(decision.message, "error")
        return decision

    async def check_ticket(self, ticket: Ticket) -> ServiceResult:
        op = "check_ticket"
        decision = await self.decide(ticket)
        if decision.allow:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "allow": True,
                    "domain": decision.domain,
                    "required_admin": decision.required_admin,
                },
            )
        return ServiceResult(
            ok=False,
            op=op,
            data={"allow": False},
            error=ServiceError(
                code=SAVE_BLOCKED,
                message=decision.message or "Save blocked",
                detail={
                    "domain": decision.domain,
                    "required_admin": decision.required_admin,
                },
            ),
        )

    async def on_ticket_save(self, ticket: Ticket) -> bool:
        """Host save hook: True to allow, raises SaveBlocked to halt."""
        decision = await self.decide(ticket)
        if not decision.allow:
            raise SaveBlocked(decision.message or "Save blocked")
        return True
