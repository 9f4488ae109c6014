"""RuleService — list, add, remove, and clear domain rules."""

from __future__ import annotations

from ccgate.domain.rules import RuleValidationError, normalize_domain
from ccgate.infrastructure.backends import BackendFailure
from ccgate.services.base import BaseService
from ccgate.services.result import BACKEND_FAILURE, INVALID_RULE, ServiceError, ServiceResult


def _backend_error(op: str, exc: BackendFailure) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code=BACKEND_FAILURE,
            message=f"Rule change was not saved: {exc.reason}",
            detail={"status": exc.status},
        ),
    )


class RuleService(BaseService):
    """Editing operations over the rule store."""

    async def list_rules(self) -> ServiceResult:
        ruleset = await self._store.load_all()
        items = [
            {"domain": domain, "admin_email": ruleset[domain]} for domain in sorted(ruleset)
        ]
        return ServiceResult(
            ok=True,
            op="list_rules",
            data={"items": items, "count": len(items)},
        )

    async def add_rule(self, domain: str, email: str) -> ServiceResult:
        """Add or replace the rule for *domain*."""
        op = "add_rule"
        try:
            ruleset = await self._store.add_or_update(domain, email)
        except RuleValidationError as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=INVALID_RULE,
                    message=exc.message,
                    detail={"field": exc.field},
                ),
            )
        except BackendFailure as exc:
            return _backend_error(op, exc)

        norm = normalize_domain(domain)
        return ServiceResult(
            ok=True,
            op=op,
            data={"domain": norm, "admin_email": ruleset[norm], "count": len(ruleset)},
        )

    async def remove_rule(self, domain: str) -> ServiceResult:
        """Remove the rule for *domain*; reports whether one existed."""
        op = "remove_rule"
        norm = normalize_domain(domain)
        try:
            ruleset, removed = await self._store.remove(norm)
        except BackendFailure as exc:
            return _backend_error(op, exc)

        if removed:
            self._notify(f"Removed rule for @{norm}", "notice")
        return ServiceResult(
            ok=True,
            op=op,
            data={"domain": norm, "removed": removed, "count": len(ruleset)},
        )

    async def clear_rules(self) -> ServiceResult:
        op = "clear_rules"
        try:
            cleared = await self._store.clear()
        except BackendFailure as exc:
            return _backend_error(op, exc)
        return ServiceResult(ok=True, op=op, data={"cleared": cleared})
