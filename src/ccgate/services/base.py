"""BaseService — shared foundation for ccgate services.

Every service receives a :class:`RuleStore` and an optional notifier at
construction time.  Nothing is held in module-level state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ccgate.services.notify import send_notice

if TYPE_CHECKING:
    from ccgate.services.notify import Notifier, Severity
    from ccgate.services.store import RuleStore


class BaseService:
    """Base for service-layer classes.

    Usage::

        class RuleService(BaseService):
            async def list_rules(self) -> ServiceResult:
                ruleset = await self._store.load_all()
                ...
    """

    def __init__(self, store: RuleStore, notifier: Notifier | None = None) -> None:
        self._store = store
        self._notifier = notifier

    def _notify(self, message: str, severity: Severity) -> None:
        """Fire-and-forget notification.

        INVARIANT: Notification failures never change an operation's result.
        """
        send_notice(self._notifier, message, severity)
