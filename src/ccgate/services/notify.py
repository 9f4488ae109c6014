"""Host notification sinks.

A notifier surfaces denial reasons and successful removals to the end
user.  Delivery is fire-and-forget: :func:`send_notice` never raises.
"""

from __future__ import annotations

import logging
from typing import Literal, Protocol

import click

logger = logging.getLogger(__name__)

Severity = Literal["error", "notice"]


class Notifier(Protocol):
    def notify(self, message: str, severity: Severity) -> None: ...


class ConsoleNotifier:
    """Echo notifications to stderr."""

    def notify(self, message: str, severity: Severity) -> None:
        prefix = "BLOCKED" if severity == "error" else "NOTICE"
        click.echo(f"{prefix}: {message}", err=True)


def send_notice(notifier: Notifier | None, message: str, severity: Severity) -> None:
    """Deliver *message* if a notifier is configured; failures are only logged."""
    if notifier is None:
        return
    try:
        notifier.notify(message, severity)
    except Exception:
        logger.debug("Notification failed: %s", message, exc_info=True)
