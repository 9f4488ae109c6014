"""RuleStore — the single owner of the persisted RuleSet.

Reads favor availability: they never raise on the normal path and fall
back to the secondary backend when the primary is not provisioned, or to
an empty RuleSet on any other failure.  Writes favor correctness: only a
missing installation redirects to the secondary backend; every other
failure raises :class:`BackendFailure`.

Every edit is a whole-map read-modify-write whose read fails closed like
a write.  There is no version token, so two concurrent edits are
last-write-wins.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import httpx

from ccgate.domain.rules import Rule, normalize_domain
from ccgate.infrastructure.backends import (
    BackendError,
    BackendFailure,
    Found,
    LocalBackend,
    NotProvisioned,
    RemoteBackend,
    Stored,
    app_installation,
    static_installation,
)

if TYPE_CHECKING:
    from ccgate.config.settings import CcgateSettings
    from ccgate.domain.rules import RuleSet
    from ccgate.infrastructure.backends import PrimaryBackend, SecondaryBackend

logger = logging.getLogger(__name__)


def _log_fallback(expected: bool, msg: str, reason: str) -> None:
    # 404 from a configured installation warns; standalone runs log at debug.
    logger.log(logging.DEBUG if expected else logging.WARNING, msg, reason)


class RuleStore:
    """Domain → required admin mapping with remote/local fallback."""

    def __init__(self, primary: PrimaryBackend, secondary: SecondaryBackend) -> None:
        self._primary = primary
        self._secondary = secondary

    async def load_all(self) -> RuleSet:
        """Return a copy of the current RuleSet."""
        try:
            result = await self._primary.read()
        except Exception:
            logger.warning("Rule load failed unexpectedly", exc_info=True)
            return {}

        match result:
            case Found(ruleset=ruleset):
                return dict(ruleset)
            case NotProvisioned(reason=reason, expected=expected):
                _log_fallback(expected, "Using local fallback storage (%s)", reason)
                return dict(self._secondary.read())
            case BackendError(reason=reason, status=status):
                logger.warning("Rule load failed: %s (status=%s)", reason, status)
                return {}
        return {}

    async def _load_for_edit(self) -> RuleSet:
        """Read the snapshot an edit will modify; any failure aborts the edit.

        INVARIANT: a failed primary read never yields an empty snapshot.
        """
        try:
            result = await self._primary.read()
        except Exception as exc:
            raise BackendFailure(f"read failed: {exc!r}") from exc

        match result:
            case Found(ruleset=ruleset):
                return dict(ruleset)
            case NotProvisioned(reason=reason, expected=expected):
                _log_fallback(expected, "Using local fallback storage (%s)", reason)
                return dict(self._secondary.read())
            case BackendError(reason=reason, status=status):
                raise BackendFailure(f"read failed: {reason}", status)
        raise BackendFailure(f"read failed: unexpected result {result!r}")

    async def save_all(self, ruleset: RuleSet) -> None:
        """Replace the persisted RuleSet with *ruleset*."""
        snapshot = dict(ruleset)
        result = await self._primary.write(snapshot)
        match result:
            case Stored():
                return
            case NotProvisioned(reason=reason, expected=expected):
                _log_fallback(expected, "Saving to local fallback storage (%s)", reason)
                try:
                    self._secondary.write(snapshot)
                except OSError as exc:
                    raise BackendFailure(f"local storage write failed: {exc}") from exc
            case BackendError(reason=reason, status=status):
                raise BackendFailure(reason, status)

    async def add_or_update(self, domain: str | None, email: str | None) -> RuleSet:
        """Set the required admin for *domain*.

        Raises:
            RuleValidationError: before any storage access, if either input
                is malformed.
            BackendFailure: if the current rules could not be read or the
                write did not persist.
        """
        rule = Rule.create(domain, email)
        ruleset = await self._load_for_edit()
        ruleset[rule.domain] = rule.admin_email
        await self.save_all(ruleset)
        return dict(ruleset)

    async def remove(self, domain: str | None) -> tuple[RuleSet, bool]:
        """Delete the rule for *domain*; absent domains are not an error.

        Returns the new RuleSet and whether *domain* had a rule.
        """
        ruleset = await self._load_for_edit()
        removed = ruleset.pop(normalize_domain(domain), None) is not None
        await self.save_all(ruleset)
        return dict(ruleset), removed

    async def clear(self) -> int:
        """Persist an empty RuleSet; returns how many rules were dropped."""
        count = len(await self.load_all())
        await self.save_all({})
        return count


@asynccontextmanager
async def open_rule_store(settings: CcgateSettings) -> AsyncIterator[RuleStore]:
    """Build a RuleStore from settings, owning the HTTP client for its lifetime.

    With ``--offline`` or no ``[remote]`` configuration the primary backend
    resolves no installation, so every call goes to the local file.
    """
    remote = settings.remote
    secondary = LocalBackend(settings.local_path, storage_key=settings.local.storage_key)

    auth: tuple[str, str] | None = None
    if remote.email and remote.api_token:
        auth = (f"{remote.email}/token", remote.api_token)

    async with httpx.AsyncClient(
        base_url=remote.base_url or "",
        auth=auth,
        timeout=remote.timeout,
        headers={"Accept": "application/json"},
    ) as client:
        if settings.offline or not remote.configured:
            resolver = static_installation(None)
        elif remote.installation_id:
            resolver = static_installation(remote.installation_id)
        else:
            resolver = app_installation(client, remote.app_id or "")
        primary = RemoteBackend(client, resolver, storage_key=remote.storage_key)
        yield RuleStore(primary, secondary)
