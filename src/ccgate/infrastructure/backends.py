"""Storage backends for the persisted RuleSet.

Two kinds of backend:

- :class:`RemoteBackend` — the host's per-installation key-value endpoint,
  reached over HTTP.  Async; reports outcomes as explicit result variants
  (:class:`Found`, :class:`Stored`, :class:`NotProvisioned`,
  :class:`BackendError`) rather than raising.
- :class:`LocalBackend` — a synchronous JSON key-value file under a fixed
  key, used when the remote endpoint is absent
  (standalone or development runs).

INVARIANT: Backends hold the RuleSet only in its JSON-encoded form and
hand out fresh dicts on every read.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import httpx

from ccgate.domain.rules import RuleSet, dump_ruleset, parse_ruleset

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_KEY = "admin_enforcer_domains"
DEFAULT_LOCAL_KEY = "admin_enforcer_domains_dev"

InstallationResolver = Callable[[], Awaitable[str | None]]

# Raised while parsing an unexpected installations payload.
_LOOKUP_ERRORS = (AttributeError, KeyError, TypeError, ValueError)


# ---------------------------------------------------------------------------
# Result variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Found:
    """The backend returned a RuleSet."""

    ruleset: RuleSet = field(default_factory=dict)


@dataclass(frozen=True)
class Stored:
    """The backend accepted a write."""


@dataclass(frozen=True)
class NotProvisioned:
    """The backend is not installed for this deployment.

    ``expected`` is True when no installation was configured at all
    (offline or standalone runs), as opposed to the host answering 404.
    """

    reason: str = "not found"
    expected: bool = False


@dataclass(frozen=True)
class BackendError:
    """Any other storage failure."""

    reason: str
    status: int | None = None


BackendResult = Found | NotProvisioned | BackendError
WriteResult = Stored | NotProvisioned | BackendError


class BackendFailure(RuntimeError):
    """A write failed for a reason other than a missing installation."""

    def __init__(self, reason: str, status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status = status


class PrimaryBackend(Protocol):
    async def read(self) -> BackendResult: ...

    async def write(self, ruleset: RuleSet) -> WriteResult: ...


class SecondaryBackend(Protocol):
    def read(self) -> RuleSet: ...

    def write(self, ruleset: RuleSet) -> None: ...


# ---------------------------------------------------------------------------
# Installation lookup
# ---------------------------------------------------------------------------


def static_installation(installation_id: str | int | None) -> InstallationResolver:
    """Resolver for a configured installation id (None means standalone)."""

    async def resolve() -> str | None:
        return str(installation_id) if installation_id not in (None, "") else None

    return resolve


def app_installation(client: httpx.AsyncClient, app_id: int | str) -> InstallationResolver:
    """Resolver that finds the installation of *app_id* via the host API.

    The first successful lookup is cached.  Returns None when the app is
    not installed.
    """
    cache: dict[str, str | None] = {}

    async def resolve() -> str | None:
        if "id" in cache:
            return cache["id"]
        response = await client.get("/api/v2/apps/installations.json")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        installation_id: str | None = None
        for item in response.json().get("installations", []):
            if str(item.get("app_id")) == str(app_id):
                installation_id = str(item["id"])
                break
        cache["id"] = installation_id
        return installation_id

    return resolve


# ---------------------------------------------------------------------------
# Remote backend
# ---------------------------------------------------------------------------


class RemoteBackend:
    """Per-installation key-value storage on the host platform.

    Usage::

        async with httpx.AsyncClient(base_url=url) as client:
            backend = RemoteBackend(client, static_installation("42"))
            result = await backend.read()
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        resolve_installation: InstallationResolver,
        *,
        storage_key: str = DEFAULT_REMOTE_KEY,
    ) -> None:
        self._client = client
        self._resolve_installation = resolve_installation
        self.storage_key = storage_key

    async def _storage_path(self) -> str | None:
        installation_id = await self._resolve_installation()
        if installation_id is None:
            return None
        return f"/api/v2/apps/installations/{installation_id}/storage.json"

    async def read(self) -> BackendResult:
        try:
            path = await self._storage_path()
            if path is None:
                return NotProvisioned("no installation", expected=True)
            response = await self._client.get(path, params={"key": self.storage_key})
        except httpx.HTTPStatusError as exc:
            return _status_result(exc.response)
        except httpx.HTTPError as exc:
            return BackendError(f"{type(exc).__name__}: {exc}")
        except _LOOKUP_ERRORS as exc:
            return BackendError(f"Bad installation lookup: {exc!r}")

        if not response.is_success:
            return _status_result(response)
        try:
            payload: Any = response.json()
        except ValueError:
            return Found({})
        raw = payload.get("value") if isinstance(payload, dict) else None
        return Found(parse_ruleset(raw if isinstance(raw, str) else None))

    async def write(self, ruleset: RuleSet) -> WriteResult:
        try:
            path = await self._storage_path()
            if path is None:
                return NotProvisioned("no installation", expected=True)
            response = await self._client.put(
                path,
                json={"key": self.storage_key, "value": dump_ruleset(ruleset)},
            )
        except httpx.HTTPStatusError as exc:
            return _status_result(exc.response)
        except httpx.HTTPError as exc:
            return BackendError(f"{type(exc).__name__}: {exc}")
        except _LOOKUP_ERRORS as exc:
            return BackendError(f"Bad installation lookup: {exc!r}")

        if not response.is_success:
            return _status_result(response)
        return Stored()


def _status_result(response: httpx.Response) -> NotProvisioned | BackendError:
    if response.status_code == 404:
        return NotProvisioned(f"HTTP 404 from {response.request.url.path}")
    return BackendError(f"HTTP {response.status_code}", status=response.status_code)


# ---------------------------------------------------------------------------
# Local backend
# ---------------------------------------------------------------------------


class LocalBackend:
    """JSON file holding ``{key: "<json-encoded RuleSet>"}``.

    Other keys in the file are preserved on write.  A missing or
    malformed file reads as an empty RuleSet.
    """

    def __init__(self, path: Path, *, storage_key: str = DEFAULT_LOCAL_KEY) -> None:
        self.path = path
        self.storage_key = storage_key

    def _load_file(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable local storage file: %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def read(self) -> RuleSet:
        raw = self._load_file().get(self.storage_key)
        return parse_ruleset(raw if isinstance(raw, str) else None)

    def write(self, ruleset: RuleSet) -> None:
        data = self._load_file()
        data[self.storage_key] = dump_ruleset(ruleset)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

