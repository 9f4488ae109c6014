"""Shared pytest fixtures and test helpers for ccgate tests."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from click.testing import CliRunner

from ccgate.config.discovery import CONFIG_ENV_VAR
from ccgate.domain.rules import RuleSet, dump_ruleset, parse_ruleset
from ccgate.infrastructure.backends import DEFAULT_LOCAL_KEY, RemoteBackend, static_installation
from ccgate.services.notify import Severity
from ccgate.services.store import RuleStore

INSTALLATION_ID = "42"
BASE_URL = "https://support.example.test"

REMOTE_ENV_VARS = (
    "CCGATE_REMOTE__BASE_URL",
    "CCGATE_REMOTE__INSTALLATION_ID",
    "CCGATE_REMOTE__APP_ID",
    "CCGATE_REMOTE__EMAIL",
    "CCGATE_REMOTE__API_TOKEN",
    "CCGATE_OFFLINE",
)


class MemoryBackend:
    """In-process secondary backend with the same contract as LocalBackend."""

    def __init__(
        self,
        initial: dict[str, str] | None = None,
        *,
        storage_key: str = DEFAULT_LOCAL_KEY,
    ) -> None:
        self.items: dict[str, str] = dict(initial or {})
        self.storage_key = storage_key

    def read(self) -> RuleSet:
        return parse_ruleset(self.items.get(self.storage_key))

    def write(self, ruleset: RuleSet) -> None:
        self.items[self.storage_key] = dump_ruleset(ruleset)


class RecordingNotifier:
    """Collect notifications in memory."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, Severity]] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.sent.append((message, severity))


class FakeStorageServer:
    """In-memory stand-in for the host's installation storage endpoint.

    Only ``/api/v2/apps/installations/<installation_id>/storage.json`` exists;
    any other installation answers 404.  Set ``fail_status`` to make every
    request fail with that status, or only requests whose method is in
    ``fail_methods`` when that is set.
    """

    def __init__(self, installation_id: str = INSTALLATION_ID) -> None:
        self.installation_id = installation_id
        self.values: dict[str, str] = {}
        self.fail_status: int | None = None
        self.fail_methods: set[str] | None = None
        self.requests: list[httpx.Request] = []

    @property
    def path(self) -> str:
        return f"/api/v2/apps/installations/{self.installation_id}/storage.json"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status is not None and (
            self.fail_methods is None or request.method in self.fail_methods
        ):
            return httpx.Response(self.fail_status, json={"error": "Unavailable"})
        if request.url.path != self.path:
            return httpx.Response(404, json={"error": "InstallationNotFound"})
        if request.method == "GET":
            key = request.url.params.get("key")
            if key in self.values:
                return httpx.Response(200, json={"key": key, "value": self.values[key]})
            return httpx.Response(200, json={})
        if request.method == "PUT":
            body = json.loads(request.content)
            self.values[body["key"]] = body["value"]
            return httpx.Response(200, json={})
        return httpx.Response(405)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def storage_server() -> FakeStorageServer:
    return FakeStorageServer()


@pytest_asyncio.fixture
async def http_client(storage_server: FakeStorageServer) -> AsyncIterator[httpx.AsyncClient]:
    """AsyncClient wired to the fake storage server."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(storage_server.handler),
        base_url=BASE_URL,
    ) as client:
        yield client


@pytest.fixture
def local_backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def rule_store(http_client: httpx.AsyncClient, local_backend: MemoryBackend) -> RuleStore:
    """Store whose primary backend is installed (remote storage in use)."""
    primary = RemoteBackend(http_client, static_installation(INSTALLATION_ID))
    return RuleStore(primary, local_backend)


@pytest.fixture
def standalone_store(http_client: httpx.AsyncClient, local_backend: MemoryBackend) -> RuleStore:
    """Store whose primary backend answers 404 (not installed)."""
    primary = RemoteBackend(http_client, static_installation("999"))
    return RuleStore(primary, local_backend)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI commands from an empty temp directory with no ambient config.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.  Local rule storage lands in ``tmp_path/.ccgate``.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    for name in REMOTE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo handler changes made by ``configure_logging`` during CLI tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    levels = {name: logging.getLogger(name).level for name in ("ccgate", "httpx")}
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
