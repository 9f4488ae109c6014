"""Tests for BaseService."""

from ccgate.infrastructure.backends import RemoteBackend, static_installation
from ccgate.services.base import BaseService
from ccgate.services.store import RuleStore
from tests.conftest import MemoryBackend, RecordingNotifier


class _PingService(BaseService):
    def ping(self) -> None:
        self._notify("ping", "notice")


def _store() -> RuleStore:
    # The remote client is never touched: no installation is configured.
    return RuleStore(RemoteBackend(None, static_installation(None)), MemoryBackend())  # type: ignore[arg-type]


class TestBaseService:
    def test_notify_delivers(self) -> None:
        notifier = RecordingNotifier()
        _PingService(_store(), notifier).ping()
        assert notifier.sent == [("ping", "notice")]

    def test_notify_without_notifier(self) -> None:
        _PingService(_store()).ping()

    def test_notify_failure_is_swallowed(self) -> None:
        class Broken:
            def notify(self, message: str, severity: str) -> None:
                raise RuntimeError("down")

        _PingService(_store(), Broken()).ping()
