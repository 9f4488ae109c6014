"""Tests for the ``rules`` command group."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from ccgate.cli import cli
from ccgate.config.settings import CcgateSettings
from tests.conftest import REMOTE_ENV_VARS

OFFLINE = ["--offline"]


def _add(runner: CliRunner, domain: str, email: str) -> None:
    result = runner.invoke(cli, [*OFFLINE, "rules", "add", domain, email])
    assert result.exit_code == 0, result.output


@pytest.mark.usefixtures("_isolated_project")
class TestRulesList:
    def test_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [*OFFLINE, "rules", "list"])
        assert result.exit_code == 0
        assert "No domain rules set." in result.output

    def test_json(self, cli_runner: CliRunner) -> None:
        _add(cli_runner, "acme.com", "erin@acme.com")
        result = cli_runner.invoke(cli, [*OFFLINE, "--json", "rules", "list"])
        data = json.loads(result.output)
        assert data["op"] == "list_rules"
        assert data["data"]["items"] == [{"domain": "acme.com", "admin_email": "erin@acme.com"}]

    def test_quiet(self, cli_runner: CliRunner) -> None:
        _add(cli_runner, "globex.com", "hank@globex.com")
        _add(cli_runner, "acme.com", "erin@acme.com")
        result = cli_runner.invoke(cli, [*OFFLINE, "-q", "rules", "list"])
        assert result.output.split() == ["acme.com", "globex.com"]


@pytest.mark.usefixtures("_isolated_project")
class TestRulesAdd:
    def test_add_persists_locally(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, [*OFFLINE, "rules", "add", "@ACME.com", "Erin@Acme.com"])
        assert result.exit_code == 0
        assert "OK" in result.output
        stored = json.loads((tmp_path / ".ccgate" / "storage.json").read_text())
        assert json.loads(stored["admin_enforcer_domains_dev"]) == {"acme.com": "erin@acme.com"}

    def test_unconfigured_remote_falls_back(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["rules", "add", "acme.com", "erin@acme.com"])
        assert result.exit_code == 0
        assert (tmp_path / ".ccgate" / "storage.json").is_file()

    def test_invalid(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [*OFFLINE, "--json", "rules", "add", "acme", "x@y.com"])
        assert result.exit_code == 1
        assert result.stdout == ""
        data = json.loads(result.stderr)
        assert data["error"]["code"] == "INVALID_RULE"

    def test_unwritable_storage_is_reported(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / ".ccgate").write_text("not a directory")
        result = cli_runner.invoke(cli, [*OFFLINE, "rules", "add", "acme.com", "erin@acme.com"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert "ERROR: add_rule" in result.stderr
        assert "local storage write failed" in result.stderr


@pytest.mark.usefixtures("_isolated_project")
class TestRulesRemove:
    def test_remove_with_yes(self, cli_runner: CliRunner) -> None:
        _add(cli_runner, "acme.com", "erin@acme.com")
        result = cli_runner.invoke(cli, [*OFFLINE, "--json", "rules", "remove", "acme.com", "--yes"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["removed"] is True
        assert "Removed rule for @acme.com" in result.stderr

    def test_remove_prompt_declined(self, cli_runner: CliRunner) -> None:
        _add(cli_runner, "acme.com", "erin@acme.com")
        result = cli_runner.invoke(cli, [*OFFLINE, "rules", "remove", "acme.com"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled." in result.output
        listed = cli_runner.invoke(cli, [*OFFLINE, "-q", "rules", "list"])
        assert listed.output.strip() == "acme.com"

    def test_remove_prompt_accepted(self, cli_runner: CliRunner) -> None:
        _add(cli_runner, "acme.com", "erin@acme.com")
        result = cli_runner.invoke(cli, [*OFFLINE, "rules", "remove", "acme.com"], input="y\n")
        assert result.exit_code == 0
        listed = cli_runner.invoke(cli, [*OFFLINE, "-q", "rules", "list"])
        assert listed.output.strip() == ""

    def test_no_interact_skips_prompt(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [*OFFLINE, "--no-interact", "rules", "remove", "acme.com"])
        assert result.exit_code == 0
        assert "Cancelled." not in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestRulesClear:
    def test_clear(self, cli_runner: CliRunner) -> None:
        _add(cli_runner, "acme.com", "erin@acme.com")
        _add(cli_runner, "globex.com", "hank@globex.com")
        result = cli_runner.invoke(cli, [*OFFLINE, "--json", "rules", "clear", "--yes"])
        assert json.loads(result.stdout)["data"]["cleared"] == 2

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["rules", "clear", "--examples"])
        assert result.exit_code == 0
        assert "ccgate rules clear" in result.output


@pytest.mark.usefixtures("_isolated_project")
def test_isolated_project_has_no_remote_configuration() -> None:
    assert not any(name in os.environ for name in REMOTE_ENV_VARS)
    assert not CcgateSettings.from_cli().remote.configured
