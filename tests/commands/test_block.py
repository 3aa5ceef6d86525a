"""Tests for the block and validate CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from bulkblock.cli import cli
from bulkblock.commands.block import complete_expiry


def _register(cli_runner: CliRunner, *names: str) -> None:
    result = cli_runner.invoke(cli, ["account", "add", *names])
    assert result.exit_code == 0, result.output


@pytest.mark.usefixtures("_isolated_site")
class TestBlockCommand:
    def test_blocks_from_stdin(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice", "Bob")
        result = cli_runner.invoke(
            cli, ["--json", "block", "-", "--reason", "Spam"], input="alice\nbob\n"
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "bulk_block"
        assert data["data"]["success_count"] == 2
        assert [item["status"] for item in data["data"]["items"]] == ["blocked", "blocked"]

    def test_blocks_from_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        _register(cli_runner, "Alice")
        source = tmp_path / "list.txt"
        source.write_text("  Alice  \n\n")
        result = cli_runner.invoke(
            cli,
            ["block", str(source), "--reason", "Vandalism", "--expiry", "3 days"],
        )
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "success_count: 1" in result.output

    def test_rejected_batch_exits_1(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        result = cli_runner.invoke(
            cli, ["block", "-", "--reason", "Spam"], input="Alice\nGhost\nBad#Name\n"
        )
        assert result.exit_code == 1
        assert "User Ghost does not exist." in result.output
        assert "Invalid username: Bad#Name" in result.output

        listing = cli_runner.invoke(cli, ["--json", "blocks"])
        assert json.loads(listing.output)["data"]["count"] == 0

    def test_rejected_batch_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "block", "-", "--reason", "Spam"], input="\n")
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "BATCH_REJECTED"
        assert data["data"]["errors"] == ["No usernames were supplied."]

    def test_already_blocked(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        first = cli_runner.invoke(cli, ["block", "-", "--reason", "Spam"], input="Alice")
        assert first.exit_code == 0, first.output
        second = cli_runner.invoke(cli, ["block", "-", "--reason", "Spam"], input="Alice")
        assert second.exit_code == 1
        assert "User Alice is already blocked." in second.output

    def test_reason_required(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["block", "-"], input="Alice")
        assert result.exit_code == 2
        assert "--reason" in result.output

    def test_blank_reason_is_invalid_request(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        result = cli_runner.invoke(
            cli, ["--json", "block", "-", "--reason", "  "], input="Alice"
        )
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "INVALID_REQUEST"

    def test_performer_recorded_in_log(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        cli_runner.invoke(
            cli,
            ["block", "-", "--reason", "Spam", "--performer", "Admin", "--expiry", "1 week"],
            input="Alice",
        )
        log = json.loads(cli_runner.invoke(cli, ["--json", "log"]).output)
        [entry] = log["data"]["items"]
        assert entry["performer"] == "Admin"
        assert entry["comment"] == "Spam"
        assert entry["params"] == {"duration": "1 week", "flags": ""}

    def test_quiet_lists_blocked_names(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice", "Bob")
        result = cli_runner.invoke(
            cli, ["-q", "block", "-", "--reason", "Spam"], input="Alice\nBob"
        )
        assert result.exit_code == 0
        assert result.output.strip().splitlines() == ["Alice", "Bob"]

    def test_verbose_shows_telemetry(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        result = cli_runner.invoke(cli, ["-v", "block", "-", "--reason", "Spam"], input="Alice")
        assert result.exit_code == 0
        assert "BulkBlockService.block" in result.output


@pytest.mark.usefixtures("_isolated_site")
class TestValidateCommand:
    def test_valid_list(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        result = cli_runner.invoke(cli, ["--json", "validate", "-"], input="alice")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["data"]["valid"] is True
        assert data["data"]["identifiers"] == ["Alice"]

    def test_invalid_list_writes_nothing(self, cli_runner: CliRunner) -> None:
        _register(cli_runner, "Alice")
        result = cli_runner.invoke(cli, ["validate", "-"], input="Alice\nGhost")
        assert result.exit_code == 1
        assert "User Ghost does not exist." in result.output
        listing = cli_runner.invoke(cli, ["--json", "blocks"])
        assert json.loads(listing.output)["data"]["count"] == 0

    def test_missing_file(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["validate", "does-not-exist.txt"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_site")
class TestExpiryCompletion:
    def test_defaults(self) -> None:
        assert complete_expiry(None, None, "1 w") == ["1 week"]

    def test_site_options(self, tmp_path: Path) -> None:
        (tmp_path / "bulkblock.toml").write_text(
            '[block]\nexpiry_options = ["1 day", "2 days", "never"]\n'
        )
        assert complete_expiry(None, None, "") == ["1 day", "2 days", "never"]
        assert complete_expiry(None, None, "2") == ["2 days"]
