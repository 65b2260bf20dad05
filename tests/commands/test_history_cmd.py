"""Tests for the history command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from curator.cli import cli
from tests.conftest import analyzed_note


@pytest.mark.usefixtures("_isolated_vault")
class TestHistoryCommand:
    def _file(self, cli_runner: CliRunner, vault_root: Path, name: str) -> str:
        (vault_root / "inbox" / name).write_text(analyzed_note(), encoding="utf-8")
        return cli_runner.invoke(cli, ["-q", "file"]).stdout.strip()

    def test_empty(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["history"])
        assert result.exit_code == 0
        assert "No undoable filing sessions." in result.stdout

    def test_lists_sessions_newest_first(self, cli_runner: CliRunner, vault_root: Path) -> None:
        older = self._file(cli_runner, vault_root, "a.md")
        newer = self._file(cli_runner, vault_root, "b.md")

        result = cli_runner.invoke(cli, ["-q", "history"])
        assert result.stdout.split() == [newer, older]

    def test_limit(self, cli_runner: CliRunner, vault_root: Path) -> None:
        self._file(cli_runner, vault_root, "a.md")
        newer = self._file(cli_runner, vault_root, "b.md")
        result = cli_runner.invoke(cli, ["--json", "history", "--limit", "1"])
        sessions = json.loads(result.stdout)["data"]["sessions"]
        assert [s["session_id"] for s in sessions] == [newer]

    def test_undone_sessions_hidden(self, cli_runner: CliRunner, vault_root: Path) -> None:
        session_id = self._file(cli_runner, vault_root, "a.md")
        cli_runner.invoke(cli, ["undo", session_id])
        result = cli_runner.invoke(cli, ["history"])
        assert "No undoable filing sessions." in result.stdout

    def test_single_session(self, cli_runner: CliRunner, vault_root: Path) -> None:
        session_id = self._file(cli_runner, vault_root, "a.md")
        result = cli_runner.invoke(cli, ["history", "--session", session_id])
        assert result.exit_code == 0
        assert "file: inbox/a.md -> projects/a.md" in result.stdout

    def test_unknown_session(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["history", "--session", "missing"])
        assert result.exit_code == 1
