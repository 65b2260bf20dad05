"""Tests for the learn command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from curator.cli import cli

GARDEN_TEXT = "Tomato seedlings need warmth. Tomato varieties and compost schedules.\n"


@pytest.mark.usefixtures("_isolated_vault")
class TestLearnCorrect:
    def test_records_correction(self, cli_runner: CliRunner, vault_root: Path) -> None:
        (vault_root / "garden").mkdir()
        (vault_root / "garden" / "tomato.md").write_text(GARDEN_TEXT)

        result = cli_runner.invoke(
            cli, ["--json", "learn", "correct", "projects/tomato.md", "garden/tomato.md"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["recorded"] is True
        assert data["corrected_folder"] == "garden"
        assert (vault_root / ".curator" / "learning-data.json").is_file()

    def test_missing_note(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "learn", "correct", "a/x.md", "b/x.md"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NOTE_NOT_FOUND"


@pytest.mark.usefixtures("_isolated_vault")
class TestLearnHintsAndStats:
    @pytest.fixture(autouse=True)
    def _teach(self, cli_runner: CliRunner, vault_root: Path, _isolated_vault: None) -> None:
        (vault_root / "garden").mkdir()
        (vault_root / "garden" / "tomato.md").write_text(GARDEN_TEXT)
        taught = cli_runner.invoke(
            cli, ["learn", "correct", "projects/tomato.md", "garden/tomato.md"]
        )
        assert taught.exit_code == 0, taught.output

    def test_hints(self, cli_runner: CliRunner, vault_root: Path) -> None:
        (vault_root / "inbox" / "new.md").write_text("Staking tomato plants\n")
        result = cli_runner.invoke(cli, ["learn", "hints", "inbox/new.md"])
        assert result.exit_code == 0
        assert "suggested_folder: garden" in result.stdout

    def test_hints_missing_note(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["learn", "hints", "inbox/none.md"])
        assert result.exit_code == 1

    def test_stats(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "learn", "stats"])
        data = json.loads(result.stdout)["data"]
        assert data["total_corrections"] == 1
        assert data["folders_learned"] == 1

    def test_reset_cancelled(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["learn", "reset"], input="n\n")
        assert result.exit_code == 0
        assert "Cancelled." in result.stdout
        stats = cli_runner.invoke(cli, ["--json", "learn", "stats"])
        assert json.loads(stats.stdout)["data"]["total_corrections"] == 1

    def test_reset_confirmed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["learn", "reset"], input="y\n")
        assert result.exit_code == 0
        stats = cli_runner.invoke(cli, ["--json", "learn", "stats"])
        assert json.loads(stats.stdout)["data"]["total_corrections"] == 0

    def test_reset_yes(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "learn", "reset", "--yes"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "OK: learning_reset"
