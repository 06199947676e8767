"""Tests for the init command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from catalogctl.cli import cli


@pytest.mark.usefixtures("_isolated_catalog")
class TestInitCommand:
    def test_creates_database(self, cli_runner: CliRunner, catalog_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["counts"]["domains"] == 0
        assert (catalog_root / ".catalogctl").is_dir()

    def test_idempotent(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["init"]).exit_code == 0
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_config_database_url(self, cli_runner: CliRunner, catalog_root: Path) -> None:
        db = catalog_root / "custom.db"
        (catalog_root / "catalogctl.toml").write_text(f'[database]\nurl = "sqlite:///{db}"\n')
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 0
        assert db.is_file()

    def test_missing_explicit_config(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-c", "nope.toml", "init"])
        assert result.exit_code != 0
        assert "Config file not found" in result.output

    def test_root_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        elsewhere = tmp_path / "elsewhere"
        result = cli_runner.invoke(cli, ["--root", str(elsewhere), "init"])
        assert result.exit_code == 0
        assert (elsewhere / ".catalogctl" / "catalog.db").is_file()
