"""Tests for the domain command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner

from catalogctl.cli import cli


def _json(cli_runner: CliRunner, *args: str) -> dict[str, Any]:
    result = cli_runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


@pytest.mark.usefixtures("_isolated_catalog")
class TestDomainCommands:
    def test_create(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "domain", "create", "Chemistry", "--description", "Lab")
        assert data["op"] == "create_domain"
        assert data["data"]["id"].startswith("dom_")
        assert data["data"]["slug_name"] == "chemistry"
        assert len(data["data"]["domain_products"]) == 1

    def test_create_human(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["domain", "create", "Chemistry"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "create_domain" in result.output

    def test_quiet_prints_id(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "domain", "create", "Chemistry"])
        assert result.exit_code == 0
        assert result.output.strip().startswith("dom_")

    def test_get_exclude_fields(self, cli_runner: CliRunner) -> None:
        created = _json(cli_runner, "domain", "create", "Chemistry")["data"]
        data = _json(
            cli_runner, "domain", "get", created["id"], "--exclude-fields", "domain_products"
        )
        assert "domain_products" not in data["data"]

    def test_get_fields_projects_scalars(self, cli_runner: CliRunner) -> None:
        created = _json(cli_runner, "domain", "create", "Chemistry")["data"]
        data = _json(cli_runner, "domain", "get", created["id"], "--fields", "name")
        assert data["data"] == {"id": created["id"], "name": "Chemistry"}

    def test_fields_and_exclude_conflict(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["domain", "get", "dom_x", "--fields", "a", "--exclude-fields", "b"]
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_get_missing_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "domain", "get", "dom_missing"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "NOT_FOUND"

    def test_list_pages(self, cli_runner: CliRunner) -> None:
        for name in ("A", "B", "C"):
            _json(cli_runner, "domain", "create", name)
        first = _json(cli_runner, "domain", "list", "--limit", "2")
        assert [d["name"] for d in first["data"]["results"]] == ["C", "B"]
        cursor = first["data"]["next_offset"]
        second = _json(cli_runner, "domain", "list", "--limit", "2", "--cursor", cursor)
        assert [d["name"] for d in second["data"]["results"]] == ["A"]
        assert "next_offset" not in second["data"]

    def test_list_name_filter(self, cli_runner: CliRunner) -> None:
        _json(cli_runner, "domain", "create", "Chemistry")
        _json(cli_runner, "domain", "create", "Physics")
        data = _json(cli_runner, "domain", "list", "--name", "chem")
        assert [d["name"] for d in data["data"]["results"]] == ["Chemistry"]

    def test_list_rejects_zero_limit(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["domain", "list", "--limit", "0"])
        assert result.exit_code == 2

    def test_update(self, cli_runner: CliRunner) -> None:
        created = _json(cli_runner, "domain", "create", "Chemistry")["data"]
        data = _json(cli_runner, "domain", "update", created["id"], "--name", "Physics")
        assert data["data"]["slug_name"] == "physics"

    def test_update_without_changes(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["domain", "update", "dom_x"])
        assert result.exit_code == 1
        assert "No changes specified" in result.output

    def test_deactivate(self, cli_runner: CliRunner) -> None:
        created = _json(cli_runner, "domain", "create", "Chemistry")["data"]
        data = _json(cli_runner, "domain", "deactivate", created["id"])
        assert data["data"]["is_active"] is False
        listed = _json(cli_runner, "domain", "list")
        assert listed["data"]["count"] == 0
