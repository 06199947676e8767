"""Tests for CatalogSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from catalogctl.config.settings import CatalogSettings


class TestCatalogSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        assert settings.catalog_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.database.url is None
        assert settings.database.timeout_seconds == 30
        assert settings.pagination.default_limit == 50
        assert settings.pagination.max_limit == 500

    def test_default_database_url(self, tmp_path: Path) -> None:
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        assert settings.database_url.startswith("sqlite:///")
        assert str(tmp_path) in settings.database_url

    def test_frozen(self, tmp_path: Path) -> None:
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        with pytest.raises(ValidationError):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_sections(self, tmp_path: Path) -> None:
        toml = tmp_path / "catalogctl.toml"
        toml.write_text(
            '[database]\nurl = "sqlite:///elsewhere.db"\n[pagination]\ndefault_limit = 20\n'
        )
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        assert settings.database_url == "sqlite:///elsewhere.db"
        assert settings.pagination.default_limit == 20
        assert settings.pagination.max_limit == 500  # default preserved

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "catalogctl.toml").write_text("")
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        assert settings.pagination.default_limit == 50

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "catalogctl.toml").write_text("[database\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            CatalogSettings.from_cli(catalog_root=tmp_path)

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[pagination]\nmax_limit = 100\n")
        settings = CatalogSettings.from_cli(config_path=str(custom), catalog_root=tmp_path)
        assert settings.pagination.max_limit == 100
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            CatalogSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_root_from_config_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "catalogctl.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = CatalogSettings.from_cli()
        assert settings.catalog_root.resolve() == tmp_path.resolve()


class TestEnvAndFlags:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "catalogctl.toml").write_text("[pagination]\ndefault_limit = 20\n")
        monkeypatch.setenv("CATALOGCTL_PAGINATION__DEFAULT_LIMIT", "10")
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        assert settings.pagination.default_limit == 10

    def test_env_database_url(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CATALOGCTL_DATABASE__URL", "sqlite:///env.db")
        settings = CatalogSettings.from_cli(catalog_root=tmp_path)
        assert settings.database_url == "sqlite:///env.db"

    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = CatalogSettings.from_cli(
            catalog_root=tmp_path, json_output=True, quiet=True, verbose=True
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_invalid_pagination(self, tmp_path: Path) -> None:
        (tmp_path / "catalogctl.toml").write_text("[pagination]\ndefault_limit = 0\n")
        with pytest.raises(ValidationError):
            CatalogSettings.from_cli(catalog_root=tmp_path)
