"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  (CLI flags passed by Click)
  2. Env vars     (``CATALOGCTL_*`` prefix, ``__`` for nested sections)
  3. TOML file    (``catalogctl.toml`` discovered via walk-up)
  4. Code defaults baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from catalogctl.config.discovery import ConfigNotFoundError, resolve_config
from catalogctl.config.models import DatabaseConfig, PaginationConfig
from catalogctl.infrastructure.database.engine import default_database_url


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``catalogctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CatalogSettings(BaseSettings):
    """Unified settings for the catalogctl CLI and services.

    Attributes:
        catalog_root: Directory holding ``catalogctl.toml`` (or CWD if no
            config was found); the default SQLite file lives beneath it.
        config_path: The TOML file actually read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CATALOGCTL_",
        "env_nested_delimiter": "__",
    }

    catalog_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)

    @property
    def database_url(self) -> str:
        """Configured URL, or the SQLite file under :attr:`catalog_root`."""
        return self.database.url or default_database_url(self.catalog_root)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        catalog_root: Path | None = None,
        **cli_flags: Any,
    ) -> CatalogSettings:
        """Construct settings from a CLI invocation.

        Discovers ``catalogctl.toml`` via walk-up (or explicit
        *config_path*), resolves *catalog_root* from the config file's
        parent directory, and merges CLI flags as highest-priority
        overrides.
        """
        try:
            toml_path = resolve_config(config_path, catalog_root)
        except ConfigNotFoundError as exc:
            raise click.ClickException(str(exc)) from exc

        resolved_root = catalog_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                catalog_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
