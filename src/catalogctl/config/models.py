"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, catalogctl.toml only contains
overrides.  An empty (or missing) file yields a working SQLite catalog.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # None means the SQLite file under the catalog root.
    url: str | None = None
    # Log SQL statements through the catalogctl logging setup (stderr).
    echo: bool = False
    timeout_seconds: int = Field(default=30, ge=1)


class PaginationConfig(BaseModel):
    """[pagination] section."""

    model_config = {"frozen": True}

    default_limit: int = Field(default=50, ge=1)
    max_limit: int = Field(default=500, ge=1)
