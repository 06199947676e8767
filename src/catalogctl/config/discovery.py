"""Locating ``catalogctl.toml``.

Resolution order: an explicit ``--config`` path, then the file named by
``CATALOGCTL_CONFIG``, then the nearest ``catalogctl.toml`` found walking
up from the starting directory.  The directory holding the file found by
walk-up is the catalog root.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "catalogctl.toml"
CONFIG_ENV_VAR = "CATALOGCTL_CONFIG"


class ConfigNotFoundError(FileNotFoundError):
    """An explicitly requested config file does not exist."""


def _ancestors(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """The config file for a catalog rooted at or above *start* (default: cwd).

    ``CATALOGCTL_CONFIG`` wins over walk-up; if it names a missing file
    no config is used at all.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None
    for directory in _ancestors(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: str | Path | None, start: Path | None = None) -> Path | None:
    """Apply the resolution order.

    Raises:
        ConfigNotFoundError: If *explicit* is given but is not a file.
    """
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigNotFoundError(f"Config file not found: {explicit}")
        return path
    return find_config(start)
