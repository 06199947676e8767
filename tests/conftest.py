"""Shared pytest fixtures and test helpers for catalogctl tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from catalogctl.config.settings import CatalogSettings
from catalogctl.infrastructure.catalog import Catalog
from catalogctl.infrastructure.database.engine import default_database_url, init_database


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CATALOGCTL_* environment out of the tests."""
    monkeypatch.delenv("CATALOGCTL_CONFIG", raising=False)
    monkeypatch.delenv("CATALOGCTL_DATABASE__URL", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created and counters seeded."""
    engine = init_database(default_database_url(tmp_path))
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Temporary catalog directory (the SQLite file lives under .catalogctl/)."""
    return tmp_path


@pytest.fixture
def catalog(catalog_root: Path) -> Iterator[Catalog]:
    """Fully initialized catalog on a temp directory."""
    settings = CatalogSettings.from_cli(catalog_root=catalog_root)
    c = Catalog(settings)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def _isolated_catalog(catalog_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp catalog root so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_catalog")`` on command
    test classes.
    """
    monkeypatch.chdir(catalog_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and repository test modules)
# ---------------------------------------------------------------------------


def create_domain(catalog: Catalog, name: str, **kwargs: Any) -> dict[str, Any]:
    """Create a Domain via DomainService, asserting success."""
    from catalogctl.services.domains import DomainService

    result = DomainService(catalog).create(name, **kwargs)
    assert result.ok, result.error
    return result.data


def create_domain_product(
    catalog: Catalog, name: str, domain_id: str, **kwargs: Any
) -> dict[str, Any]:
    """Create a DomainProduct via DomainProductService, asserting success."""
    from catalogctl.services.domain_products import DomainProductService

    result = DomainProductService(catalog).create(name, domain_id=domain_id, **kwargs)
    assert result.ok, result.error
    return result.data


def create_product(
    catalog: Catalog, name: str, domain_product_id: str, **kwargs: Any
) -> dict[str, Any]:
    """Create a Product via ProductService, asserting success."""
    from catalogctl.services.products import ProductService

    result = ProductService(catalog).create(name, domain_product_id=domain_product_id, **kwargs)
    assert result.ok, result.error
    return result.data


def create_component(
    catalog: Catalog,
    component_id: str,
    product_id: str,
    *,
    type: str = "LIBRARY",
    name: str | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Create a Component via ComponentService, asserting success."""
    from catalogctl.services.components import ComponentService

    result = ComponentService(catalog).create(
        component_id,
        type=type,
        name=name or component_id,
        product_id=product_id,
        **kwargs,
    )
    assert result.ok, result.error
    return result.data
