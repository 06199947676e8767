"""Catalog — the context object with transaction coordination.

The Catalog is the single dependency injected into every service. It
owns the database engine, the resolved settings, and a bound structlog
logger; nothing in the package reaches for module-level singletons.
:meth:`Catalog.transaction` wraps a multi-statement write in one
database transaction on one connection:

- BEGIN on entry (``engine.begin()``).
- COMMIT when the block exits normally.
- ROLLBACK then re-raise when anything escapes the block, with driver
  errors classified into catalog error kinds.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from catalogctl.infrastructure.database.engine import init_database
from catalogctl.infrastructure.database.errors import translate_errors

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from catalogctl.config.settings import CatalogSettings


@dataclass
class CatalogTransaction:
    """Active unit of work: one connection plus its bound logger.

    Repositories are constructed from a transaction so every statement
    they issue lands on the same connection.
    """

    conn: Connection
    log: Any
    settings: CatalogSettings


class Catalog:
    """Repository context encapsulating database access.

    Constructed once at CLI startup from :class:`CatalogSettings` and
    stored in ``click.Context.obj``.  Services receive the Catalog via
    their :class:`BaseService` constructor.
    """

    def __init__(self, settings: CatalogSettings) -> None:
        self._settings = settings
        db = settings.database
        self._engine: Engine = init_database(
            settings.database_url,
            timeout=db.timeout_seconds,
        )
        self._log = structlog.get_logger("catalogctl").bind(
            database=self._engine.url.render_as_string(hide_password=True)
        )

    @property
    def root(self) -> Path:
        """The catalog root directory."""
        return self._settings.catalog_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> CatalogSettings:
        """The resolved settings for this catalog."""
        return self._settings

    @property
    def log(self) -> Any:
        """Logger bound with catalog-wide context."""
        return self._log

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[CatalogTransaction]:
        """Run the block inside one database transaction.

        Commits on success; on any exception the transaction is rolled
        back and the error re-raised, already-classified catalog errors
        unchanged and everything else as a catalog error kind.

        Usage::

            with catalog.transaction() as txn:
                domain_id = DomainRepository(txn).create(name="Chemistry")
                # Domain, default DomainProduct and default Product
                # commit together or not at all.
        """
        log = self._log.bind(txn=uuid.uuid4().hex[:8])
        with translate_errors("An error occurred while committing the transaction"):
            with self._engine.begin() as conn:
                log.debug("transaction_begin")
                try:
                    yield CatalogTransaction(conn=conn, log=log, settings=self._settings)
                except BaseException:
                    log.debug("transaction_rollback")
                    raise
            log.debug("transaction_commit")

    @contextmanager
    def connect(self) -> Iterator[CatalogTransaction]:
        """Read-only access without an explicit transaction boundary."""
        with translate_errors("An error occurred while reading from the database"):
            with self._engine.connect() as conn:
                yield CatalogTransaction(conn=conn, log=self._log, settings=self._settings)
