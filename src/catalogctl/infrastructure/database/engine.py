"""Database engine setup.

SQLite is the default store (``{root}/.catalogctl/catalog.db``) with
foreign keys enabled; any SQLAlchemy URL can be configured instead.

SQLAlchemy Core (not ORM) is used: every operation is a short sequence
of statements on one connection, so there is no benefit from identity
maps or unit-of-work sessions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine, make_url

from catalogctl.infrastructure.database.schema import SORTED_TABLES, metadata, sort_counters


def default_database_url(root: Path) -> str:
    """SQLite URL for the catalog database under *root*."""
    return f"sqlite:///{root / '.catalogctl' / 'catalog.db'}"


def create_db_engine(url: str, *, timeout: float = 30.0) -> Engine:
    """Create an engine for *url* with bounded connect/statement waits."""
    parsed = make_url(url)
    connect_args: dict[str, Any] = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["timeout"] = timeout
    elif parsed.get_backend_name() == "postgresql":
        connect_args["connect_timeout"] = int(timeout)
        connect_args["options"] = f"-c statement_timeout={int(timeout * 1000)}"

    engine = create_engine(url, connect_args=connect_args)

    if parsed.get_backend_name() == "sqlite":

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if parsed.database and parsed.database != ":memory:":
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def init_database(url: str, *, timeout: float = 30.0) -> Engine:
    """Initialize the catalog database at *url*.

    Creates the parent directory for file-based SQLite URLs, all tables
    from :data:`schema.metadata`, and seeds one ``sort_counters`` row
    per sorted table.

    Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(url, timeout=timeout)
    metadata.create_all(engine)
    _seed_counters(engine)
    return engine


def _seed_counters(engine: Engine) -> None:
    """Insert initial counter rows for every sorted table if they don't exist."""
    with engine.begin() as conn:
        for table_name in SORTED_TABLES:
            row = conn.execute(
                select(sort_counters.c.table_name).where(sort_counters.c.table_name == table_name)
            ).first()
            if row is None:
                conn.execute(insert(sort_counters).values(table_name=table_name, next_value=1))
