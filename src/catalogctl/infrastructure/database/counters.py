"""Monotonic ``sort_id`` allocation.

Uses the ``sort_counters`` table so that sort ids are strictly
increasing with insertion order, unique per table, and portable across
SQLite and PostgreSQL.

The caller owns the transaction — pass a ``Connection`` obtained from
``engine.begin()`` so the counter increment participates in the same
atomic transaction as the insert it numbers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from catalogctl.infrastructure.database.schema import SORTED_TABLES, sort_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


def next_sort_id(conn: Connection, table_name: str) -> int:
    """Claim the next sort id for *table_name*.

    The increment runs before the read so the counter row is locked for
    the rest of the transaction; concurrent writers serialize on it.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        table_name: One of :data:`schema.SORTED_TABLES`.

    Returns:
        The claimed sort id (1 for the first row of a table).

    Raises:
        ValueError: If *table_name* has no counter.
    """
    if table_name not in SORTED_TABLES:
        msg = f"Unknown sorted table: {table_name!r}. Expected one of {sorted(SORTED_TABLES)}"
        raise ValueError(msg)

    conn.execute(
        update(sort_counters)
        .where(sort_counters.c.table_name == table_name)
        .values(next_value=sort_counters.c.next_value + 1)
    )
    row = conn.execute(
        select(sort_counters.c.next_value).where(sort_counters.c.table_name == table_name)
    ).one()
    return int(row.next_value) - 1
