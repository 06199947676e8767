"""Relation store — polymorphic parent → child edges.

Edges are the only link between taxonomy levels.  A child has at most
one parent (``uq_relations_child``); moving a child rewrites its edge
in place rather than deleting and re-inserting it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from catalogctl.domain.errors import ConflictError, NotFoundError
from catalogctl.domain.types import NodeRef, Relation, Taxonomy
from catalogctl.infrastructure.database.errors import translate_errors
from catalogctl.infrastructure.database.schema import relations
from catalogctl.infrastructure.database.timestamps import now_iso

if TYPE_CHECKING:
    from catalogctl.infrastructure.catalog import CatalogTransaction


class RelationRepository:
    """Reads and writes ``relations`` rows on the transaction's connection."""

    def __init__(self, txn: CatalogTransaction) -> None:
        self._conn = txn.conn
        self._log = txn.log

    def create(self, parent: NodeRef, child: NodeRef) -> Relation:
        """Insert the edge *parent* → *child*.

        Raises:
            ConflictError: If *child* already has a parent edge.
            DependencyError: On any other storage failure.
        """
        with translate_errors(
            f"An error occurred while relating {child.type} '{child.id}' "
            f"to {parent.type} '{parent.id}'",
            on_unique=ConflictError,
        ):
            self._conn.execute(
                insert(relations).values(
                    parent_id=parent.id,
                    parent_type=parent.type.value,
                    child_id=child.id,
                    child_type=child.type.value,
                    created_at=now_iso(),
                )
            )
        self._log.debug(
            "relation_created",
            parent_id=parent.id,
            parent_type=parent.type.value,
            child_id=child.id,
            child_type=child.type.value,
        )
        return Relation(parent=parent, child=child)

    def parent_of(self, child: NodeRef) -> NodeRef | None:
        """The parent endpoint of *child*'s edge, if it has one."""
        with translate_errors(f"An error occurred while reading the parent of '{child.id}'"):
            row = self._conn.execute(
                select(relations.c.parent_id, relations.c.parent_type).where(
                    relations.c.child_id == child.id,
                    relations.c.child_type == child.type.value,
                )
            ).first()
        if row is None:
            return None
        return NodeRef(id=str(row.parent_id), type=Taxonomy(row.parent_type))

    def reparent(
        self,
        child: NodeRef,
        new_parent_id: str | None = None,
        *,
        new_child_id: str | None = None,
    ) -> None:
        """Re-point *child*'s edge in place.

        Updates ``parent_id`` to *new_parent_id* and/or ``child_id`` to
        *new_child_id* (a component whose composite key changed).

        Raises:
            NotFoundError: If *child* has no edge.
            ConflictError: If *new_child_id* already has an edge.
        """
        values: dict[str, str] = {}
        if new_parent_id is not None:
            values["parent_id"] = new_parent_id
        if new_child_id is not None:
            values["child_id"] = new_child_id
        if not values:
            return

        with translate_errors(
            f"An error occurred while re-pointing the relation of '{child.id}'",
            on_unique=ConflictError,
        ):
            result = self._conn.execute(
                update(relations)
                .where(
                    relations.c.child_id == child.id,
                    relations.c.child_type == child.type.value,
                )
                .values(**values)
            )
        if result.rowcount == 0:
            raise NotFoundError(f"Unable to find a relation for {child.type} '{child.id}'")
        self._log.debug(
            "relation_reparented",
            child_id=child.id,
            new_parent_id=new_parent_id,
            new_child_id=new_child_id,
        )
