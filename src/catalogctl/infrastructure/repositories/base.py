"""EntityRepository — shared CRUD for the taxonomy level tables.

A repository is bound to one :class:`CatalogTransaction`; everything it
does runs on that transaction's connection, so a workflow composed of
several repositories commits or rolls back as one unit.  Repository
methods raise catalog error kinds and never bare driver errors.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import func, insert, select, true, update

from catalogctl.domain.errors import NotFoundError, ValidationError
from catalogctl.domain.ids import generate_id, slugify
from catalogctl.domain.types import PARENT_LEVEL, NodeRef, Taxonomy
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.database.counters import next_sort_id
from catalogctl.infrastructure.database.errors import translate_errors
from catalogctl.infrastructure.database.schema import (
    components,
    domain_products,
    domains,
    products,
)
from catalogctl.infrastructure.database.timestamps import now_iso
from catalogctl.infrastructure.query.filters import FilterSet
from catalogctl.infrastructure.query.mapper import ResultMap, RowMapper
from catalogctl.infrastructure.query.pagination import Cursor, Page, build_page
from catalogctl.infrastructure.repositories.relations import RelationRepository

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Table

    from catalogctl.infrastructure.catalog import CatalogTransaction
    from catalogctl.infrastructure.query.composer import HierarchyQuery

LEVEL_TABLES: dict[Taxonomy, Table] = {
    Taxonomy.DOMAIN: domains,
    Taxonomy.DOMAINPRODUCT: domain_products,
    Taxonomy.PRODUCT: products,
    Taxonomy.COMPONENT: components,
}

LEVEL_LABELS: dict[Taxonomy, str] = {
    Taxonomy.DOMAIN: "domain",
    Taxonomy.DOMAINPRODUCT: "domainProduct",
    Taxonomy.PRODUCT: "product",
    Taxonomy.COMPONENT: "component",
}


def clean_name(name: Any) -> str:
    """Trim *name*, rejecting empty values."""
    cleaned = str(name).strip() if name is not None else ""
    if not cleaned:
        raise ValidationError("name must not be empty")
    return cleaned


class EntityRepository:
    """Base for per-level repositories.

    Subclasses set :attr:`level`, :attr:`query` and
    :attr:`updatable_fields`, and implement :meth:`result_maps`.
    """

    level: ClassVar[Taxonomy]
    query: ClassVar[HierarchyQuery]
    updatable_fields: ClassVar[frozenset[str]] = frozenset({"name", "description"})

    def __init__(self, txn: CatalogTransaction) -> None:
        self._txn = txn
        self._conn = txn.conn
        self._log = txn.log
        self._relations = RelationRepository(txn)

    @property
    def table(self) -> Table:
        return LEVEL_TABLES[self.level]

    @property
    def label(self) -> str:
        return LEVEL_LABELS[self.level]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, entity_id: str, view: ViewOptions | None = None) -> dict[str, Any]:
        """Fetch one active entity with its related objects embedded.

        Raises:
            NotFoundError: If no active entity has *entity_id*.
        """
        view = view or ViewOptions()
        with translate_errors(
            f"An error occurred while retrieving {self.label} with id '{entity_id}' "
            "from the database."
        ):
            rows = self._conn.execute(self.query.one(view, entity_id)).mappings().all()
            if not rows:
                raise NotFoundError(
                    f"Unable to find {self.label} with id '{entity_id}'",
                    detail={"type": self.level.value, "id": entity_id},
                )
            entity = RowMapper(self.result_maps(view)).map_one(rows, self.query.name)
        return view.project(entity)

    def list(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        limit: int,
        cursor: Cursor | None = None,
        view: ViewOptions | None = None,
    ) -> Page:
        """One page of active entities, newest first.

        Unrecognised filter keys are ignored.
        """
        if limit < 1:
            raise ValidationError(f"limit must be a positive integer, got {limit}")
        view = view or ViewOptions()
        filter_set = FilterSet.from_query(self.normalize_filters(filters), self.query.filters)
        with translate_errors(
            f"An error occurred while retrieving {self.label}s from the database."
        ):
            stmt = self.query.page(view, filter_set, cursor=cursor, limit=limit)
            rows = self._conn.execute(stmt).mappings().all()
            results = RowMapper(self.result_maps(view)).map(rows, self.query.name)
        page = build_page(results, limit)
        return replace(page, results=[view.project(r) for r in page.results])

    def exists(self, entity_id: str) -> bool:
        """Whether an active entity with *entity_id* exists."""
        with translate_errors(f"An error occurred while looking up {self.label} '{entity_id}'"):
            row = self._conn.execute(
                select(func.count())
                .select_from(self.table)
                .where(self.id_clause(entity_id), self.table.c.is_active == true())
            ).scalar_one()
        return bool(row)

    def require(self, entity_id: str) -> None:
        if not self.exists(entity_id):
            raise NotFoundError(
                f"Unable to find {self.label} with id '{entity_id}'",
                detail={"type": self.level.value, "id": entity_id},
            )

    def count(self) -> int:
        """Number of active entities."""
        with translate_errors(
            f"Failed to retrieve the size of the {self.table.name} table from the database."
        ):
            return int(
                self._conn.execute(
                    select(func.count())
                    .select_from(self.table)
                    .where(self.table.c.is_active == true())
                ).scalar_one()
            )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def deactivate(self, entity_id: str) -> None:
        """Soft-delete: flip ``is_active`` off.  Rows are never removed."""
        with translate_errors(
            f"An error occurred while deactivating {self.label} '{entity_id}' in the database."
        ):
            result = self._conn.execute(
                update(self.table)
                .where(self.id_clause(entity_id), self.table.c.is_active == true())
                .values(is_active=False, last_modified_at=now_iso())
            )
            if result.rowcount == 0:
                raise NotFoundError(f"Unable to find {self.label} with id '{entity_id}'")
        self._log.debug("entity_deactivated", type=self.level.value, id=entity_id)

    def require_parent(self, level: Taxonomy, parent_id: Any) -> str:
        """Check that the active *level* entity *parent_id* exists."""
        if not parent_id or not str(parent_id).strip():
            raise ValidationError(f"{LEVEL_LABELS[level]}Id is required")
        parent_id = str(parent_id).strip()
        table = LEVEL_TABLES[level]
        row = self._conn.execute(
            select(table.c.id).where(table.c.id == parent_id, table.c.is_active == true())
        ).first()
        if row is None:
            raise NotFoundError(
                f"Unable to find {LEVEL_LABELS[level]} with id '{parent_id}'",
                detail={"type": level.value, "id": parent_id},
            )
        return parent_id

    def _insert(
        self,
        name: Any,
        description: str | None = None,
        *,
        system_generated: bool = False,
    ) -> str:
        """Insert a new row for this level and return its generated id."""
        name = clean_name(name)
        entity_id = generate_id(self.level)
        now = now_iso()
        self._conn.execute(
            insert(self.table).values(
                id=entity_id,
                name=name,
                slug_name=slugify(name),
                description=description.strip() if description else description,
                sort_id=next_sort_id(self._conn, self.table.name),
                is_active=True,
                is_system_generated=system_generated,
                created_at=now,
                last_modified_at=now,
            )
        )
        self._log.debug(
            "entity_created",
            type=self.level.value,
            id=entity_id,
            system_generated=system_generated,
        )
        return entity_id

    def _patch_values(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Column values for a sparse patch: only keys present in *changes*."""
        unknown = set(changes) - self.updatable_fields
        if unknown:
            raise ValidationError(
                f"Cannot update field(s) of {self.label}: {', '.join(sorted(unknown))}"
            )
        values: dict[str, Any] = {}
        if "name" in changes:
            values["name"] = clean_name(changes["name"])
            values["slug_name"] = slugify(values["name"])
        if "description" in changes:
            description = changes["description"]
            values["description"] = description.strip() if description else description
        values["last_modified_at"] = now_iso()
        return values

    def _patch(self, entity_id: str, values: Mapping[str, Any]) -> None:
        result = self._conn.execute(
            update(self.table)
            .where(self.id_clause(entity_id), self.table.c.is_active == true())
            .values(**values)
        )
        if result.rowcount == 0:
            raise NotFoundError(
                f"Unable to find {self.label} with id '{entity_id}'",
                detail={"type": self.level.value, "id": entity_id},
            )

    def _move_under(self, child_id: str, parent_id: Any) -> bool:
        """Re-point this entity's edge to *parent_id* one level up, creating it if missing.

        Returns True when the edge changed.
        """
        parent_level = PARENT_LEVEL[self.level]
        parent_id = self.require_parent(parent_level, parent_id)
        child = NodeRef(id=child_id, type=self.level)
        current = self._relations.parent_of(child)
        if current is None:
            self._relations.create(NodeRef(id=parent_id, type=parent_level), child)
            return True
        if current.id == parent_id:
            return False
        self._relations.reparent(child, parent_id)
        return True

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def id_clause(self, entity_id: str) -> ColumnElement[bool]:
        return self.table.c.id == entity_id

    def normalize_filters(self, filters: Mapping[str, Any] | None) -> Mapping[str, Any]:
        return filters or {}

    def result_maps(self, view: ViewOptions) -> list[ResultMap]:
        raise NotImplementedError
