"""SQLAlchemy Core table definitions for the catalog database.

Levels never reference their parent directly: the ``relations`` table
is the only link between Domains, DomainProducts, Products and
Components.  Timestamps are stored as ISO 8601 text.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
    false,
    true,
)

metadata = MetaData()


def _entity_columns() -> list[Column]:
    """Columns shared by Domain, DomainProduct and Product tables."""
    return [
        Column("id", Text, primary_key=True),
        Column("name", Text, nullable=False),
        Column("slug_name", Text, nullable=False),
        Column("description", Text),
        Column("sort_id", Integer, nullable=False, unique=True),
        Column("is_active", Boolean, nullable=False, default=True, server_default=true()),
        Column(
            "is_system_generated",
            Boolean,
            nullable=False,
            default=False,
            server_default=false(),
        ),
        Column("created_at", Text, nullable=False),
        Column("last_modified_at", Text, nullable=False),
    ]


domains = Table("domains", metadata, *_entity_columns())

domain_products = Table("domain_products", metadata, *_entity_columns())

products = Table("products", metadata, *_entity_columns())

components = Table(
    "components",
    metadata,
    Column("component_id", Text, nullable=False),
    Column("type", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("slug_name", Text, nullable=False),
    Column("description", Text),
    Column("sort_id", Integer, nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False, default=True, server_default=true()),
    Column("created_at", Text, nullable=False),
    Column("last_modified_at", Text, nullable=False),
    UniqueConstraint("component_id", "type", name="uq_components_key"),
)

relations = Table(
    "relations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("parent_id", Text, nullable=False),
    Column("parent_type", Text, nullable=False),
    Column("child_id", Text, nullable=False),
    Column("child_type", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    # Single-parent tree: one edge per child.
    UniqueConstraint("child_id", "child_type", name="uq_relations_child"),
)

domain_product_resource_types = Table(
    "domain_product_resource_types",
    metadata,
    Column("domain_product_id", Text, ForeignKey("domain_products.id"), nullable=False),
    Column("resource_type_name", Text, nullable=False),
    UniqueConstraint("domain_product_id", "resource_type_name"),
)

sort_counters = Table(
    "sort_counters",
    metadata,
    Column("table_name", Text, primary_key=True),
    Column("next_value", Integer, nullable=False, default=1, server_default="1"),
)

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

# Slugs are unique among user-authored rows only; every Domain gets a
# "(Default Domain-Product)" and every DomainProduct a "(Default Product)".
for _table in (domains, domain_products, products):
    Index(
        f"uq_{_table.name}_slug_name",
        _table.c.slug_name,
        unique=True,
        sqlite_where=_table.c.is_system_generated == false(),
        postgresql_where=_table.c.is_system_generated == false(),
    )
    Index(f"ix_{_table.name}_is_active", _table.c.is_active)

Index("ix_components_is_active", components.c.is_active)
Index("ix_relations_parent", relations.c.parent_id, relations.c.parent_type)
Index("ix_dprt_resource_type", domain_product_resource_types.c.resource_type_name)

# Tables whose rows draw a sort_id from sort_counters.
SORTED_TABLES: tuple[str, ...] = ("domains", "domain_products", "products", "components")
