"""Catalog database engine, schema, and sort-id counters via SQLAlchemy Core."""

from catalogctl.infrastructure.database.counters import next_sort_id
from catalogctl.infrastructure.database.engine import (
    create_db_engine,
    default_database_url,
    init_database,
)
from catalogctl.infrastructure.database.schema import (
    components,
    domain_product_resource_types,
    domain_products,
    domains,
    metadata,
    products,
    relations,
    sort_counters,
)

__all__ = [
    "components",
    "create_db_engine",
    "default_database_url",
    "domain_product_resource_types",
    "domain_products",
    "domains",
    "init_database",
    "metadata",
    "next_sort_id",
    "products",
    "relations",
    "sort_counters",
]
