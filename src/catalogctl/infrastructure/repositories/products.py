"""Product repository."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from catalogctl.domain.types import NodeRef, Taxonomy
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.database.errors import translate_errors
from catalogctl.infrastructure.query.composer import (
    ENTITY_FIELDS,
    NESTED_COMPONENT_FIELDS,
    SUMMARY_FIELDS,
    ProductQuery,
)
from catalogctl.infrastructure.query.mapper import Nested, ResultMap
from catalogctl.infrastructure.repositories.base import EntityRepository

DEFAULT_PRODUCT_NAME = "(Default Product)"
DEFAULT_PRODUCT_DESCRIPTION = "This is a system generated product."


class ProductRepository(EntityRepository):
    """Products sit under a DomainProduct and own Components."""

    level = Taxonomy.PRODUCT
    query = ProductQuery()
    updatable_fields = frozenset({"name", "description", "domain_product_id"})

    def create(
        self,
        name: str,
        *,
        domain_product_id: str,
        description: str | None = None,
    ) -> str:
        """Insert a product and relate it to its DomainProduct."""
        with translate_errors(f"An error occurred while creating the product {name} in the database"):
            parent_id = self.require_parent(Taxonomy.DOMAINPRODUCT, domain_product_id)
            product_id = self._insert(name, description)
            self._relations.create(
                NodeRef(id=parent_id, type=Taxonomy.DOMAINPRODUCT),
                NodeRef(id=product_id, type=Taxonomy.PRODUCT),
            )
        return product_id

    def create_default(self, domain_product_id: str) -> str:
        """Insert the system-generated placeholder product of a DomainProduct."""
        with translate_errors(
            f"An error occurred while creating '{DEFAULT_PRODUCT_NAME}' in the database"
        ):
            product_id = self._insert(
                DEFAULT_PRODUCT_NAME,
                DEFAULT_PRODUCT_DESCRIPTION,
                system_generated=True,
            )
            self._relations.create(
                NodeRef(id=domain_product_id, type=Taxonomy.DOMAINPRODUCT),
                NodeRef(id=product_id, type=Taxonomy.PRODUCT),
            )
        return product_id

    def update(self, product_id: str, changes: Mapping[str, Any]) -> None:
        """Sparse patch; moves the product when ``domain_product_id`` changes."""
        with translate_errors(f"An error occurred while updating product '{product_id}' in the database."):
            entity_changes = {k: v for k, v in changes.items() if k != "domain_product_id"}
            self._patch(product_id, self._patch_values(entity_changes))
            if "domain_product_id" in changes:
                self._move_under(product_id, changes["domain_product_id"])

    def result_maps(self, view: ViewOptions) -> list[ResultMap]:
        associations = tuple(
            Nested(name, name, f"{name}_")
            for name in ("domain_product", "domain")
            if view.includes(name)
        )
        collections = (
            (Nested("components", "components", "component_"),)
            if view.includes("components")
            else ()
        )
        return [
            ResultMap(
                "products",
                ENTITY_FIELDS,
                associations=associations,
                collections=collections,
            ),
            ResultMap("domain_product", SUMMARY_FIELDS),
            ResultMap("domain", SUMMARY_FIELDS),
            ResultMap("components", NESTED_COMPONENT_FIELDS),
        ]
