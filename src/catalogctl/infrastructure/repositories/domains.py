"""Domain repository."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from catalogctl.domain.types import Taxonomy
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.database.errors import translate_errors
from catalogctl.infrastructure.query.composer import ENTITY_FIELDS, NESTED_FIELDS, DomainQuery
from catalogctl.infrastructure.query.mapper import Nested, ResultMap
from catalogctl.infrastructure.repositories.base import EntityRepository
from catalogctl.infrastructure.repositories.domain_products import DomainProductRepository


class DomainRepository(EntityRepository):
    """Domains are the roots of the taxonomy."""

    level = Taxonomy.DOMAIN
    query = DomainQuery()

    def create(self, name: str, *, description: str | None = None) -> str:
        """Insert a Domain plus its default DomainProduct and default Product."""
        with translate_errors("An error occurred while creating the domain in the database"):
            domain_id = self._insert(name, description)
            DomainProductRepository(self._txn).create_default(domain_id)
        return domain_id

    def update(self, domain_id: str, changes: Mapping[str, Any]) -> None:
        with translate_errors(f"An error occurred while updating domain '{domain_id}' in the database."):
            self._patch(domain_id, self._patch_values(changes))

    def result_maps(self, view: ViewOptions) -> list[ResultMap]:
        collections = (
            (Nested("domain_products", "domain_products", "domain_product_"),)
            if view.includes("domain_products")
            else ()
        )
        return [
            ResultMap("domains", ENTITY_FIELDS, collections=collections),
            ResultMap(
                "domain_products",
                NESTED_FIELDS,
                collections=(Nested("products", "products", "product_"),),
            ),
            ResultMap("products", NESTED_FIELDS),
        ]
