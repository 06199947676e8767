"""DomainProduct repository, including resource-type associations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete, insert, select, true

from catalogctl.domain.errors import ValidationError
from catalogctl.domain.resource_types import reconcile
from catalogctl.domain.types import NodeRef, Taxonomy
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.database.errors import translate_errors
from catalogctl.infrastructure.database.schema import (
    domain_product_resource_types,
    domain_products,
)
from catalogctl.infrastructure.query.composer import (
    ENTITY_FIELDS,
    NESTED_FIELDS,
    SUMMARY_FIELDS,
    DomainProductQuery,
)
from catalogctl.infrastructure.query.mapper import Nested, ResultMap
from catalogctl.infrastructure.repositories.base import EntityRepository
from catalogctl.infrastructure.repositories.products import ProductRepository

DEFAULT_DOMAIN_PRODUCT_NAME = "(Default Domain-Product)"
DEFAULT_DOMAIN_PRODUCT_DESCRIPTION = "This is a system generated domainProduct."


class DomainProductRepository(EntityRepository):
    """DomainProducts sit under a Domain, own Products and resource types."""

    level = Taxonomy.DOMAINPRODUCT
    query = DomainProductQuery()
    updatable_fields = frozenset({"name", "description", "domain_id"})

    def create(
        self,
        name: str,
        *,
        domain_id: str,
        description: str | None = None,
        resource_types: Iterable[str] | None = None,
    ) -> str:
        """Insert a DomainProduct, its Domain edge, its resource types, and its default Product."""
        with translate_errors(
            f"An error occurred while creating the domainProduct {name} in the database"
        ):
            parent_id = self.require_parent(Taxonomy.DOMAIN, domain_id)
            domain_product_id = self._insert(name, description)
            self._relations.create(
                NodeRef(id=parent_id, type=Taxonomy.DOMAIN),
                NodeRef(id=domain_product_id, type=Taxonomy.DOMAINPRODUCT),
            )
            to_add, _ = reconcile(resource_types, None)
            if to_add:
                self._ensure_unassociated(domain_product_id, to_add)
                self._associate(domain_product_id, to_add)
            ProductRepository(self._txn).create_default(domain_product_id)
        return domain_product_id

    def create_default(self, domain_id: str) -> str:
        """Insert the system-generated placeholder DomainProduct of a Domain.

        Cascades to the DomainProduct's own default Product.
        """
        with translate_errors(
            f"An error occurred while creating '{DEFAULT_DOMAIN_PRODUCT_NAME}' in the database"
        ):
            domain_product_id = self._insert(
                DEFAULT_DOMAIN_PRODUCT_NAME,
                DEFAULT_DOMAIN_PRODUCT_DESCRIPTION,
                system_generated=True,
            )
            self._relations.create(
                NodeRef(id=domain_id, type=Taxonomy.DOMAIN),
                NodeRef(id=domain_product_id, type=Taxonomy.DOMAINPRODUCT),
            )
            ProductRepository(self._txn).create_default(domain_product_id)
        return domain_product_id

    def update(self, domain_product_id: str, changes: Mapping[str, Any]) -> None:
        """Sparse patch; moves the DomainProduct when ``domain_id`` changes."""
        with translate_errors(
            f"An error occurred while updating domainProduct '{domain_product_id}' in the database."
        ):
            entity_changes = {k: v for k, v in changes.items() if k != "domain_id"}
            self._patch(domain_product_id, self._patch_values(entity_changes))
            if "domain_id" in changes:
                self._move_under(domain_product_id, changes["domain_id"])

    def update_resource_types(
        self,
        domain_product_id: str,
        *,
        add: Iterable[str] | None = None,
        remove: Iterable[str] | None = None,
    ) -> int:
        """Associate and dissociate resource types in one step.

        The two lists are reconciled first (see
        :func:`~catalogctl.domain.resource_types.reconcile`).  Every
        ``add`` entry is checked against other DomainProducts before
        anything is written; one conflict fails the whole call.

        Returns:
            Number of association rows inserted plus deleted.

        Raises:
            NotFoundError: If the DomainProduct does not exist.
            ValidationError: If any ``add`` entry belongs to another
                DomainProduct; the message lists every conflict.
        """
        with translate_errors(
            "An error occurred while updating domainProduct resource types in the database"
        ):
            self.require(domain_product_id)
            to_add, to_remove = reconcile(add, remove)
            changed = 0
            if to_add:
                self._ensure_unassociated(domain_product_id, to_add)
                existing = set(self.resource_types_of(domain_product_id))
                changed += self._associate(
                    domain_product_id, [name for name in to_add if name not in existing]
                )
            if to_remove:
                result = self._conn.execute(
                    delete(domain_product_resource_types).where(
                        domain_product_resource_types.c.domain_product_id == domain_product_id,
                        domain_product_resource_types.c.resource_type_name.in_(to_remove),
                    )
                )
                changed += result.rowcount
        self._log.debug(
            "resource_types_updated",
            domain_product_id=domain_product_id,
            added=to_add,
            removed=to_remove,
            changed=changed,
        )
        return changed

    def resource_types_of(self, domain_product_id: str) -> list[str]:
        rows = self._conn.execute(
            select(domain_product_resource_types.c.resource_type_name)
            .where(domain_product_resource_types.c.domain_product_id == domain_product_id)
            .order_by(domain_product_resource_types.c.resource_type_name)
        ).fetchall()
        return [str(row.resource_type_name) for row in rows]

    def resource_type_conflicts(
        self,
        resource_types: list[str],
        *,
        exclude_id: str | None = None,
    ) -> list[dict[str, str]]:
        """Associations of *resource_types* held by other active DomainProducts.

        One query for the whole batch.
        """
        rt = domain_product_resource_types
        stmt = (
            select(
                rt.c.resource_type_name,
                rt.c.domain_product_id,
                domain_products.c.name.label("domain_product_name"),
            )
            .join(domain_products, domain_products.c.id == rt.c.domain_product_id)
            .where(
                rt.c.resource_type_name.in_(resource_types),
                domain_products.c.is_active == true(),
            )
            .order_by(rt.c.resource_type_name)
        )
        if exclude_id is not None:
            stmt = stmt.where(rt.c.domain_product_id != exclude_id)
        rows = self._conn.execute(stmt).fetchall()
        return [
            {
                "resource_type": str(row.resource_type_name),
                "domain_product_id": str(row.domain_product_id),
                "domain_product_name": str(row.domain_product_name),
            }
            for row in rows
        ]

    def _ensure_unassociated(self, domain_product_id: str, resource_types: list[str]) -> None:
        conflicts = self.resource_type_conflicts(resource_types, exclude_id=domain_product_id)
        if not conflicts:
            return
        names = ", ".join(f"'{c['resource_type']}'" for c in conflicts)
        owners = ", ".join(f"'{c['domain_product_name']}'" for c in conflicts)
        raise ValidationError(
            f"ResourceType(s) {names} are already associated with "
            f"domainProduct(s) {owners} respectively",
            detail={"conflicts": conflicts},
        )

    def _associate(self, domain_product_id: str, resource_types: list[str]) -> int:
        if not resource_types:
            return 0
        self._conn.execute(
            insert(domain_product_resource_types),
            [
                {"domain_product_id": domain_product_id, "resource_type_name": name}
                for name in resource_types
            ],
        )
        return len(resource_types)

    def result_maps(self, view: ViewOptions) -> list[ResultMap]:
        associations = (Nested("domain", "domain", "domain_"),) if view.includes("domain") else ()
        collections: list[Nested] = []
        if view.includes("products"):
            collections.append(Nested("products", "products", "product_"))
        if view.includes("resource_types"):
            collections.append(Nested("resource_types", "resource_types", "resource_type_"))
        return [
            ResultMap(
                "domain_products",
                ENTITY_FIELDS,
                associations=associations,
                collections=tuple(collections),
            ),
            ResultMap("domain", SUMMARY_FIELDS),
            ResultMap("products", NESTED_FIELDS),
            ResultMap("resource_types", ("name",), id_property="name"),
        ]
