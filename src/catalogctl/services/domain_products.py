"""DomainProductService: DomainProducts and their resource types."""

from __future__ import annotations

from collections.abc import Iterable

from catalogctl.domain.errors import CatalogError
from catalogctl.infrastructure.repositories import DomainProductRepository
from catalogctl.services.base import BaseService
from catalogctl.services.result import ServiceResult


class DomainProductService(BaseService):
    """DomainProducts under a Domain, each owning a set of resource types."""

    repository = DomainProductRepository
    noun = "domain_product"

    def create(
        self,
        name: str,
        *,
        domain_id: str,
        description: str | None = None,
        resource_types: Iterable[str] | None = None,
    ) -> ServiceResult:
        """Create a DomainProduct under *domain_id* with its default Product.

        Fails without writing anything if any resource type already
        belongs to another DomainProduct.
        """
        op = "create_domain_product"
        try:
            with self._catalog.transaction() as txn:
                repo = DomainProductRepository(txn)
                dp_id = repo.create(
                    name,
                    domain_id=domain_id,
                    description=description,
                    resource_types=resource_types,
                )
                entity = repo.get(dp_id)
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity)

    def update_resource_types(
        self,
        domain_product_id: str,
        *,
        add: Iterable[str] | None = None,
        remove: Iterable[str] | None = None,
    ) -> ServiceResult:
        """Add and remove resource types in one all-or-nothing step."""
        op = "update_resource_types"
        try:
            with self._catalog.transaction() as txn:
                repo = DomainProductRepository(txn)
                changed = repo.update_resource_types(domain_product_id, add=add, remove=remove)
                entity = repo.get(domain_product_id)
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity, meta={"changed": changed})
