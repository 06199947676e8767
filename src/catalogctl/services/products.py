"""ProductService."""

from __future__ import annotations

from catalogctl.domain.errors import CatalogError
from catalogctl.infrastructure.repositories import ProductRepository
from catalogctl.services.base import BaseService
from catalogctl.services.result import ServiceResult


class ProductService(BaseService):
    repository = ProductRepository
    noun = "product"

    def create(
        self,
        name: str,
        *,
        domain_product_id: str,
        description: str | None = None,
    ) -> ServiceResult:
        op = "create_product"
        try:
            with self._catalog.transaction() as txn:
                repo = ProductRepository(txn)
                product_id = repo.create(
                    name, domain_product_id=domain_product_id, description=description
                )
                entity = repo.get(product_id)
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity)
