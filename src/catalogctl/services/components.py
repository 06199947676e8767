"""ComponentService: components keyed by ``TYPE:component_id``."""

from __future__ import annotations

from catalogctl.domain.errors import CatalogError
from catalogctl.infrastructure.repositories import ComponentRepository
from catalogctl.services.base import BaseService
from catalogctl.services.result import ServiceResult


class ComponentService(BaseService):
    repository = ComponentRepository
    noun = "component"

    def create(
        self,
        component_id: str,
        *,
        type: str,
        name: str,
        product_id: str,
        description: str | None = None,
    ) -> ServiceResult:
        """Create a component under *product_id*."""
        op = "create_component"
        try:
            with self._catalog.transaction() as txn:
                repo = ComponentRepository(txn)
                key = repo.create(
                    component_id,
                    type=type,
                    name=name,
                    product_id=product_id,
                    description=description,
                )
                entity = repo.get(str(key))
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity)
