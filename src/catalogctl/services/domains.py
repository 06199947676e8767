"""DomainService: Domain creation with its default children."""

from __future__ import annotations

from catalogctl.domain.errors import CatalogError
from catalogctl.infrastructure.repositories import DomainRepository
from catalogctl.services.base import BaseService
from catalogctl.services.result import ServiceResult


class DomainService(BaseService):
    """Domains plus the default DomainProduct and Product created with them."""

    repository = DomainRepository
    noun = "domain"

    def create(self, name: str, *, description: str | None = None) -> ServiceResult:
        """Create a Domain, its default DomainProduct and default Product atomically."""
        op = "create_domain"
        try:
            with self._catalog.transaction() as txn:
                repo = DomainRepository(txn)
                domain_id = repo.create(name, description=description)
                entity = repo.get(domain_id)
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity)
