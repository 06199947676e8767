"""AdminService: catalog-wide housekeeping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogctl.domain.errors import CatalogError
from catalogctl.infrastructure.repositories import (
    ComponentRepository,
    DomainProductRepository,
    DomainRepository,
    ProductRepository,
)
from catalogctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from catalogctl.infrastructure.catalog import Catalog


class AdminService:
    """Schema setup and catalog-wide counts."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    def init(self) -> ServiceResult:
        """Report the (now created) schema and the active row count per level.

        Constructing the :class:`Catalog` already created any missing
        tables, so this is idempotent.
        """
        op = "init"
        try:
            with self._catalog.connect() as txn:
                counts = {
                    "domains": DomainRepository(txn).count(),
                    "domain_products": DomainProductRepository(txn).count(),
                    "products": ProductRepository(txn).count(),
                    "components": ComponentRepository(txn).count(),
                }
        except CatalogError as exc:
            return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
        database = self._catalog.engine.url.render_as_string(hide_password=True)
        return ServiceResult(ok=True, op=op, data={"database": database, "counts": counts})
