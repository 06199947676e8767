"""Service layer: one service per taxonomy level, all returning ServiceResult."""

from catalogctl.services.admin import AdminService
from catalogctl.services.components import ComponentService
from catalogctl.services.domain_products import DomainProductService
from catalogctl.services.domains import DomainService
from catalogctl.services.products import ProductService
from catalogctl.services.result import ServiceError, ServiceResult

__all__ = [
    "AdminService",
    "ComponentService",
    "DomainProductService",
    "DomainService",
    "ProductService",
    "ServiceError",
    "ServiceResult",
]
