"""Per-level repositories bound to a :class:`CatalogTransaction`."""

from catalogctl.infrastructure.repositories.base import EntityRepository
from catalogctl.infrastructure.repositories.components import ComponentRepository
from catalogctl.infrastructure.repositories.domain_products import DomainProductRepository
from catalogctl.infrastructure.repositories.domains import DomainRepository
from catalogctl.infrastructure.repositories.products import ProductRepository
from catalogctl.infrastructure.repositories.relations import RelationRepository

__all__ = [
    "ComponentRepository",
    "DomainProductRepository",
    "DomainRepository",
    "EntityRepository",
    "ProductRepository",
    "RelationRepository",
]
