"""Taxonomy levels, component sub-types, and relation endpoints.

The catalog is a fixed four-level tree: Domain → DomainProduct →
Product → Component.  Levels are linked only through relation edges;
an edge endpoint is always a typed :class:`NodeRef`, never a bare string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Taxonomy(StrEnum):
    """The four node types of the catalog hierarchy."""

    DOMAIN = "DOMAIN"
    DOMAINPRODUCT = "DOMAINPRODUCT"
    PRODUCT = "PRODUCT"
    COMPONENT = "COMPONENT"


class ComponentType(StrEnum):
    """Sub-types a component can take."""

    LIBRARY = "LIBRARY"
    UI = "UI"
    DATA = "DATA"
    API = "API"


# Parent level for each child level. Callers only ever link adjacent levels.
PARENT_LEVEL: dict[Taxonomy, Taxonomy] = {
    Taxonomy.DOMAINPRODUCT: Taxonomy.DOMAIN,
    Taxonomy.PRODUCT: Taxonomy.DOMAINPRODUCT,
    Taxonomy.COMPONENT: Taxonomy.PRODUCT,
}


@dataclass(frozen=True)
class ComponentKey:
    """Composite identity of a component: its sub-type plus its own id.

    Rendered as ``TYPE:component_id`` wherever a single string id is
    needed (relation endpoints, page keys).
    """

    type: ComponentType
    component_id: str

    def __str__(self) -> str:
        return f"{self.type}:{self.component_id}"

    @classmethod
    def parse(cls, raw: str) -> ComponentKey:
        """Parse ``TYPE:component_id``.

        Raises:
            ValueError: If *raw* has no separator or an unknown type.
        """
        type_part, sep, id_part = raw.partition(":")
        if not sep or not id_part:
            msg = f"Invalid component key: {raw!r}. Expected 'TYPE:component_id'"
            raise ValueError(msg)
        return cls(type=ComponentType(type_part.upper()), component_id=id_part)


@dataclass(frozen=True)
class NodeRef:
    """One end of a relation edge."""

    id: str
    type: Taxonomy

    @classmethod
    def component(cls, key: ComponentKey) -> NodeRef:
        return cls(id=str(key), type=Taxonomy.COMPONENT)


@dataclass(frozen=True)
class Relation:
    """A typed parent → child edge."""

    parent: NodeRef
    child: NodeRef
