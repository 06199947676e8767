"""Component repository.

Components are identified by their composite :class:`ComponentKey`
(``TYPE:component_id``) rather than a generated id; the rendered key is
both the relation child id and the ``id`` in views.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, insert

from catalogctl.domain.errors import ValidationError
from catalogctl.domain.ids import slugify
from catalogctl.domain.types import ComponentKey, ComponentType, NodeRef, Taxonomy
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.database.counters import next_sort_id
from catalogctl.infrastructure.database.errors import translate_errors
from catalogctl.infrastructure.database.timestamps import now_iso
from catalogctl.infrastructure.query.composer import COMPONENT_FIELDS, SUMMARY_FIELDS, ComponentQuery
from catalogctl.infrastructure.query.mapper import Nested, ResultMap
from catalogctl.infrastructure.repositories.base import EntityRepository, clean_name

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


def parse_key(raw: Any) -> ComponentKey:
    """Parse a ``TYPE:component_id`` string, raising :class:`ValidationError`."""
    if isinstance(raw, ComponentKey):
        return raw
    try:
        return ComponentKey.parse(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(str(exc), detail={"id": raw}) from exc


def parse_type(raw: Any) -> ComponentType:
    try:
        return ComponentType(str(raw).strip().upper())
    except ValueError as exc:
        allowed = ", ".join(t.value for t in ComponentType)
        raise ValidationError(
            f"Invalid component type '{raw}'. Expected one of: {allowed}",
            detail={"type": raw},
        ) from exc


class ComponentRepository(EntityRepository):
    """Components sit under a Product."""

    level = Taxonomy.COMPONENT
    query = ComponentQuery()
    updatable_fields = frozenset({"name", "description", "type", "product_id"})

    def create(
        self,
        component_id: str,
        *,
        type: str | ComponentType,
        name: str,
        product_id: str,
        description: str | None = None,
    ) -> ComponentKey:
        """Insert a component and relate it to its Product.

        Raises:
            ValidationError: On an empty id or name, an unknown type, or
                a ``(type, component_id)`` pair that already exists.
            NotFoundError: If the Product does not exist.
        """
        cid = str(component_id or "").strip()
        if not cid:
            raise ValidationError("componentId is required")
        key = ComponentKey(type=parse_type(type), component_id=cid)
        name = clean_name(name)
        with translate_errors(f"An error occurred while creating the component {name} in the database"):
            parent_id = self.require_parent(Taxonomy.PRODUCT, product_id)
            now = now_iso()
            self._conn.execute(
                insert(self.table).values(
                    component_id=key.component_id,
                    type=key.type.value,
                    name=name,
                    slug_name=slugify(name),
                    description=description.strip() if description else description,
                    sort_id=next_sort_id(self._conn, self.table.name),
                    is_active=True,
                    created_at=now,
                    last_modified_at=now,
                )
            )
            self._relations.create(
                NodeRef(id=parent_id, type=Taxonomy.PRODUCT),
                NodeRef.component(key),
            )
        self._log.debug("entity_created", type=self.level.value, id=str(key))
        return key

    def update(self, key: Any, changes: Mapping[str, Any]) -> ComponentKey:
        """Sparse patch.

        A ``type`` change rekeys the component (and its relation edge);
        a ``product_id`` change moves it.  Returns the possibly new key.
        """
        key = parse_key(key)
        with translate_errors(f"An error occurred while updating component '{key}' in the database."):
            entity_changes = {k: v for k, v in changes.items() if k not in {"type", "product_id"}}
            values = self._patch_values(entity_changes)
            new_key = key
            if "type" in changes:
                new_key = ComponentKey(type=parse_type(changes["type"]), component_id=key.component_id)
                values["type"] = new_key.type.value
            self._patch(str(key), values)

            child = NodeRef.component(key)
            new_parent = None
            if "product_id" in changes:
                new_parent = self.require_parent(Taxonomy.PRODUCT, changes["product_id"])
                current = self._relations.parent_of(child)
                if current is None:
                    self._relations.create(
                        NodeRef(id=new_parent, type=Taxonomy.PRODUCT), NodeRef.component(new_key)
                    )
                    return new_key
                if current.id == new_parent:
                    new_parent = None
            if new_parent is not None or new_key != key:
                self._relations.reparent(
                    child,
                    new_parent,
                    new_child_id=str(new_key) if new_key != key else None,
                )
        return new_key

    def id_clause(self, entity_id: Any) -> ColumnElement[bool]:
        key = parse_key(entity_id)
        return and_(
            self.table.c.type == key.type.value,
            self.table.c.component_id == key.component_id,
        )

    def get(self, entity_id: Any, view: ViewOptions | None = None) -> dict[str, Any]:
        return super().get(str(parse_key(entity_id)), view)

    def normalize_filters(self, filters: Mapping[str, Any] | None) -> Mapping[str, Any]:
        normalized = dict(filters or {})
        if normalized.get("type"):
            normalized["type"] = parse_type(normalized["type"]).value
        return normalized

    def result_maps(self, view: ViewOptions) -> list[ResultMap]:
        associations = tuple(
            Nested(name, name, f"{name}_")
            for name in ("product", "domain_product", "domain")
            if view.includes(name)
        )
        return [
            ResultMap("components", COMPONENT_FIELDS, associations=associations),
            ResultMap("product", SUMMARY_FIELDS),
            ResultMap("domain_product", SUMMARY_FIELDS),
            ResultMap("domain", SUMMARY_FIELDS),
        ]
