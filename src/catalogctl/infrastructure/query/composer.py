"""Hierarchical query composer.

Each taxonomy level has a :class:`HierarchyQuery` that builds a
denormalized SELECT: the level's own columns plus, per requested
related object, LEFT JOINs through ``relations`` (one alias per hop)
with that object's columns under a fixed prefix (``domain_``,
``domain_product_``, ``product_``, ``component_``, ``resource_type_``).
Related objects that are neither requested by the view nor needed by a
filter are not joined at all.

Listings run in two phases (:func:`compose_page`): a DISTINCT
``(id, sort_id)`` page is selected from the denormalized CTE with the
filters, keyset predicate and LIMIT, then the CTE is re-joined to fetch
every denormalized row of just those ids.  One-to-many joins therefore
never eat into the LIMIT.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import and_, select, true

from catalogctl.domain.types import Taxonomy
from catalogctl.infrastructure.database.schema import (
    components,
    domain_product_resource_types,
    domain_products,
    domains,
    products,
    relations,
)
from catalogctl.infrastructure.query.filters import FilterField, FilterSet
from catalogctl.infrastructure.query.pagination import Cursor, keyset_predicate

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.sql import FromClause

    from catalogctl.domain.views import ViewOptions

ENTITY_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "slug_name",
    "description",
    "sort_id",
    "is_active",
    "is_system_generated",
    "created_at",
    "last_modified_at",
)
NESTED_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "description",
    "sort_id",
    "is_system_generated",
    "created_at",
    "last_modified_at",
)
SUMMARY_FIELDS: tuple[str, ...] = ("id", "name", "slug_name", "description")
COMPONENT_FIELDS: tuple[str, ...] = (
    "id",
    "component_id",
    "type",
    "name",
    "slug_name",
    "description",
    "sort_id",
    "is_active",
    "created_at",
    "last_modified_at",
)
NESTED_COMPONENT_FIELDS: tuple[str, ...] = (
    "id",
    "type",
    "name",
    "description",
    "sort_id",
    "created_at",
    "last_modified_at",
)

_D = Taxonomy.DOMAIN.value
_DP = Taxonomy.DOMAINPRODUCT.value
_P = Taxonomy.PRODUCT.value
_C = Taxonomy.COMPONENT.value


def prefixed(table: FromClause, fields: tuple[str, ...], prefix: str = "") -> list[Any]:
    """Select *fields* of *table*, labelled ``{prefix}{field}``."""
    return [table.c[name].label(f"{prefix}{name}") for name in fields]


def component_key(table: FromClause) -> ColumnElement[str]:
    """``TYPE:component_id`` — the id components carry on relation edges."""
    return table.c.type.concat(":").concat(table.c.component_id)


def component_columns(table: FromClause, fields: tuple[str, ...], prefix: str = "") -> list[Any]:
    cols: list[Any] = []
    for name in fields:
        col = component_key(table) if name == "id" else table.c[name]
        cols.append(col.label(f"{prefix}{name}"))
    return cols


class HierarchyQuery:
    """Denormalized base query for one taxonomy level.

    Subclasses declare the related objects they can embed
    (:attr:`related`), the whitelisted filters (:attr:`filters`), the
    nested sort columns that keep collection order stable
    (:attr:`order_columns`) and implement :meth:`_select`.
    """

    name: ClassVar[str]
    related: ClassVar[tuple[str, ...]] = ()
    filters: ClassVar[dict[str, FilterField]] = {}
    order_columns: ClassVar[tuple[str, ...]] = ()

    def joins_for(self, view: ViewOptions, filter_set: FilterSet | None = None) -> set[str]:
        """Related objects to join: requested by *view* or needed by a filter."""
        joins = {name for name in self.related if view.includes(name)}
        if filter_set is not None:
            joins |= filter_set.requires & set(self.related)
        return joins

    def base(self, view: ViewOptions, filter_set: FilterSet | None = None) -> Select[Any]:
        return self._select(self.joins_for(view, filter_set))

    def one(self, view: ViewOptions, entity_id: str) -> Select[Any]:
        """All denormalized rows for a single active entity."""
        cte = self.base(view).cte(f"{self.name}_cte")
        return (
            select(cte)
            .where(cte.c.id == entity_id)
            .order_by(*self._tiebreak(cte))
        )

    def page(
        self,
        view: ViewOptions,
        filter_set: FilterSet,
        *,
        cursor: Cursor | None,
        limit: int,
    ) -> Select[Any]:
        return compose_page(
            self.base(view, filter_set),
            filter_set,
            cursor=cursor,
            limit=limit,
            name=self.name,
            order_columns=self.order_columns,
        )

    def _tiebreak(self, cte: FromClause) -> list[Any]:
        return [cte.c[name].asc() for name in self.order_columns if name in cte.c]

    def _select(self, joins: set[str]) -> Select[Any]:
        raise NotImplementedError


def compose_page(
    base: Select[Any],
    filter_set: FilterSet,
    *,
    cursor: Cursor | None,
    limit: int,
    name: str,
    order_columns: tuple[str, ...] = (),
) -> Select[Any]:
    """Wrap *base* in the two-phase DISTINCT page query.

    ``SELECT DISTINCT id, sort_id FROM cte WHERE <filters> [AND sort_id < :cursor]
    ORDER BY sort_id DESC LIMIT :limit`` picks the page, then the CTE is
    re-joined to return all rows of those ids, newest first.
    """
    cte = base.cte(f"{name}_cte")
    predicates = [*filter_set.render(cte), *keyset_predicate(cte.c.sort_id, cursor)]
    page = (
        select(cte.c.id, cte.c.sort_id)
        .distinct()
        .where(*predicates)
        .order_by(cte.c.sort_id.desc())
        .limit(limit)
        .subquery("page")
    )
    tiebreak = [cte.c[col].asc() for col in order_columns if col in cte.c]
    return (
        select(cte)
        .join(page, page.c.id == cte.c.id)
        .order_by(cte.c.sort_id.desc(), *tiebreak)
    )


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


class DomainQuery(HierarchyQuery):
    """Domain → domain_products[] → products[]."""

    name = "domains"
    related = ("domain_products",)
    filters = {
        "name": FilterField("slug_name", "slug"),
        "domain_products": FilterField("domain_product_id", "in", requires="domain_products"),
    }
    order_columns = ("domain_product_sort_id", "product_sort_id")

    def _select(self, joins: set[str]) -> Select[Any]:
        d = domains
        cols = prefixed(d, ENTITY_FIELDS)
        src: Any = d
        if "domain_products" in joins:
            r_d = relations.alias("r_d")
            dp = domain_products.alias("dp")
            r_dp = relations.alias("r_dp")
            p = products.alias("p")
            src = (
                src.outerjoin(
                    r_d,
                    and_(
                        r_d.c.parent_id == d.c.id,
                        r_d.c.parent_type == _D,
                        r_d.c.child_type == _DP,
                    ),
                )
                .outerjoin(dp, and_(dp.c.id == r_d.c.child_id, dp.c.is_active == true()))
                .outerjoin(
                    r_dp,
                    and_(
                        r_dp.c.parent_id == dp.c.id,
                        r_dp.c.parent_type == _DP,
                        r_dp.c.child_type == _P,
                    ),
                )
                .outerjoin(p, and_(p.c.id == r_dp.c.child_id, p.c.is_active == true()))
            )
            cols += prefixed(dp, NESTED_FIELDS, "domain_product_")
            cols += prefixed(p, NESTED_FIELDS, "product_")
        return select(*cols).select_from(src).where(d.c.is_active == true())


class DomainProductQuery(HierarchyQuery):
    """DomainProduct → domain, products[], resource_types[]."""

    name = "domain_products"
    related = ("domain", "products", "resource_types")
    filters = {
        "name": FilterField("slug_name", "slug"),
        "domains": FilterField("domain_id", "in", requires="domain"),
        "products": FilterField("product_id", "in", requires="products"),
        "resource_types": FilterField("resource_type_name", "in", requires="resource_types"),
    }
    order_columns = ("product_sort_id", "resource_type_name")

    def _select(self, joins: set[str]) -> Select[Any]:
        dp = domain_products
        cols = prefixed(dp, ENTITY_FIELDS)
        src: Any = dp
        if "domain" in joins:
            r_up = relations.alias("r_up")
            d = domains.alias("d")
            src = src.outerjoin(
                r_up,
                and_(r_up.c.child_id == dp.c.id, r_up.c.child_type == _DP),
            ).outerjoin(d, and_(d.c.id == r_up.c.parent_id, d.c.is_active == true()))
            cols += prefixed(d, SUMMARY_FIELDS, "domain_")
        if "products" in joins:
            r_down = relations.alias("r_down")
            p = products.alias("p")
            src = src.outerjoin(
                r_down,
                and_(
                    r_down.c.parent_id == dp.c.id,
                    r_down.c.parent_type == _DP,
                    r_down.c.child_type == _P,
                ),
            ).outerjoin(p, and_(p.c.id == r_down.c.child_id, p.c.is_active == true()))
            cols += prefixed(p, NESTED_FIELDS, "product_")
        if "resource_types" in joins:
            rt = domain_product_resource_types.alias("dprt")
            src = src.outerjoin(rt, rt.c.domain_product_id == dp.c.id)
            cols.append(rt.c.resource_type_name.label("resource_type_name"))
        return select(*cols).select_from(src).where(dp.c.is_active == true())


class ProductQuery(HierarchyQuery):
    """Product → domain_product, domain, components[]."""

    name = "products"
    related = ("domain_product", "domain", "components")
    filters = {
        "name": FilterField("slug_name", "slug"),
        "domain_products": FilterField("domain_product_id", "in", requires="domain_product"),
        "domains": FilterField("domain_id", "in", requires="domain"),
    }
    order_columns = ("component_sort_id",)

    def _select(self, joins: set[str]) -> Select[Any]:
        p = products
        cols = prefixed(p, ENTITY_FIELDS)
        src: Any = p
        if joins & {"domain_product", "domain"}:
            r_up = relations.alias("r_up")
            src = src.outerjoin(r_up, and_(r_up.c.child_id == p.c.id, r_up.c.child_type == _P))
            if "domain_product" in joins:
                dp = domain_products.alias("dp")
                src = src.outerjoin(
                    dp, and_(dp.c.id == r_up.c.parent_id, dp.c.is_active == true())
                )
                cols += prefixed(dp, SUMMARY_FIELDS, "domain_product_")
            if "domain" in joins:
                r_top = relations.alias("r_top")
                d = domains.alias("d")
                src = src.outerjoin(
                    r_top,
                    and_(r_top.c.child_id == r_up.c.parent_id, r_top.c.child_type == _DP),
                ).outerjoin(d, and_(d.c.id == r_top.c.parent_id, d.c.is_active == true()))
                cols += prefixed(d, SUMMARY_FIELDS, "domain_")
        if "components" in joins:
            r_c = relations.alias("r_c")
            c = components.alias("c")
            src = src.outerjoin(
                r_c,
                and_(r_c.c.parent_id == p.c.id, r_c.c.parent_type == _P, r_c.c.child_type == _C),
            ).outerjoin(c, and_(component_key(c) == r_c.c.child_id, c.c.is_active == true()))
            cols += component_columns(c, NESTED_COMPONENT_FIELDS, "component_")
        return select(*cols).select_from(src).where(p.c.is_active == true())


class ComponentQuery(HierarchyQuery):
    """Component → product, domain_product, domain."""

    name = "components"
    related = ("product", "domain_product", "domain")
    filters = {
        "name": FilterField("slug_name", "slug"),
        "type": FilterField("type", "eq"),
        "products": FilterField("product_id", "in", requires="product"),
    }

    def _select(self, joins: set[str]) -> Select[Any]:
        c = components
        cols = component_columns(c, COMPONENT_FIELDS)
        src: Any = c
        if joins:
            r1 = relations.alias("r1")
            src = src.outerjoin(
                r1, and_(r1.c.child_id == component_key(c), r1.c.child_type == _C)
            )
            if "product" in joins:
                p = products.alias("p")
                src = src.outerjoin(p, and_(p.c.id == r1.c.parent_id, p.c.is_active == true()))
                cols += prefixed(p, SUMMARY_FIELDS, "product_")
            if joins & {"domain_product", "domain"}:
                r2 = relations.alias("r2")
                src = src.outerjoin(
                    r2, and_(r2.c.child_id == r1.c.parent_id, r2.c.child_type == _P)
                )
                if "domain_product" in joins:
                    dp = domain_products.alias("dp")
                    src = src.outerjoin(
                        dp, and_(dp.c.id == r2.c.parent_id, dp.c.is_active == true())
                    )
                    cols += prefixed(dp, SUMMARY_FIELDS, "domain_product_")
                if "domain" in joins:
                    r3 = relations.alias("r3")
                    d = domains.alias("d")
                    src = src.outerjoin(
                        r3, and_(r3.c.child_id == r2.c.parent_id, r3.c.child_type == _DP)
                    ).outerjoin(d, and_(d.c.id == r3.c.parent_id, d.c.is_active == true()))
                    cols += prefixed(d, SUMMARY_FIELDS, "domain_")
        return select(*cols).select_from(src).where(c.c.is_active == true())
