"""Whitelisted, conjunctive filter predicates.

A :class:`FilterSet` accumulates ``(column, operator, value)`` terms and
renders them against whatever selectable the page query runs over.
Values are always bound parameters; the SQLAlchemy compiler numbers the
placeholders, so there is no manual parameter-index bookkeeping.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from catalogctl.domain.ids import slugify

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.sql import FromClause

FilterKind = Literal["slug", "in", "eq"]


@dataclass(frozen=True)
class FilterField:
    """How one recognised query key filters the denormalized rows.

    Attributes:
        column: Column of the base query the predicate applies to.
        kind: ``slug`` (substring of the slugified value), ``in`` (list
            membership) or ``eq``.
        requires: Related object whose join provides *column*, if any.
    """

    column: str
    kind: FilterKind
    requires: str | None = None


@dataclass(frozen=True)
class _Term:
    column: str
    op: FilterKind
    value: Any


def _as_list(value: Any) -> list[str]:
    """Cast a scalar or comma-separated string to a trimmed list."""
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, Iterable):
        items = value
    else:
        items = [value]
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


@dataclass
class FilterSet:
    """Conjunction of filter terms plus the joins they depend on."""

    _terms: list[_Term] = field(default_factory=list)
    requires: set[str] = field(default_factory=set)

    @classmethod
    def from_query(
        cls,
        filters: Mapping[str, Any] | None,
        spec: Mapping[str, FilterField],
    ) -> FilterSet:
        """Build a filter set from a flat query mapping.

        Keys not present in *spec* are ignored.
        """
        fs = cls()
        for key, value in (filters or {}).items():
            fdef = spec.get(key)
            if fdef is None:
                continue
            added = False
            if fdef.kind == "slug":
                added = fs.add_slug(fdef.column, value)
            elif fdef.kind == "in":
                added = fs.add_any_of(fdef.column, value)
            else:
                added = fs.add_equals(fdef.column, value)
            if added and fdef.requires:
                fs.requires.add(fdef.requires)
        return fs

    def add_slug(self, column: str, name: Any) -> bool:
        slug = slugify(str(name or ""))
        if not slug:
            return False
        # The slug alphabet is [a-z0-9-], so it cannot carry LIKE wildcards.
        self._terms.append(_Term(column, "slug", f"%{slug}%"))
        return True

    def add_any_of(self, column: str, values: Any) -> bool:
        items = _as_list(values)
        if not items:
            return False
        self._terms.append(_Term(column, "in", list(dict.fromkeys(items))))
        return True

    def add_equals(self, column: str, value: Any) -> bool:
        if value is None or (isinstance(value, str) and not value.strip()):
            return False
        self._terms.append(
            _Term(column, "eq", value.strip() if isinstance(value, str) else value)
        )
        return True

    def render(self, source: FromClause) -> list[ColumnElement[bool]]:
        """Render every term as a predicate over *source*'s columns."""
        predicates: list[ColumnElement[bool]] = []
        for term in self._terms:
            col = source.c[term.column]
            if term.op == "slug":
                predicates.append(col.like(term.value))
            elif term.op == "in":
                predicates.append(col.in_(term.value))
            else:
                predicates.append(col == term.value)
        return predicates
