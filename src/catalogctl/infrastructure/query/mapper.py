"""Row-to-tree mapping.

Turns flat, duplicated join rows into nested objects.  A mapping is a
set of :class:`ResultMap` declarations keyed by ``map_id``; each names
the id column, plain properties, 1:1 associations and 1:many
collections.  Nested maps read their columns under an absolute
``column_prefix``.

Two passes per level:

1. Group rows by the map's id column, keeping first-seen order and
   skipping rows whose id is NULL (an unmatched LEFT JOIN).
2. Fold each group: properties from the group's first row, each
   association from the first nested object found in the group (key
   omitted when there is none), each collection from all nested
   objects of the group, deduplicated by nested id in first-seen order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from catalogctl.domain.errors import NotFoundError

Row = Mapping[str, Any]


@dataclass(frozen=True)
class Nested:
    """Reference from a parent map to a nested map."""

    name: str
    map_id: str
    column_prefix: str


@dataclass(frozen=True)
class ResultMap:
    """Declaration of one output shape."""

    map_id: str
    properties: tuple[str, ...]
    id_property: str = "id"
    associations: tuple[Nested, ...] = ()
    collections: tuple[Nested, ...] = ()


class RowMapper:
    """Maps flat rows to nested dicts according to a set of result maps."""

    def __init__(self, result_maps: Iterable[ResultMap]) -> None:
        self._maps: dict[str, ResultMap] = {m.map_id: m for m in result_maps}

    def map(self, rows: Sequence[Row], map_id: str, column_prefix: str = "") -> list[dict[str, Any]]:
        """Map *rows* to a list of objects, one per distinct id."""
        result_map = self._maps[map_id]
        groups = _group(rows, f"{column_prefix}{result_map.id_property}")
        return [self._fold(group, result_map, column_prefix) for group in groups.values()]

    def map_one(self, rows: Sequence[Row], map_id: str, column_prefix: str = "") -> dict[str, Any]:
        """Map *rows* that all describe a single object.

        Raises:
            NotFoundError: If *rows* holds no object.
            ValueError: If *rows* holds more than one distinct id.
        """
        mapped = self.map(rows, map_id, column_prefix)
        if not mapped:
            raise NotFoundError(f"No rows to map for '{map_id}'")
        if len(mapped) > 1:
            ids = [obj.get(self._maps[map_id].id_property) for obj in mapped]
            msg = f"Expected exactly one '{map_id}', found {len(mapped)}: {ids}"
            raise ValueError(msg)
        return mapped[0]

    def _fold(self, rows: list[Row], result_map: ResultMap, prefix: str) -> dict[str, Any]:
        first = rows[0]
        obj: dict[str, Any] = {prop: first.get(f"{prefix}{prop}") for prop in result_map.properties}
        for assoc in result_map.associations:
            nested = self.map(rows, assoc.map_id, assoc.column_prefix)
            if nested:
                obj[assoc.name] = nested[0]
        for coll in result_map.collections:
            obj[coll.name] = self.map(rows, coll.map_id, coll.column_prefix)
        return obj


def _group(rows: Sequence[Row], id_column: str) -> dict[Any, list[Row]]:
    groups: dict[Any, list[Row]] = {}
    for row in rows:
        key = row.get(id_column)
        if key is None:
            continue
        groups.setdefault(key, []).append(row)
    return groups
