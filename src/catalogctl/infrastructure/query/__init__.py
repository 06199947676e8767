"""Hierarchical query composition, keyset pagination and row-to-tree mapping."""

from catalogctl.infrastructure.query.composer import HierarchyQuery, compose_page
from catalogctl.infrastructure.query.filters import FilterSet
from catalogctl.infrastructure.query.mapper import Nested, ResultMap, RowMapper
from catalogctl.infrastructure.query.pagination import (
    Cursor,
    Page,
    build_page,
    decode_cursor,
    encode_cursor,
)

__all__ = [
    "Cursor",
    "FilterSet",
    "HierarchyQuery",
    "Nested",
    "Page",
    "ResultMap",
    "RowMapper",
    "build_page",
    "compose_page",
    "decode_cursor",
    "encode_cursor",
]
