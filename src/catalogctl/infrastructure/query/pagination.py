"""Keyset (cursor) pagination.

A cursor is an opaque token: base64 of the UTF-8 JSON object
``{"sortId": <int>}``.  Callers never interpret it, only round-trip it.
Listings always order by ``sort_id DESC`` and, given a cursor, keep
only rows with ``sort_id < cursor.sort_id``.  Rows inserted after a
page was issued sort ahead of the cursor window, so they never cause a
later page to skip or repeat a row.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, StrictInt
from pydantic import ValidationError as PydanticValidationError

from catalogctl.domain.errors import ValidationError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class Cursor(BaseModel):
    """Decoded continuation token."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    sort_id: StrictInt = Field(alias="sortId", ge=0)


def encode_cursor(sort_id: int) -> str:
    """Encode *sort_id* as an opaque continuation token."""
    payload = json.dumps({"sortId": int(sort_id)}, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_cursor(token: str) -> Cursor:
    """Decode a continuation token produced by :func:`encode_cursor`.

    Raises:
        ValidationError: If *token* is not valid base64 or does not hold
            a JSON object with a single non-negative integer ``sortId``.
    """
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
        return Cursor.model_validate_json(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError, PydanticValidationError) as exc:
        raise ValidationError(
            "Error while validating request: offset is invalid",
            detail={"offset": token},
        ) from exc


def keyset_predicate(sort_column: ColumnElement[Any], cursor: Cursor | None) -> list[Any]:
    """WHERE terms restricting *sort_column* to rows after *cursor*."""
    if cursor is None:
        return []
    return [sort_column < cursor.sort_id]


@dataclass(frozen=True)
class Page:
    """One page of a listing."""

    results: list[dict[str, Any]] = field(default_factory=list)
    next_offset: str | None = None

    @property
    def count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"count": self.count, "results": self.results}
        if self.next_offset is not None:
            data["next_offset"] = self.next_offset
        return data


def build_page(results: list[dict[str, Any]], limit: int) -> Page:
    """Wrap mapped *results*, issuing a cursor only when the page is full.

    A short page means the result set is exhausted: no cursor is issued.
    """
    next_offset = None
    if results and len(results) >= limit:
        next_offset = encode_cursor(results[-1]["sort_id"])
    return Page(results=results, next_offset=next_offset)
