"""View options controlling which keys and related objects a read returns."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

# Kept by every projection so a projected entity can still be addressed.
ALWAYS_KEPT = frozenset({"id"})


class ViewOptions(BaseModel):
    """Which keys to return and which related objects to join.

    With no ``fields`` everything is included.  With ``fields`` and
    ``include_fields=True`` only the listed keys (plus ``id``) are
    returned; with ``include_fields=False`` the listed ones are left out.
    Names may be scalar columns or related objects; an excluded related
    object is never joined, not merely hidden.
    """

    model_config = {"frozen": True}

    fields: tuple[str, ...] = Field(default_factory=tuple)
    include_fields: bool = True

    def includes(self, name: str) -> bool:
        if not self.fields:
            return True
        return (name in self.fields) == self.include_fields

    def project(self, entity: dict[str, Any]) -> dict[str, Any]:
        """Drop the top-level keys of *entity* this view leaves out."""
        if not self.fields:
            return entity
        return {k: v for k, v in entity.items() if k in ALWAYS_KEPT or self.includes(k)}

    @classmethod
    def of(cls, fields: Iterable[str] | None = None, *, include_fields: bool = True) -> ViewOptions:
        cleaned = tuple(f.strip() for f in fields or () if f and f.strip())
        return cls(fields=cleaned, include_fields=include_fields)
