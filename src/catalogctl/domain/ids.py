"""Entity id generation and slug derivation.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
Slugs are recomputed whenever the name changes.
"""

from __future__ import annotations

import re
import unicodedata
import uuid

from catalogctl.domain.types import Taxonomy

TYPE_PREFIXES: dict[Taxonomy, str] = {
    Taxonomy.DOMAIN: "dom_",
    Taxonomy.DOMAINPRODUCT: "dpr_",
    Taxonomy.PRODUCT: "prd_",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_id(level: Taxonomy) -> str:
    """Generate a new opaque id for *level*.

    Components are excluded: their id is supplied by the caller and
    combined with the component type into a :class:`ComponentKey`.
    """
    try:
        prefix = TYPE_PREFIXES[level]
    except KeyError:
        msg = f"No generated ids for taxonomy level {level!r}"
        raise ValueError(msg) from None
    return f"{prefix}{uuid.uuid4().hex[:16]}"


def slugify(name: str) -> str:
    """Derive a deterministic slug from *name*.

    Lowercases, folds accents to ASCII, replaces every run of
    non-alphanumeric characters with a single hyphen, and strips
    leading/trailing hyphens.

    Examples:
        >>> slugify("Chemistry")
        'chemistry'
        >>> slugify("(Default Domain-Product)")
        'default-domain-product'
        >>> slugify("  Data  &  Analytics ")
        'data-analytics'
    """
    text = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", text.lower()).strip("-")
