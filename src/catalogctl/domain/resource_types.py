"""Resource-type add/remove reconciliation."""

from __future__ import annotations

from collections.abc import Iterable


def _clean(values: Iterable[str | None] | None) -> list[str]:
    """Trim, drop empties, and dedupe while keeping first-seen order."""
    trimmed = (value.strip() for value in values or () if value)
    return list(dict.fromkeys(value for value in trimmed if value))


def reconcile(
    add: Iterable[str | None] | None,
    remove: Iterable[str | None] | None,
) -> tuple[list[str], list[str]]:
    """Normalize an add/remove pair of resource-type lists.

    Each list is trimmed and deduplicated; any value present in both is
    dropped from both, so adding and removing the same resource type in
    one request is a no-op.

    Examples:
        >>> reconcile(["a", "b", "a"], ["b", "c"])
        (['a'], ['c'])
        >>> reconcile([" x ", "", None], [])
        (['x'], [])
    """
    to_add = _clean(add)
    to_remove = _clean(remove)
    both = set(to_add) & set(to_remove)
    return (
        [value for value in to_add if value not in both],
        [value for value in to_remove if value not in both],
    )
