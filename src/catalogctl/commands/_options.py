"""Option decorators shared by the entity command groups."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

F = Callable[..., Any]


def split_csv(values: tuple[str, ...] | str | None) -> list[str]:
    """Flatten repeatable and/or comma-separated option values."""
    if not values:
        return []
    if isinstance(values, str):
        values = (values,)
    return [part.strip() for value in values for part in value.split(",") if part.strip()]


def view_options(func: F) -> F:
    """``--fields`` / ``--exclude-fields`` for reads; names may be scalar keys or related objects."""
    func = click.option(
        "--exclude-fields",
        default=None,
        help="Comma-separated keys or related objects to leave out (never joined).",
    )(func)
    func = click.option(
        "--fields",
        default=None,
        help="Comma-separated keys or related objects to return (id always kept).",
    )(func)
    return func


def view_kwargs(fields: str | None, exclude_fields: str | None) -> dict[str, Any]:
    """Translate the view options into service keyword arguments."""
    if fields and exclude_fields:
        msg = "--fields and --exclude-fields are mutually exclusive"
        raise click.UsageError(msg)
    if exclude_fields:
        return {"fields": split_csv(exclude_fields), "include_fields": False}
    return {"fields": split_csv(fields), "include_fields": True}


def page_options(func: F) -> F:
    """``--limit`` / ``--cursor`` for listings."""
    func = click.option(
        "--cursor",
        default=None,
        help="Continuation token (next_offset of the previous page).",
    )(func)
    func = click.option(
        "--limit",
        type=click.IntRange(min=1),
        default=None,
        help="Page size (defaults to [pagination] default_limit).",
    )(func)
    return func


def collect_changes(**options: Any) -> dict[str, Any]:
    """Keep only the options the user actually passed."""
    return {key: value for key, value in options.items() if value is not None}
