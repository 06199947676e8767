"""Command group: Components, addressed as ``TYPE:component_id``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from catalogctl.commands._base import CatalogGroup
from catalogctl.commands._options import (
    collect_changes,
    page_options,
    split_csv,
    view_kwargs,
    view_options,
)
from catalogctl.domain.types import ComponentType
from catalogctl.services.components import ComponentService

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_TYPES = click.Choice([t.value for t in ComponentType], case_sensitive=False)

_COMPONENT_EXAMPLES = """\
  catalogctl component create spectra-ui --type UI --name "Spectra UI" --product prd_0123456789abcdef
  catalogctl component get UI:spectra-ui
  catalogctl component list --type api --product prd_0123456789abcdef
  catalogctl component update UI:spectra-ui --type LIBRARY"""


@click.group(cls=CatalogGroup, examples=_COMPONENT_EXAMPLES)
@click.pass_obj
def component(app: AppContext) -> None:
    """Create, read, and update Components."""


@component.command()
@click.argument("component_id")
@click.option("--type", "component_type", type=_TYPES, required=True, help="Component type.")
@click.option("--name", required=True, help="Display name.")
@click.option("--product", "product_id", required=True, help="Parent Product id.")
@click.option("--description", default=None, help="Free-text description.")
@click.pass_obj
def create(
    app: AppContext,
    component_id: str,
    component_type: str,
    name: str,
    product_id: str,
    description: str | None,
) -> None:
    """Create a Component under a Product."""
    app.emit(
        ComponentService(app.catalog).create(
            component_id,
            type=component_type,
            name=name,
            product_id=product_id,
            description=description,
        )
    )


@component.command()
@click.argument("key")
@view_options
@click.pass_obj
def get(app: AppContext, key: str, fields: str | None, exclude_fields: str | None) -> None:
    """Show one Component (KEY is TYPE:component_id) with its ancestors."""
    app.emit(ComponentService(app.catalog).get(key, **view_kwargs(fields, exclude_fields)))


@component.command("list")
@click.option("--name", default=None, help="Substring of the name (slug match).")
@click.option("--type", "component_type", type=_TYPES, default=None, help="Component type.")
@click.option("--product", "products", multiple=True, help="Parent Product ids.")
@page_options
@view_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    name: str | None,
    component_type: str | None,
    products: tuple[str, ...],
    limit: int | None,
    cursor: str | None,
    fields: str | None,
    exclude_fields: str | None,
) -> None:
    """List Components, newest first."""
    filters = collect_changes(
        name=name, type=component_type, products=split_csv(products) or None
    )
    app.emit(
        ComponentService(app.catalog).list(
            filters, limit=limit, cursor=cursor, **view_kwargs(fields, exclude_fields)
        )
    )


@component.command()
@click.argument("key")
@click.option("--name", default=None, help="New name (slug is recomputed).")
@click.option("--description", default=None, help="New description.")
@click.option("--type", "component_type", type=_TYPES, default=None, help="New type (rekeys).")
@click.option("--product", "product_id", default=None, help="Move under this Product.")
@click.pass_obj
def update(
    app: AppContext,
    key: str,
    name: str | None,
    description: str | None,
    component_type: str | None,
    product_id: str | None,
) -> None:
    """Update a Component; a new --type changes its key."""
    changes = collect_changes(
        name=name, description=description, type=component_type, product_id=product_id
    )
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(ComponentService(app.catalog).update(key, changes))


@component.command()
@click.argument("key")
@click.pass_obj
def deactivate(app: AppContext, key: str) -> None:
    """Soft-delete a Component."""
    app.emit(ComponentService(app.catalog).deactivate(key))
