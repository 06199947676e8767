"""Command group: Products."""

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
from catalogctl.services.products import ProductService

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_PRODUCT_EXAMPLES = """\
  catalogctl product create "NMR pipeline" --domain-product dpr_0123456789abcdef
  catalogctl product list --domain dom_0123456789abcdef --fields domain_product
  catalogctl product update prd_0123456789abcdef --domain-product dpr_fedcba9876543210"""


@click.group(cls=CatalogGroup, examples=_PRODUCT_EXAMPLES)
@click.pass_obj
def product(app: AppContext) -> None:
    """Create, read, and update Products."""


@product.command()
@click.argument("name")
@click.option("--domain-product", "domain_product_id", required=True, help="Parent id.")
@click.option("--description", default=None, help="Free-text description.")
@click.pass_obj
def create(app: AppContext, name: str, domain_product_id: str, description: str | None) -> None:
    """Create a Product under a DomainProduct."""
    app.emit(
        ProductService(app.catalog).create(
            name, domain_product_id=domain_product_id, description=description
        )
    )


@product.command()
@click.argument("product_id")
@view_options
@click.pass_obj
def get(app: AppContext, product_id: str, fields: str | None, exclude_fields: str | None) -> None:
    """Show one Product with its DomainProduct, Domain and Components."""
    app.emit(ProductService(app.catalog).get(product_id, **view_kwargs(fields, exclude_fields)))


@product.command("list")
@click.option("--name", default=None, help="Substring of the name (slug match).")
@click.option("--domain-product", "domain_products", multiple=True, help="Parent ids.")
@click.option("--domain", "domains", multiple=True, help="Grandparent Domain ids.")
@page_options
@view_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    name: str | None,
    domain_products: tuple[str, ...],
    domains: tuple[str, ...],
    limit: int | None,
    cursor: str | None,
    fields: str | None,
    exclude_fields: str | None,
) -> None:
    """List Products, newest first."""
    filters = collect_changes(
        name=name,
        domain_products=split_csv(domain_products) or None,
        domains=split_csv(domains) or None,
    )
    app.emit(
        ProductService(app.catalog).list(
            filters, limit=limit, cursor=cursor, **view_kwargs(fields, exclude_fields)
        )
    )


@product.command()
@click.argument("product_id")
@click.option("--name", default=None, help="New name (slug is recomputed).")
@click.option("--description", default=None, help="New description.")
@click.option("--domain-product", "domain_product_id", default=None, help="Move under this id.")
@click.pass_obj
def update(
    app: AppContext,
    product_id: str,
    name: str | None,
    description: str | None,
    domain_product_id: str | None,
) -> None:
    """Update a Product, optionally moving it to another DomainProduct."""
    changes = collect_changes(
        name=name, description=description, domain_product_id=domain_product_id
    )
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(ProductService(app.catalog).update(product_id, changes))


@product.command()
@click.argument("product_id")
@click.pass_obj
def deactivate(app: AppContext, product_id: str) -> None:
    """Soft-delete a Product."""
    app.emit(ProductService(app.catalog).deactivate(product_id))
