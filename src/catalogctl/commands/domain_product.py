"""Command group: DomainProducts and their resource types."""

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
from catalogctl.services.domain_products import DomainProductService

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_DOMAIN_PRODUCT_EXAMPLES = """\
  catalogctl domain-product create "Spectroscopy" --domain dom_0123456789abcdef \\
      --resource-type s3-bucket --resource-type queue
  catalogctl domain-product list --domain dom_0123456789abcdef --resource-type s3-bucket
  catalogctl domain-product resource-types dpr_0123456789abcdef --add topic --remove queue
  catalogctl domain-product update dpr_0123456789abcdef --domain dom_fedcba9876543210"""


@click.group("domain-product", cls=CatalogGroup, examples=_DOMAIN_PRODUCT_EXAMPLES)
@click.pass_obj
def domain_product(app: AppContext) -> None:
    """Create, read, and update DomainProducts."""


@domain_product.command()
@click.argument("name")
@click.option("--domain", "domain_id", required=True, help="Parent Domain id.")
@click.option("--description", default=None, help="Free-text description.")
@click.option(
    "--resource-type",
    "resource_types",
    multiple=True,
    help="Resource type to associate (repeatable or comma-separated).",
)
@click.pass_obj
def create(
    app: AppContext,
    name: str,
    domain_id: str,
    description: str | None,
    resource_types: tuple[str, ...],
) -> None:
    """Create a DomainProduct under a Domain, with its default Product."""
    app.emit(
        DomainProductService(app.catalog).create(
            name,
            domain_id=domain_id,
            description=description,
            resource_types=split_csv(resource_types),
        )
    )


@domain_product.command()
@click.argument("domain_product_id")
@view_options
@click.pass_obj
def get(
    app: AppContext,
    domain_product_id: str,
    fields: str | None,
    exclude_fields: str | None,
) -> None:
    """Show one DomainProduct with its Domain, Products and resource types."""
    app.emit(
        DomainProductService(app.catalog).get(
            domain_product_id, **view_kwargs(fields, exclude_fields)
        )
    )


@domain_product.command("list")
@click.option("--name", default=None, help="Substring of the name (slug match).")
@click.option("--domain", "domains", multiple=True, help="Parent Domain ids.")
@click.option("--product", "products", multiple=True, help="Child Product ids.")
@click.option("--resource-type", "resource_types", multiple=True, help="Resource type names.")
@page_options
@view_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    name: str | None,
    domains: tuple[str, ...],
    products: tuple[str, ...],
    resource_types: tuple[str, ...],
    limit: int | None,
    cursor: str | None,
    fields: str | None,
    exclude_fields: str | None,
) -> None:
    """List DomainProducts, newest first."""
    filters = collect_changes(
        name=name,
        domains=split_csv(domains) or None,
        products=split_csv(products) or None,
        resource_types=split_csv(resource_types) or None,
    )
    app.emit(
        DomainProductService(app.catalog).list(
            filters, limit=limit, cursor=cursor, **view_kwargs(fields, exclude_fields)
        )
    )


@domain_product.command()
@click.argument("domain_product_id")
@click.option("--name", default=None, help="New name (slug is recomputed).")
@click.option("--description", default=None, help="New description.")
@click.option("--domain", "domain_id", default=None, help="Move under this Domain.")
@click.pass_obj
def update(
    app: AppContext,
    domain_product_id: str,
    name: str | None,
    description: str | None,
    domain_id: str | None,
) -> None:
    """Update a DomainProduct, optionally moving it to another Domain."""
    changes = collect_changes(name=name, description=description, domain_id=domain_id)
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(DomainProductService(app.catalog).update(domain_product_id, changes))


@domain_product.command(
    "resource-types",
    examples="""\
  catalogctl domain-product resource-types dpr_0123456789abcdef --add s3-bucket,queue
  catalogctl domain-product resource-types dpr_0123456789abcdef --remove queue""",
)
@click.argument("domain_product_id")
@click.option("--add", multiple=True, help="Resource types to associate.")
@click.option("--remove", multiple=True, help="Resource types to dissociate.")
@click.pass_obj
def resource_types(
    app: AppContext,
    domain_product_id: str,
    add: tuple[str, ...],
    remove: tuple[str, ...],
) -> None:
    """Add and remove resource types in one all-or-nothing step."""
    if not add and not remove:
        click.echo("Nothing to add or remove. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(
        DomainProductService(app.catalog).update_resource_types(
            domain_product_id, add=split_csv(add), remove=split_csv(remove)
        )
    )


@domain_product.command()
@click.argument("domain_product_id")
@click.pass_obj
def deactivate(app: AppContext, domain_product_id: str) -> None:
    """Soft-delete a DomainProduct."""
    app.emit(DomainProductService(app.catalog).deactivate(domain_product_id))
