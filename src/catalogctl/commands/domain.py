"""Command group: Domains, the roots of the taxonomy."""

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
from catalogctl.services.domains import DomainService

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_DOMAIN_EXAMPLES = """\
  catalogctl domain create "Chemistry" --description "Everything lab related"
  catalogctl domain get dom_0123456789abcdef
  catalogctl domain get dom_0123456789abcdef --exclude-fields domain_products
  catalogctl domain list --name chem --limit 10
  catalogctl domain update dom_0123456789abcdef --name "Applied Chemistry"
  catalogctl domain deactivate dom_0123456789abcdef"""


@click.group(cls=CatalogGroup, examples=_DOMAIN_EXAMPLES)
@click.pass_obj
def domain(app: AppContext) -> None:
    """Create, read, and update Domains."""


@domain.command(
    examples="""\
  catalogctl domain create "Chemistry"
  catalogctl --json domain create "Physics" --description "Matter and energy" """
)
@click.argument("name")
@click.option("--description", default=None, help="Free-text description.")
@click.pass_obj
def create(app: AppContext, name: str, description: str | None) -> None:
    """Create a Domain with its default DomainProduct and Product."""
    app.emit(DomainService(app.catalog).create(name, description=description))


@domain.command()
@click.argument("domain_id")
@view_options
@click.pass_obj
def get(app: AppContext, domain_id: str, fields: str | None, exclude_fields: str | None) -> None:
    """Show one Domain with its DomainProducts and their Products."""
    app.emit(DomainService(app.catalog).get(domain_id, **view_kwargs(fields, exclude_fields)))


@domain.command("list")
@click.option("--name", default=None, help="Substring of the name (slug match).")
@click.option(
    "--domain-product",
    "domain_products",
    multiple=True,
    help="Only Domains holding these DomainProduct ids (repeatable or comma-separated).",
)
@page_options
@view_options
@click.pass_obj
def list_cmd(
    app: AppContext,
    name: str | None,
    domain_products: tuple[str, ...],
    limit: int | None,
    cursor: str | None,
    fields: str | None,
    exclude_fields: str | None,
) -> None:
    """List Domains, newest first."""
    filters = collect_changes(name=name, domain_products=split_csv(domain_products) or None)
    app.emit(
        DomainService(app.catalog).list(
            filters, limit=limit, cursor=cursor, **view_kwargs(fields, exclude_fields)
        )
    )


@domain.command()
@click.argument("domain_id")
@click.option("--name", default=None, help="New name (slug is recomputed).")
@click.option("--description", default=None, help="New description.")
@click.pass_obj
def update(app: AppContext, domain_id: str, name: str | None, description: str | None) -> None:
    """Update a Domain's name or description."""
    changes = collect_changes(name=name, description=description)
    if not changes:
        click.echo("No changes specified. Use --help for options.", err=True)
        raise SystemExit(1)
    app.emit(DomainService(app.catalog).update(domain_id, changes))


@domain.command()
@click.argument("domain_id")
@click.pass_obj
def deactivate(app: AppContext, domain_id: str) -> None:
    """Soft-delete a Domain."""
    app.emit(DomainService(app.catalog).deactivate(domain_id))
