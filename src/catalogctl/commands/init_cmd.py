"""Command: catalog initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from catalogctl.commands._base import CatalogCommand
from catalogctl.services.admin import AdminService

if TYPE_CHECKING:
    from catalogctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  catalogctl init
  catalogctl -c ./catalogctl.toml init
  CATALOGCTL_DATABASE__URL=postgresql+psycopg://localhost/catalog catalogctl init"""


@click.command("init", cls=CatalogCommand, examples=_INIT_EXAMPLES)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the catalog schema (idempotent) and report row counts."""
    app.emit(AdminService(app.catalog).init())
