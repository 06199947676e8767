"""``catalogctl`` entry point.

The root group only resolves settings and installs an :class:`AppContext`;
the catalog itself is opened by the first command that needs it and
disposed when the Click context closes.
"""

from __future__ import annotations

from pathlib import Path

import click

from catalogctl import __version__
from catalogctl.commands import register_commands
from catalogctl.commands._context import AppContext
from catalogctl.config.settings import CatalogSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="catalogctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids only.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and extra columns.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to catalogctl.toml (default: search upward from the root).",
)
@click.option(
    "--root",
    "catalog_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Catalog directory; the default SQLite database lives under it.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    catalog_root: Path | None,
) -> None:
    """Manage the Domain / DomainProduct / Product / Component catalog."""
    settings = CatalogSettings.from_cli(
        config_path=config_path,
        catalog_root=catalog_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
