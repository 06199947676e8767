"""Subcommand modules for catalogctl.

Provides register_commands() which uses deferred imports to keep
``catalogctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the four entity groups and ``init`` on the root CLI group."""
    # --- Groups ---
    from catalogctl.commands.component import component
    from catalogctl.commands.domain import domain
    from catalogctl.commands.domain_product import domain_product
    from catalogctl.commands.product import product

    cli.add_command(domain)
    cli.add_command(domain_product)
    cli.add_command(product)
    cli.add_command(component)

    # --- Standalone commands ---
    from catalogctl.commands.init_cmd import init_cmd

    cli.add_command(init_cmd)
