"""Click base classes carrying per-command usage examples.

``--help`` stays short; ``--examples`` prints ready-to-paste invocations
(``catalogctl domain create ...``) and exits before the catalog is
opened.  Commands of a :class:`CatalogGroup` are :class:`CatalogCommand`
unless told otherwise, so ``@group.command(examples=...)`` just works.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click

EXAMPLES_HINT = "Run with --examples for sample invocations."


class ExamplesOption(click.Option):
    """Eager ``--examples`` flag printing *examples* and exiting."""

    def __init__(self, examples: str) -> None:
        self.examples = textwrap.indent(textwrap.dedent(examples).strip("\n"), "  ")
        super().__init__(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=self._show,
            help="Show usage examples.",
        )

    def _show(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


def _attach(cmd: click.Command, examples: str | None, kwargs: dict[str, Any]) -> None:
    if not examples:
        return
    cmd.params.append(ExamplesOption(examples))
    if not kwargs.get("epilog"):
        cmd.epilog = EXAMPLES_HINT


class CatalogCommand(click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        _attach(self, examples, kwargs)


class CatalogGroup(click.Group):
    """Group whose subcommands default to :class:`CatalogCommand`."""

    command_class = CatalogCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        _attach(self, examples, kwargs)
