"""Rich renderers for ServiceResult.

Listing results (``list_*``) render as a table of entities; everything
else renders as a status line followed by key-value fields, with
embedded related objects summarised by name and id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from catalogctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from catalogctl.services.result import ServiceResult

_ENTITY_KEYS = (
    "id",
    "name",
    "slug_name",
    "type",
    "description",
    "sort_id",
    "is_system_generated",
    "is_active",
    "created_at",
    "last_modified_at",
)


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string via Rich."""
    console = create_console()
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    elif result.op.startswith("list_"):
        _render_page(result, console, verbose=verbose)
    else:
        _render_entity(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: ids only for listings, the id for single entities."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    results = result.data.get("results")
    if isinstance(results, list):
        return "\n".join(str(item.get("id", "")) for item in results)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


def _summary(value: Any) -> str:
    if isinstance(value, dict):
        return f"{value.get('name', '')} ({value.get('id', '')})"
    if isinstance(value, list):
        return ", ".join(_summary(v) for v in value) or "-"
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="cat.ok"), Text(f"  {result.op}", style="cat.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="cat.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cat.id")
    elif key == "name":
        v = Text(str(value), style="cat.name")
    else:
        v = Text(_summary(value))
    console.print(k, v)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="cat.error"),
        Text(f"  {result.op}{code}", style="cat.op"),
        Text(msg),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_entity(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in _ENTITY_KEYS:
        if key in data and data[key] is not None:
            _field(console, key, data[key])
    for key, value in data.items():
        if key not in _ENTITY_KEYS:
            _field(console, key, value)
    if verbose and result.meta:
        for k, v in result.meta.items():
            console.print(f"  [dim]{k}:[/dim] {v}")


def _render_page(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    results: list[dict[str, Any]] = result.data.get("results", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cat.id", no_wrap=True)
    table.add_column("Name", style="cat.name")
    table.add_column("Slug")
    if verbose:
        table.add_column("Sort", justify="right")
        table.add_column("Modified", style="dim")
    for item in results:
        style = "cat.system" if item.get("is_system_generated") else ""
        row = [
            Text(str(item.get("id", ""))),
            Text(str(item.get("name", "")), style=style),
            Text(str(item.get("slug_name", ""))),
        ]
        if verbose:
            row += [Text(str(item.get("sort_id", ""))), Text(str(item.get("last_modified_at", "")))]
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(results))} items")
    if result.data.get("next_offset"):
        console.print(f"next cursor: {result.data['next_offset']}")
