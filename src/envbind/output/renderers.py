"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`; the
table covers every operation a ServiceResult can name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from envbind.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from envbind.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS[result.op]
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="envbind.ok")
    op = Text(f"  {result.op}", style="envbind.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    console.print(Text.assemble((f"  {key}: ", "envbind.key"), str(value)))


def _format_bound(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:g}"


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="envbind.error")
    op = Text(f"  {result.op}", style="envbind.op")
    console.print(label, op, Text("-"), Text(msg))

    if err:
        console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render bound values, one field path per line."""
    _status_line(console, result)
    _field(console, "record", result.data.get("record", ""))
    values: dict[str, Any] = result.data.get("values", {})
    _field(console, "fields", len(values))
    if verbose:
        for path, value in values.items():
            _field(console, path, repr(value))


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the flattened schema as a table."""
    _status_line(console, result)
    _field(console, "record", result.data.get("record", ""))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Field", style="envbind.path", no_wrap=True)
    table.add_column("Type", style="envbind.type")
    table.add_column("Env", style="envbind.env")
    table.add_column("Required", style="envbind.required")
    table.add_column("Default")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")

    for item in result.data.get("fields", []):
        table.add_row(
            str(item.get("path", "")),
            str(item.get("type", "")),
            str(item.get("env", "")),
            "yes" if item.get("required") else "",
            Text(str(item.get("default", ""))),
            _format_bound(item.get("min")),
            _format_bound(item.get("max")),
        )

    console.print(table)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "describe": _render_describe,
}
