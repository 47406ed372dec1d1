"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pubctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from pubctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["identifier"]) for item in items if "identifier" in item)
    if result.op == "show":
        return str(result.data.get("identifier", ""))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="pub.ok")
    op = Text(f"  {result.op}", style="pub.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pub.key")
    if key == "identifier":
        v = Text(str(value), style="pub.id")
    elif key == "path":
        v = Text(str(value), style="pub.path")
    elif key == "title":
        v = Text(str(value), style="pub.title")
    elif key == "state":
        v = Text(str(value), style="pub.state")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _render_broken_links(console: Console, broken: dict[str, list[str]]) -> None:
    if not broken:
        return
    console.print("\n[bold]broken links[/bold]")
    for source, targets in broken.items():
        for target in targets:
            link = escape(f"[{source}] -> {target}")
            console.print(f"  [pub.warning]warning[/pub.warning] {link}")


def _document_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table of document summaries in publish order."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Date", style="pub.date", no_wrap=True)
    table.add_column("Identifier", style="pub.id", no_wrap=True)
    table.add_column("Title", style="pub.title")
    if verbose:
        table.add_column("Path", style="pub.path")

    for item in items:
        row = [
            str(item.get("date", "")),
            str(item.get("identifier", "")),
            escape(str(item.get("title", ""))),
        ]
        if verbose:
            row.append(str(item.get("path") or ""))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    label = Text("ERROR", style="pub.error")
    op = Text(f"  {result.op}", style="pub.op")
    issues = (err.detail or {}).get("errors", []) if err else []
    if len(issues) > 1:
        console.print(label, op, Text(" — "), f"{len(issues)} errors")
        for issue in issues:
            where = f" {escape(str(issue['path']))}" if issue.get("path") else ""
            msg = escape(str(issue["message"]))
            line = f"  [pub.error]{issue['code']}[/pub.error]{where}: {msg}"
            console.print(line, soft_wrap=True)
    else:
        msg = err.message if err else "Unknown error"
        console.print(label, op, Text(" — "), Text(msg), soft_wrap=True)

    if verbose and result.data.get("history"):
        console.print(f"  history: {' -> '.join(result.data['history'])}")
        _render_meta(console, result)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a completed publish cycle."""
    _status_line(console, result)
    d = result.data
    _field(console, "sources", d.get("sources", 0))
    _field(console, "published", d.get("published", 0))
    outputs = d.get("outputs", [])
    if outputs:
        _field(console, "outputs", ", ".join(outputs))
    broken = d.get("broken_links", {})
    if broken:
        _field(console, "broken_links", sum(len(t) for t in broken.values()))
    if verbose:
        _field(console, "state", d.get("state", ""))
        if d.get("orphans"):
            _field(console, "orphans", ", ".join(d["orphans"]))
        _render_meta(console, result)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results: a one-line verdict plus any non-fatal issues."""
    d = result.data
    broken = d.get("broken_links", {})
    warnings = d.get("warnings", [])
    count = len(d.get("identifiers", []))

    if not broken and not warnings:
        console.print(f"[pub.ok]OK[/pub.ok]  {count} documents, no issues found.")
    else:
        console.print(f"[pub.ok]OK[/pub.ok]  {count} documents")
        if warnings:
            console.print("\n[bold]warnings[/bold]")
            for w in warnings:
                where = f" {escape(str(w['path']))}" if w.get("path") else ""
                msg = escape(str(w["message"]))
                line = f"  [pub.warning]{w['code']}[/pub.warning]{where}: {msg}"
                console.print(line, soft_wrap=True)
        _render_broken_links(console, broken)

    if verbose:
        if d.get("orphans"):
            console.print(f"\norphans: {', '.join(d['orphans'])}")
        _render_meta(console, result)


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the publish-ordered document list as a table."""
    items = result.data.get("items", [])
    if not items:
        console.print("No documents found.")
        return
    console.print(_document_table(items, verbose=verbose))
    if verbose:
        _render_meta(console, result)


def _render_show(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render one document as a panel with metadata and link information."""
    d = result.data
    lines: list[str] = []
    for key in ("date", "description", "featured_image", "path"):
        val = d.get(key)
        if val is not None:
            lines.append(f"{key}: {val}")

    links = d.get("links", [])
    backlinks = d.get("backlinks", [])
    broken = d.get("broken_links", [])
    if links:
        lines.append(f"links out: {', '.join(links)}")
    if backlinks:
        lines.append(f"links in: {', '.join(backlinks)}")
    if broken:
        lines.append(f"broken: {', '.join(broken)}")

    title = f"{d.get('identifier', '?')} — {d.get('title', 'Untitled')}"
    panel = Panel(Text("\n".join(lines)), title=Text(title), border_style="dim", expand=False)
    console.print(panel)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "build": _render_build,
    "check": _render_check,
    "list": _render_list,
    "show": _render_show,
}
