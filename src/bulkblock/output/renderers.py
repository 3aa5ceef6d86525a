"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. Batch ops keep
their payload on failure, so their renderers also handle the error case.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from bulkblock.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from bulkblock.services.result import ServiceResult


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
    elif result.op in _REPORT_OPS and result.data:
        _OP_RENDERERS[result.op](result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return "\n".join([f"ERROR: {result.op}: {msg}", *_failure_messages(result)])

    if result.op == "bulk_block":
        return "\n".join(item["identifier"] for item in result.data.get("items", []))

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(key for key in (_extract_key(item) for item in items) if key)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_key(item: Any) -> str:
    """Extract the most identifying value from a dict item."""
    if isinstance(item, dict):
        for key in ("name", "target", "id"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _failure_messages(result: ServiceResult) -> list[str]:
    """Per-item messages carried by a failed batch op."""
    d = result.data
    if result.op == "bulk_block":
        return [str(err) for err in d.get("errors", [])]
    if result.op == "validate":
        return [o["message"] for o in d.get("outcomes", [])]
    if result.op == "register_accounts":
        return [e["error"] for e in d.get("errors", [])]
    return []


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    if result.ok:
        label = Text("OK", style="bb.ok")
    else:
        label = Text("ERROR", style="bb.error")
    op = Text(f"  {result.op}", style="bb.op")
    console.print(label, op, end="")
    if not result.ok and result.error:
        console.print(Text(f": {result.error.message}"), end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="bb.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="bb.id")
    elif key in ("name", "performer"):
        v = Text(str(value), style="bb.name")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _error_lines(console: Console, errors: list[Any]) -> None:
    for err in errors:
        console.print(Text.assemble(Text("  error ", style="bb.error"), str(err)))


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
    counts = span_data.get("counts") or {}
    if counts:
        line += f"  ({', '.join(f'{k}={v}' for k, v in counts.items())})"

    console.print(line)
    states = span_data.get("states")
    if states:
        console.print(Text(f"{prefix}  states: {' → '.join(states)}", style="dim"))

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="bb.error")
    op = Text(f"  {result.op}", style="bb.op")
    sep = Text(": ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Batch renderers ───────────────────────────────────────────────────


def _render_bulk_block(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a submission report: counts, per-item table, and error messages."""
    _status_line(console, result)
    d = result.data
    for key in ("performer", "reason", "expiry", "success_count"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "errors", len(d.get("errors", [])))

    items = d.get("items", [])
    if items:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Identifier", style="bb.name")
        table.add_column("Status")
        table.add_column("Block ID", style="bb.id", justify="right")
        for item in items:
            status = str(item.get("status", ""))
            block_id = item.get("block_id")
            table.add_row(
                str(item.get("identifier", "")),
                Text(status, style=style_for_status(status)),
                "" if block_id is None else str(block_id),
            )
        console.print(table)

    _error_lines(console, d.get("errors", []))
    if verbose:
        _render_meta(console, result)


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render live validation: candidate count and one line per failing outcome."""
    _status_line(console, result)
    d = result.data
    _field(console, "count", d.get("count", 0))
    _field(console, "valid", d.get("valid", False))
    if verbose:
        for identifier in d.get("identifiers", []):
            console.print(f"    {identifier}")
    _error_lines(console, [o["message"] for o in d.get("outcomes", [])])
    if verbose:
        _render_meta(console, result)


def _render_register(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "count", d.get("count", 0))
    for account in d.get("registered", []):
        console.print(f"    {account['id']}  {account['name']}")
    _error_lines(console, [e["error"] for e in d.get("errors", [])])
    if verbose:
        _render_meta(console, result)


# ── Query renderers ───────────────────────────────────────────────────


def _table(columns: list[tuple[str, str]], items: list[dict[str, Any]]) -> Table:
    """Build a Rich Table from ``(key, header)`` column pairs."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for key, header in columns:
        style = "bb.id" if key == "id" else ""
        table.add_column(header, style=style, no_wrap=key == "id")
    for item in items:
        table.add_row(*(_cell(item.get(key)) for key, _ in columns))
    return table


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _render_list_accounts(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    _field(console, "count", result.data.get("count", 0))
    items = result.data.get("items", [])
    if items:
        console.print(_table([("id", "ID"), ("name", "Name"), ("blocked", "Blocked")], items))
    if verbose:
        _render_meta(console, result)


def _render_list_blocks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "count", result.data.get("count", 0))
    items = result.data.get("items", [])
    if items:
        columns = [
            ("id", "ID"),
            ("target", "Target"),
            ("performer", "Performer"),
            ("expiry", "Expiry"),
            ("reason", "Reason"),
        ]
        console.print(_table(columns, items))
    if verbose:
        _render_meta(console, result)


def _render_audit_log(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render audit entries newest first; params only in verbose mode."""
    _status_line(console, result)
    _field(console, "count", result.data.get("count", 0))
    items = result.data.get("items", [])
    if items:
        columns = [
            ("id", "ID"),
            ("timestamp", "Time"),
            ("action", "Action"),
            ("performer", "Performer"),
            ("target", "Target"),
            ("comment", "Comment"),
        ]
        if verbose:
            columns.append(("params", "Params"))
        console.print(_table(columns, items))
    if verbose:
        _render_meta(console, result)


# ── Init renderer ─────────────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("site_path", "name", "config_path", "db_path"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Batch
    "bulk_block": _render_bulk_block,
    "validate": _render_validate,
    "register_accounts": _render_register,
    # Query
    "list_accounts": _render_list_accounts,
    "list_blocks": _render_list_blocks,
    "audit_log": _render_audit_log,
    # Init
    "init_site": _render_init,
}

_REPORT_OPS = frozenset({"bulk_block", "validate", "register_accounts"})
