"""Rich Console factory and theme for bulkblock output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BB_THEME = Theme(
    {
        "bb.ok": "bold green",
        "bb.error": "bold red",
        "bb.warning": "bold yellow",
        "bb.op": "bold cyan",
        "bb.key": "dim",
        "bb.id": "bold blue",
        "bb.name": "bold",
        "bb.status.blocked": "green",
        "bb.status.block_failed": "red",
        "bb.status.audit_failed": "yellow",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "blocked": "bb.status.blocked",
    "block_failed": "bb.status.block_failed",
    "audit_failed": "bb.status.audit_failed",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=BB_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for an execution status."""
    return _STATUS_STYLES.get(status, "")
