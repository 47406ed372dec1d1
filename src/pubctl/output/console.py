"""Rich Console factory and theme for pubctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PUB_THEME = Theme(
    {
        "pub.ok": "bold green",
        "pub.error": "bold red",
        "pub.warning": "bold yellow",
        "pub.op": "bold cyan",
        "pub.key": "dim",
        "pub.id": "bold blue",
        "pub.path": "dim",
        "pub.title": "bold",
        "pub.date": "magenta",
        "pub.state": "cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PUB_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
