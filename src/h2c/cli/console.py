"""CLI console helpers with optional Rich support.

Diagnostics go to stderr through Rich when it is installed.  The command
line itself is written to stdout untouched by any renderer, since it is
meant to be pasted into a shell.
"""

from __future__ import annotations

import sys
from typing import Any

from h2c.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console() -> Any:
    """Create a Rich console instance targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console()
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


def emit(line: str) -> None:
    """Write one raw line to stdout.

    Undecodable input bytes, carried as surrogates, are written back as
    the original bytes.
    """
    text = f"{line}\n"
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        sys.stdout.write(text)
        return
    sys.stdout.flush()
    buffer.write(text.encode(sys.stdout.encoding or "utf-8", "surrogateescape"))
    buffer.flush()


def escape(text: str) -> str:
    """Escape Rich markup in user-supplied *text*."""
    try:
        from rich.markup import escape as rich_escape
    except ModuleNotFoundError:
        return text
    return rich_escape(text)
