"""Console output for solbuild-cli.

All user-facing text goes through the module-level Rich console. Compiler
diagnostics are printed without markup interpretation, since Solidity
messages routinely contain square brackets.
"""

from __future__ import annotations

import json
import os
from typing import Any

from rich.console import Console
from rich.markup import escape

NO_COLOR_ENV_VAR = "NO_COLOR"


def create_console(no_color: bool = False) -> Console:
    """Create the console, honouring ``--no-color`` and $NO_COLOR."""
    disabled = no_color or os.environ.get(NO_COLOR_ENV_VAR) is not None
    return Console(force_terminal=False if disabled else None, no_color=disabled)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print ``✓ message`` in green."""
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print ``✗ message`` in red."""
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print ``⚠ message`` with the whole line in yellow.

    Example:
        >>> warning("Token.sol:4:9: Warning: Unused local variable.")
        ⚠ Token.sol:4:9: Warning: Unused local variable.
    """
    console.print(f"[yellow]⚠ {escape(message)}[/yellow]", highlight=False, **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print a plain status line."""
    console.print(message, **kwargs)


def fatal_diagnostic(message: str) -> None:
    """Print a fatal compiler diagnostic verbatim, in red."""
    console.print(message, style="red", markup=False, highlight=False)


def print_json(data: Any) -> None:
    """Print ``data`` as indented JSON."""
    console.print_json(json.dumps(data))


def set_no_color(no_color: bool) -> None:
    """Replace the module console, e.g. from the ``--no-color`` callback."""
    global console
    console = create_console(no_color=no_color)
