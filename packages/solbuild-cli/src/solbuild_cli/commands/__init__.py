"""CLI command modules.

Each module holds one subcommand; they are imported lazily by
``solbuild_cli.main.LazyGroup``.
"""

from __future__ import annotations

__all__: list[str] = []
