"""Filesystem resolvers.

- FSResolver: path relative to the working directory, or absolute
- RelativeFSResolver: path relative to a fixed directory (the contracts dir)
"""

from __future__ import annotations

from pathlib import Path

from solbuild_core.resolvers.base import Resolver, SourceUnit, read_source


class FSResolver(Resolver):
    """Resolve a reference as a plain filesystem path."""

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        file_path = Path(import_path)
        if file_path.is_file():
            return read_source(file_path, import_path)
        return None


class RelativeFSResolver(Resolver):
    """Resolve a reference relative to ``contracts_dir``.

    The returned unit keeps the reference as its path, so compiler output
    is keyed the same way the import was written.
    """

    def __init__(self, contracts_dir: Path | str) -> None:
        self.contracts_dir = Path(contracts_dir)

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        file_path = self.contracts_dir / import_path
        if file_path.is_file():
            return read_source(file_path, import_path)
        return None
