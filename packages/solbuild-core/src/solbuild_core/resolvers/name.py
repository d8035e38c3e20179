"""Contract-name resolver.

Resolves a bare contract name such as ``Token`` to ``Token.sol`` anywhere
below the contracts directory. Also the source of "compile everything".
"""

from __future__ import annotations

from pathlib import Path

from solbuild_core.resolvers.base import EnumerableResolver, SourceUnit, read_source

SOLIDITY_FILE_EXTENSION = ".sol"


class NameResolver(EnumerableResolver):
    """Resolve contract names against files in ``contracts_dir``.

    Unit paths are relative to ``contracts_dir`` with POSIX separators.
    """

    def __init__(self, contracts_dir: Path | str) -> None:
        self.contracts_dir = Path(contracts_dir)

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        contract_file = f"{import_path}{SOLIDITY_FILE_EXTENSION}"
        for file_path in self._source_files():
            if file_path.name == contract_file:
                return self._to_unit(file_path)
        return None

    def get_all(self) -> list[SourceUnit]:
        return [self._to_unit(file_path) for file_path in self._source_files()]

    def _source_files(self) -> list[Path]:
        if not self.contracts_dir.is_dir():
            return []
        return sorted(
            p for p in self.contracts_dir.rglob(f"*{SOLIDITY_FILE_EXTENSION}") if p.is_file()
        )

    def _to_unit(self, file_path: Path) -> SourceUnit:
        relative = file_path.relative_to(self.contracts_dir).as_posix()
        return read_source(file_path, relative)
