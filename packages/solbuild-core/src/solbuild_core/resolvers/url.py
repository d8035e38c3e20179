"""``file://`` URL resolver."""

from __future__ import annotations

from pathlib import Path

from solbuild_core.resolvers.base import Resolver, SourceUnit, read_source

FILE_URL_PREFIX = "file://"


class URLResolver(Resolver):
    """Resolve ``file://`` URLs to the file they name."""

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        if not import_path.startswith(FILE_URL_PREFIX):
            return None
        file_path = Path(import_path[len(FILE_URL_PREFIX) :])
        if not file_path.is_file():
            return None
        return read_source(file_path, import_path)
