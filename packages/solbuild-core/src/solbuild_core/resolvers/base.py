"""Resolver base classes and the SourceUnit they produce.

A resolver turns an import reference (path, package path, URL or bare
contract name) into a SourceUnit. Resolvers are combined into an ordered
chain by FallthroughResolver.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from solbuild_core.errors import ResolutionError


class SourceUnit(BaseModel):
    """A resolved source file.

    Attributes:
        path: The reference path the source was resolved from. This is the
            unit's identity and the key used in compiler requests.
        source: Full source text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = Field(..., min_length=1, description="Reference path used to resolve the source")
    source: str = Field(..., description="Source text")


def read_source(file_path: Path, import_path: str) -> SourceUnit:
    """Read ``file_path`` as UTF-8 without newline translation.

    Line endings are kept as written so that they count towards the source
    tree hash and reach the compiler unchanged.

    Raises:
        ResolutionError: If the file is not valid UTF-8.
    """
    try:
        source = file_path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise ResolutionError(
            import_path,
            message=f"Source {import_path} is not valid UTF-8",
            internal_details=f"{file_path}: {e}",
        ) from e
    return SourceUnit(path=import_path, source=source)


class Resolver(ABC):
    """Lookup strategy for Solidity sources."""

    @abstractmethod
    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        """Resolve ``import_path``, returning None if this resolver cannot.

        Args:
            import_path: Reference to resolve.

        Returns:
            The resolved source, or None.
        """

    def resolve(self, import_path: str) -> SourceUnit:
        """Resolve ``import_path`` or fail.

        Raises:
            ResolutionError: If the reference cannot be resolved.
        """
        source = self.resolve_if_exists(import_path)
        if source is None:
            raise ResolutionError(import_path)
        return source


class EnumerableResolver(Resolver):
    """Resolver that can also list every source it knows about."""

    @abstractmethod
    def get_all(self) -> list[SourceUnit]:
        """Return every source this resolver can produce."""
