"""Source tree hashing for cache invalidation.

The source tree hash of a file covers the file's own content and, recursively,
the source tree hashes of everything it imports:

    leaf:      sha256(source)
    otherwise: sha256(sha256(source) || tree_hash(dep_1) || ... || tree_hash(dep_n))

Dependencies are taken in source order, duplicates included. Any byte change
anywhere in the import closure changes the hash of every file above it.
"""

from __future__ import annotations

import hashlib

import structlog

from solbuild_core.compiler.parsing import parse_dependencies
from solbuild_core.errors import CyclicDependencyError
from solbuild_core.resolvers import Resolver

logger = structlog.get_logger(__name__)


class SourceTreeHasher:
    """Compute source tree hashes through a resolver chain.

    Hashes are memoized per import path for the lifetime of the hasher, so
    shared dependencies are hashed once per build. Create a new hasher when
    sources may have changed.

    Example:
        >>> hasher = SourceTreeHasher(resolver)
        >>> hasher.get_source_tree_hash_hex("Token.sol")
        '0x5f1c...'
    """

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver
        self._cache: dict[str, bytes] = {}

    def get_source_tree_hash(self, import_path: str) -> bytes:
        """Return the raw source tree digest of ``import_path``.

        Raises:
            ResolutionError: If the file or one of its imports is unresolvable.
            CyclicDependencyError: If the import graph contains a cycle.
        """
        return self._hash(import_path, [])

    def get_source_tree_hash_hex(self, import_path: str) -> str:
        """Return the source tree digest as a 0x-prefixed hex string."""
        return f"0x{self.get_source_tree_hash(import_path).hex()}"

    def _hash(self, import_path: str, stack: list[str]) -> bytes:
        if import_path in self._cache:
            return self._cache[import_path]
        if import_path in stack:
            cycle = stack[stack.index(import_path) :] + [import_path]
            raise CyclicDependencyError(cycle)

        unit = self._resolver.resolve(import_path)
        dependencies = parse_dependencies(unit)
        source_hash = hashlib.sha256(unit.source.encode("utf-8")).digest()

        if not dependencies:
            tree_hash = source_hash
        else:
            stack.append(import_path)
            dependency_hashes = [self._hash(dependency, stack) for dependency in dependencies]
            stack.pop()
            tree_hash = hashlib.sha256(b"".join([source_hash, *dependency_hashes])).digest()

        logger.debug(
            "source_tree_hashed",
            path=import_path,
            dependencies=len(dependencies),
        )
        self._cache[import_path] = tree_hash
        return tree_hash
