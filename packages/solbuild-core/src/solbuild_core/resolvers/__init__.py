"""Source resolvers for solbuild.

- Resolver / EnumerableResolver: lookup strategy interfaces
- FallthroughResolver: ordered chain, first hit wins
- URLResolver, NPMResolver, RelativeFSResolver, FSResolver, NameResolver
- build_default_resolver: the chain used by the Compiler
"""

from __future__ import annotations

from pathlib import Path

from solbuild_core.resolvers.base import EnumerableResolver, Resolver, SourceUnit
from solbuild_core.resolvers.fallthrough import FallthroughResolver
from solbuild_core.resolvers.filesystem import FSResolver, RelativeFSResolver
from solbuild_core.resolvers.name import SOLIDITY_FILE_EXTENSION, NameResolver
from solbuild_core.resolvers.npm import NPMResolver
from solbuild_core.resolvers.url import URLResolver


def build_default_resolver(
    contracts_dir: Path | str,
    name_resolver: NameResolver | None = None,
    package_path: Path | str | None = None,
) -> FallthroughResolver:
    """Build the default chain: URL, NPM, relative FS, FS, name.

    Args:
        contracts_dir: Directory holding the project's contracts.
        name_resolver: NameResolver to place last (created if omitted).
        package_path: Directory whose node_modules are searched (default: cwd).

    Returns:
        Configured FallthroughResolver.
    """
    resolver = FallthroughResolver()
    resolver.append_resolver(URLResolver())
    resolver.append_resolver(NPMResolver(package_path or Path.cwd()))
    resolver.append_resolver(RelativeFSResolver(contracts_dir))
    resolver.append_resolver(FSResolver())
    resolver.append_resolver(name_resolver or NameResolver(contracts_dir))
    return resolver


__all__: list[str] = [
    "Resolver",
    "SourceUnit",
    "EnumerableResolver",
    "FallthroughResolver",
    "URLResolver",
    "NPMResolver",
    "RelativeFSResolver",
    "FSResolver",
    "NameResolver",
    "SOLIDITY_FILE_EXTENSION",
    "build_default_resolver",
]
