"""Ordered resolver chain."""

from __future__ import annotations

from solbuild_core.resolvers.base import Resolver, SourceUnit


class FallthroughResolver(Resolver):
    """Try resolvers in the order they were appended; first hit wins.

    Example:
        >>> resolver = FallthroughResolver()
        >>> resolver.append_resolver(RelativeFSResolver("contracts"))
        >>> resolver.append_resolver(NameResolver("contracts"))
        >>> resolver.resolve("Token").path
        'Token.sol'
    """

    def __init__(self, resolvers: list[Resolver] | None = None) -> None:
        self._resolvers: list[Resolver] = list(resolvers or [])

    @property
    def resolvers(self) -> tuple[Resolver, ...]:
        """Resolvers in priority order."""
        return tuple(self._resolvers)

    def append_resolver(self, resolver: Resolver) -> None:
        """Add ``resolver`` at the lowest priority."""
        self._resolvers.append(resolver)

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        for resolver in self._resolvers:
            source = resolver.resolve_if_exists(import_path)
            if source is not None:
                return source
        return None
