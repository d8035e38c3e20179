"""node_modules package resolver."""

from __future__ import annotations

from pathlib import Path

from solbuild_core.resolvers.base import Resolver, SourceUnit, read_source

NODE_MODULES = "node_modules"


class NPMResolver(Resolver):
    """Resolve ``<package>/<path>`` imports from installed npm packages.

    ``node_modules`` is searched in ``package_path`` and then in each parent
    directory, mirroring Node's module lookup. Scoped packages
    (``@scope/name/path``) are supported.

    Example:
        >>> resolver = NPMResolver(Path.cwd())
        >>> resolver.resolve("@openzeppelin/contracts/token/ERC20/ERC20.sol").path
        '@openzeppelin/contracts/token/ERC20/ERC20.sol'
    """

    def __init__(self, package_path: Path | str) -> None:
        self.package_path = Path(package_path).resolve()

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        if import_path.startswith(("/", ".")):
            return None

        parts = import_path.split("/")
        name_length = 2 if import_path.startswith("@") else 1
        if len(parts) <= name_length:
            return None
        package_name = "/".join(parts[:name_length])
        path_within_package = "/".join(parts[name_length:])

        for directory in (self.package_path, *self.package_path.parents):
            candidate = directory / NODE_MODULES / package_name / path_within_package
            if candidate.is_file():
                return read_source(candidate, import_path)
        return None
