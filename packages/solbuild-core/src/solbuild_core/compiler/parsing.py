"""Lightweight source scanning.

Only two facts are read from Solidity source: the import references and the
``pragma solidity`` version range. No grammar is parsed; comments are blanked
out first so commented-out imports and pragmas are not picked up.
"""

from __future__ import annotations

import posixpath
import re

from solbuild_core.errors import PragmaNotFoundError
from solbuild_core.resolvers import SourceUnit

# import "a.sol"; import 'a.sol'; import {A} from "a.sol"; import * as A from "a.sol";
IMPORT_REGEX = re.compile(r"\bimport\s[^;]*?[\"']([^\"']+)[\"']")
# String literals are matched so comment markers inside them are left alone
COMMENT_REGEX = re.compile(
    r"(\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*')|//[^\n]*|/\*.*?\*/",
    re.DOTALL,
)
VERSION_RANGE_REGEX = re.compile(r"pragma\s+solidity\s+([^;]*);")
SOLIDITY_PATH_REGEX = re.compile(r"\S*\.sol")


def strip_comments(source: str) -> str:
    """Replace every comment in ``source`` with a single space."""
    return COMMENT_REGEX.sub(lambda m: m.group(1) or " ", source)


def parse_dependencies(unit: SourceUnit) -> list[str]:
    """Return the import references of ``unit`` in source order.

    Relative references are joined onto the unit's directory so that they
    resolve the same way the compiler resolves them.

    Args:
        unit: Source to scan.

    Returns:
        Import references; duplicates are kept.

    Example:
        >>> unit = SourceUnit(path="tokens/Token.sol", source='import "./Lib.sol";')
        >>> parse_dependencies(unit)
        ['tokens/Lib.sol']
    """
    dependencies: list[str] = []
    for match in IMPORT_REGEX.finditer(strip_comments(unit.source)):
        dependency_path = match.group(1)
        if dependency_path.startswith("."):
            dependency_path = posixpath.normpath(
                posixpath.join(posixpath.dirname(unit.path), dependency_path)
            )
        dependencies.append(dependency_path)
    return dependencies


def parse_solidity_version_range(unit: SourceUnit) -> str:
    """Return the version range declared by ``pragma solidity``.

    Raises:
        PragmaNotFoundError: If the source has no version pragma.
    """
    match = VERSION_RANGE_REGEX.search(strip_comments(unit.source))
    if match is None:
        raise PragmaNotFoundError(unit.path)
    return match.group(1).strip()


def get_normalized_error_message(message: str) -> str:
    """Shorten the first .sol path in a compiler message to its base name.

    Messages without a path are returned unchanged.
    """
    match = SOLIDITY_PATH_REGEX.search(message)
    if match is None:
        return message
    error_path = match.group(0)
    return message.replace(error_path, posixpath.basename(error_path), 1)
