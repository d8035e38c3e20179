"""Compiler version selection from ``pragma solidity`` ranges.

Ranges use npm semver syntax (``^0.8.0``, ``>=0.6.0 <0.7.0``, ``0.5.17``,
``>=0.4.22 <0.9.0 || ^0.8.0``), evaluated with semantic_version's NpmSpec.
The highest available version that satisfies the range wins; pre-releases
sort below their release.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import semantic_version
import structlog

from solbuild_core.compiler.parsing import parse_solidity_version_range
from solbuild_core.errors import NoSatisfyingVersionError
from solbuild_core.resolvers import SourceUnit

logger = structlog.get_logger(__name__)

# ">= 0.8.0" is legal in a pragma but not in npm syntax
_OPERATOR_SPACE_REGEX = re.compile(r"([<>=~^])\s+(?=\d)")


def normalize_version_range(version_range: str) -> str:
    """Collapse whitespace between comparison operators and versions."""
    collapsed = " ".join(version_range.split())
    return _OPERATOR_SPACE_REGEX.sub(r"\1", collapsed)


def max_satisfying(available_versions: Iterable[str], version_range: str) -> str | None:
    """Return the highest version in ``available_versions`` within ``version_range``.

    Args:
        available_versions: Candidate versions (strings, strict semver).
        version_range: npm-style range expression.

    Returns:
        The best version as given in ``available_versions``, or None.

    Raises:
        ValueError: If the range expression is malformed.

    Example:
        >>> max_satisfying(["0.5.9", "0.6.3", "0.6.12", "0.7.0"], ">=0.6.0 <0.7.0")
        '0.6.12'
    """
    spec = semantic_version.NpmSpec(normalize_version_range(version_range))
    by_version = {semantic_version.Version(v): v for v in available_versions}
    best = spec.select(by_version.keys())
    return None if best is None else by_version[best]


def select_version(
    unit: SourceUnit,
    available_versions: Iterable[str],
    override: str | None = None,
) -> str:
    """Choose the compiler version for ``unit``.

    Args:
        unit: Source whose pragma constrains the version.
        available_versions: Versions with a known compiler binary.
        override: Version to use unconditionally, skipping the pragma.

    Returns:
        The selected version.

    Raises:
        PragmaNotFoundError: If the source has no version pragma.
        NoSatisfyingVersionError: If no available version satisfies the
            pragma, or the pragma is not a valid range.
    """
    if override is not None:
        return override

    versions = sorted(available_versions, key=semantic_version.Version)
    version_range = parse_solidity_version_range(unit)
    try:
        selected = max_satisfying(versions, version_range)
    except ValueError as e:
        raise NoSatisfyingVersionError(
            unit.path,
            version_range,
            versions,
            internal_details=f"Invalid version range: {e}",
        ) from e

    if selected is None:
        raise NoSatisfyingVersionError(unit.path, version_range, versions)

    logger.debug("compiler_version_selected", path=unit.path, range=version_range, version=selected)
    return selected
