"""Custom exception hierarchy for solbuild-core.

This module defines the exception classes raised by the build pipeline:
- SolbuildError: Base exception for all solbuild errors
- ConfigurationError: compiler.json or option validation failed
- ResolutionError / CyclicDependencyError: source lookup failures
- VersionSelectionError and subclasses: no usable compiler version
- DownloadFailedError: compiler binary could not be fetched
- CompilationError and subclasses: the compiler or its output failed
- ArtifactError: an existing artifact file is unreadable

User-facing messages are safe to display. Technical details passed as
``internal_details`` are logged via structlog and never shown to the user.
"""

from __future__ import annotations

from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class SolbuildError(Exception):
    """Base exception for solbuild.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details, logged but never
            exposed to the user.

    Example:
        >>> raise SolbuildError(
        ...     "Build failed",
        ...     internal_details="solc exited with status 139",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "solbuild_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(SolbuildError):
    """Raised when compiler.json or compiler options are invalid.

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field.

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid compiler options",
        ...     file_path="compiler.json",
        ...     field_path="compilerSettings.optimizer",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class ResolutionError(SolbuildError):
    """Raised when no resolver in the chain can produce a source.

    Attributes:
        import_path: The reference that failed to resolve.
    """

    def __init__(
        self,
        import_path: str,
        *,
        message: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            message or f"Failed to resolve {import_path}",
            internal_details=internal_details,
        )
        self.import_path = import_path


class CyclicDependencyError(ResolutionError):
    """Raised when a source imports itself, directly or transitively.

    Attributes:
        cycle: Import paths forming the cycle, first element repeated last.

    Example:
        >>> raise CyclicDependencyError(["A.sol", "B.sol", "A.sol"])
        # User sees: "Cyclic import detected: A.sol -> B.sol -> A.sol"
    """

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(cycle[0], message=f"Cyclic import detected: {' -> '.join(cycle)}")
        self.cycle = cycle


class VersionSelectionError(SolbuildError):
    """Base class for failures choosing a compiler version."""

    pass


class PragmaNotFoundError(VersionSelectionError):
    """Raised when a source declares no ``pragma solidity`` version range."""

    def __init__(self, source_path: str) -> None:
        super().__init__(f"Could not find Solidity version range in {source_path}")
        self.source_path = source_path


class NoSatisfyingVersionError(VersionSelectionError):
    """Raised when no catalog version satisfies a source's version range.

    Attributes:
        source_path: Source whose pragma could not be satisfied.
        version_range: The declared range.
        available_versions: Versions that were considered.
    """

    def __init__(
        self,
        source_path: str,
        version_range: str,
        available_versions: list[str],
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"No available compiler version satisfies '{version_range}' required by {source_path}",
            internal_details=internal_details,
        )
        self.source_path = source_path
        self.version_range = version_range
        self.available_versions = available_versions


class UnknownCompilerVersionError(VersionSelectionError):
    """Raised when a version is requested that has no known binary."""

    def __init__(self, version: str, available_versions: list[str]) -> None:
        available_str = ", ".join(available_versions) if available_versions else "none"
        super().__init__(f"Unknown compiler version '{version}'. Available: {available_str}")
        self.version = version
        self.available_versions = available_versions


class DownloadFailedError(SolbuildError):
    """Raised when a compiler binary cannot be fetched.

    Covers non-200 responses, transport errors and timeouts. There is no
    automatic retry; callers re-run the build.

    Attributes:
        build: Build identifier that was requested.
        url: URL that was fetched.
        status_code: HTTP status, if a response was received.
    """

    def __init__(
        self,
        build: str,
        url: str,
        *,
        status_code: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(f"Failed to load {build}", internal_details=internal_details)
        self.build = build
        self.url = url
        self.status_code = status_code


class CompilationError(SolbuildError):
    """Base class for failures during or after compiler invocation."""

    pass


class CompilationFailedError(CompilationError):
    """Raised when the compiler reports at least one non-warning diagnostic.

    The whole version batch fails; no artifact of the batch is written.

    Attributes:
        solc_version: Compiler version of the failed batch.
        errors: Fatal diagnostics as returned by the compiler.
    """

    def __init__(
        self,
        solc_version: str,
        errors: list[dict[str, Any]],
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"Compilation errors encountered ({len(errors)} with solc {solc_version})",
            internal_details=internal_details,
        )
        self.solc_version = solc_version
        self.errors = errors


class OutputMissingError(CompilationError):
    """Raised when compiler output has no entry for an expected contract.

    A contract must be named after its file (``Token`` in ``Token.sol``).
    """

    def __init__(self, contract_name: str, contract_path: str) -> None:
        super().__init__(
            f"Contract {contract_name} not found in {contract_path}. "
            "Please make sure your contract has the same name as its file name"
        )
        self.contract_name = contract_name
        self.contract_path = contract_path


class ArtifactError(SolbuildError):
    """Raised when an existing artifact file cannot be loaded.

    The build stops rather than overwrite an artifact whose deployment
    records could not be read.
    """

    def __init__(self, artifact_path: str, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Existing artifact {artifact_path} is invalid",
            internal_details=internal_details,
        )
        self.artifact_path = artifact_path
