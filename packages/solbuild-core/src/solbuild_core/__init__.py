"""solbuild-core: incremental multi-version Solidity compilation.

This package provides:
- Compiler: compile contracts to JSON artifacts, skipping up-to-date ones
- CompilerOptions: build configuration (compiler.json)
- ContractArtifact: the persisted artifact contract
- Resolvers: pluggable source lookup chain
- JSON Schema export utilities
"""

from __future__ import annotations

__version__ = "0.1.0"

# Compiler and output models
from solbuild_core.compiler import (
    BIN_PATHS,
    LATEST_ARTIFACT_VERSION,
    CompilationSummary,
    Compiler,
    CompilerInfo,
    ContractArtifact,
    SolcProvider,
)

# Configuration
from solbuild_core.config import CompilerOptions, load_compiler_options

# Error types
from solbuild_core.errors import (
    ArtifactError,
    CompilationError,
    CompilationFailedError,
    ConfigurationError,
    CyclicDependencyError,
    DownloadFailedError,
    NoSatisfyingVersionError,
    OutputMissingError,
    PragmaNotFoundError,
    ResolutionError,
    SolbuildError,
    UnknownCompilerVersionError,
    VersionSelectionError,
)

# JSON Schema export functions
from solbuild_core.export import (
    export_artifact_schema,
    export_compiler_options_schema,
)
from solbuild_core.observability import configure_logging

__all__ = [
    "__version__",
    # Compiler
    "Compiler",
    "CompilationSummary",
    "ContractArtifact",
    "CompilerInfo",
    "SolcProvider",
    "BIN_PATHS",
    "LATEST_ARTIFACT_VERSION",
    # Configuration
    "CompilerOptions",
    "load_compiler_options",
    "configure_logging",
    # Errors
    "SolbuildError",
    "ConfigurationError",
    "ResolutionError",
    "CyclicDependencyError",
    "VersionSelectionError",
    "PragmaNotFoundError",
    "NoSatisfyingVersionError",
    "UnknownCompilerVersionError",
    "DownloadFailedError",
    "CompilationError",
    "CompilationFailedError",
    "OutputMissingError",
    "ArtifactError",
    # JSON Schema exports
    "export_artifact_schema",
    "export_compiler_options_schema",
]
