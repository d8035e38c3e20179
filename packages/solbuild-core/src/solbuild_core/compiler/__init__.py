"""Compiler module for solbuild.

This module exports the Compiler class and the pipeline stages it wires:
- Compiler: build orchestrator
- SourceTreeHasher: source tree hashing for cache invalidation
- select_version / max_satisfying: pragma-based compiler version selection
- SolcProvider / CompilerInstance / NativeSolc: compiler binaries
- CompileBatcher / needs_recompile: build planning
- CompileInvoker: compiler invocation and diagnostics
- ArtifactMerger: artifact merge and persistence
- ContractArtifact and related models
"""

from __future__ import annotations

from solbuild_core.compiler.batcher import CompileBatcher, needs_recompile
from solbuild_core.compiler.bin_paths import BIN_PATHS
from solbuild_core.compiler.compiler import Compiler
from solbuild_core.compiler.invoker import CompileInvoker
from solbuild_core.compiler.merger import (
    ArtifactMerger,
    get_artifact_path,
    load_artifact_if_exists,
    parse_artifact,
    serialize_artifact,
)
from solbuild_core.compiler.models import (
    LATEST_ARTIFACT_VERSION,
    BuildPlan,
    CompilationSummary,
    CompileResult,
    CompilerInfo,
    ContractArtifact,
    ContractData,
    VersionBatch,
)
from solbuild_core.compiler.parsing import (
    get_normalized_error_message,
    parse_dependencies,
    parse_solidity_version_range,
)
from solbuild_core.compiler.solc import CompilerInstance, NativeSolc, SolcProvider
from solbuild_core.compiler.source_tree import SourceTreeHasher
from solbuild_core.compiler.version_selector import max_satisfying, select_version

__all__: list[str] = [
    # Orchestrator
    "Compiler",
    "CompilationSummary",
    # Pipeline stages
    "SourceTreeHasher",
    "select_version",
    "max_satisfying",
    "SolcProvider",
    "CompilerInstance",
    "NativeSolc",
    "BIN_PATHS",
    "CompileBatcher",
    "needs_recompile",
    "CompileInvoker",
    "ArtifactMerger",
    # Artifact I/O
    "get_artifact_path",
    "load_artifact_if_exists",
    "parse_artifact",
    "serialize_artifact",
    # Models
    "LATEST_ARTIFACT_VERSION",
    "ContractArtifact",
    "CompilerInfo",
    "ContractData",
    "VersionBatch",
    "BuildPlan",
    "CompileResult",
    # Source scanning
    "parse_dependencies",
    "parse_solidity_version_range",
    "get_normalized_error_message",
]
