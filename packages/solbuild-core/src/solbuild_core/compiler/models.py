"""Data models for the solbuild compile pipeline.

This module defines:
- CompilerInfo / ContractArtifact: the persisted artifact contract
- ContractData / VersionBatch / BuildPlan: the in-memory build plan
- CompileResult: output of one compiler invocation
- CompilationSummary: what a build did

Artifact Version History:
- 2.0.0: compiler identity, source tree hash and source codes recorded
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Current artifact schema; older artifacts are always recompiled
LATEST_ARTIFACT_VERSION = "2.0.0"

# Compiler name recorded in artifacts
COMPILER_NAME = "solc"


class CompilerInfo(BaseModel):
    """Identity of the compiler that produced an artifact.

    Attributes:
        name: Compiler name (always "solc").
        version: Full compiler version, e.g. "0.8.20+commit.a1b79de6".
        settings: Standard JSON settings the contract was compiled with.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(default=COMPILER_NAME)
    version: str = Field(..., min_length=1)
    settings: dict[str, Any] = Field(default_factory=dict)


class ContractArtifact(BaseModel):
    """Persisted build record for one contract.

    Stored as ``<artifactsDir>/<contractName>.json`` with camelCase keys.

    Field ownership:
    - Replaced on every compile: compiler_output, sources, source_codes,
      source_tree_hash_hex, compiler; schema_version is raised to the latest
    - Carried forward verbatim: networks and any field this package does
      not know about (deployment tooling writes these)

    Attributes:
        schema_version: Artifact schema version.
        contract_name: Contract (and file base) name.
        compiler_output: Compiler output for the contract (abi, evm, ...).
        sources: Compiler ``sources`` section (source ids per path).
        source_codes: Source text of every file in the compilation, by path.
        source_tree_hash_hex: 0x-prefixed hash over the source and its imports.
        compiler: Compiler identity.
        networks: Deployment records keyed by network id.

    Artifacts written by older schema versions may lack the compiler and
    hash fields; they load, and are always recompiled.
    """

    model_config = ConfigDict(
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    schema_version: str = Field(default=LATEST_ARTIFACT_VERSION)
    contract_name: str = Field(..., min_length=1)
    compiler_output: dict[str, Any] = Field(default_factory=dict)
    sources: dict[str, Any] = Field(default_factory=dict)
    source_codes: dict[str, str] = Field(default_factory=dict)
    source_tree_hash_hex: str | None = Field(default=None)
    compiler: CompilerInfo | None = Field(default=None)
    networks: dict[str, Any] = Field(default_factory=dict)


@dataclass
class ContractData:
    """Build-plan entry for a contract that was requested.

    Attributes:
        contract_name: Requested contract name.
        contract_path: Resolved path of the contract's source.
        source_tree_hash_hex: Freshly computed source tree hash.
        current_artifact: The artifact on disk, if any.
    """

    contract_name: str
    contract_path: str
    source_tree_hash_hex: str
    current_artifact: ContractArtifact | None = None


@dataclass
class VersionBatch:
    """Contracts compiled together by one compiler version.

    Attributes:
        solc_version: Selected short compiler version.
        standard_input: Standard JSON request shared by the batch.
        contracts_to_compile: Source paths of the batch's contracts.
    """

    solc_version: str
    standard_input: dict[str, Any]
    contracts_to_compile: list[str] = field(default_factory=list)


class CompilationSummary(BaseModel):
    """Outcome of a build.

    Attributes:
        compiled: Contract names compiled, keyed by full compiler version.
        skipped: Contract names whose artifacts were already up to date.
        warnings: Formatted compiler warnings, in the order reported.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    compiled: dict[str, list[str]] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def compiled_count(self) -> int:
        """Number of contracts compiled in this build."""
        return sum(len(names) for names in self.compiled.values())


@dataclass
class BuildPlan:
    """What a build has to do.

    Attributes:
        contract_data: Plan entries for contracts to compile, by source path.
        batches: Version batches, by selected short version.
        skipped: Names of contracts whose artifacts are up to date.
    """

    contract_data: dict[str, ContractData] = field(default_factory=dict)
    batches: dict[str, VersionBatch] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)


@dataclass
class CompileResult:
    """Output of one compiler invocation.

    Attributes:
        solc_version: Short version the batch was compiled with.
        full_version: Full release version of the compiler.
        output: Parsed Standard JSON output, bytecode 0x-prefixed.
        warnings: Formatted non-fatal diagnostics.
    """

    solc_version: str
    full_version: str
    output: dict[str, Any]
    warnings: list[str] = field(default_factory=list)
