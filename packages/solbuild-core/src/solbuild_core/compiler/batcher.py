"""Build planning: which contracts to compile, with which compiler.

A contract is recompiled when any of these hold:
- no artifact exists for it
- its artifact was written by an older schema version
- its artifact was compiled with different compiler settings (by value)
- its source tree hash changed

Everything else is skipped. Contracts to compile are grouped by selected
compiler version; each group gets one Standard JSON request.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from solbuild_core.compiler.merger import load_artifact_if_exists
from solbuild_core.compiler.models import (
    LATEST_ARTIFACT_VERSION,
    BuildPlan,
    ContractArtifact,
    ContractData,
    VersionBatch,
)
from solbuild_core.compiler.source_tree import SourceTreeHasher
from solbuild_core.compiler.version_selector import select_version
from solbuild_core.resolvers import Resolver

logger = structlog.get_logger(__name__)

SOURCE_LANGUAGE = "Solidity"


def needs_recompile(
    current_artifact: ContractArtifact | None,
    source_tree_hash_hex: str,
    compiler_settings: dict[str, Any],
) -> bool:
    """Decide whether an existing artifact is stale.

    Args:
        current_artifact: Artifact on disk, or None.
        source_tree_hash_hex: Freshly computed source tree hash.
        compiler_settings: Settings the build will use.

    Returns:
        True if the contract must be compiled.
    """
    if current_artifact is None:
        return True
    is_on_latest_version = current_artifact.schema_version == LATEST_ARTIFACT_VERSION
    did_settings_change = (
        current_artifact.compiler is None
        or current_artifact.compiler.settings != compiler_settings
    )
    did_source_change = current_artifact.source_tree_hash_hex != source_tree_hash_hex
    return not is_on_latest_version or did_settings_change or did_source_change


class CompileBatcher:
    """Plan a build for a list of contract names.

    Attributes:
        artifacts_dir: Where existing artifacts are looked up.
        compiler_settings: Settings for every request.
        available_versions: Versions with a known compiler binary.
        solc_version: Version override applied to every contract.
    """

    def __init__(
        self,
        resolver: Resolver,
        hasher: SourceTreeHasher,
        *,
        artifacts_dir: Path,
        compiler_settings: dict[str, Any],
        available_versions: Iterable[str],
        solc_version: str | None = None,
    ) -> None:
        self._resolver = resolver
        self._hasher = hasher
        self.artifacts_dir = artifacts_dir
        self.compiler_settings = compiler_settings
        self.available_versions = list(available_versions)
        self.solc_version = solc_version

    def plan(self, contract_names: Iterable[str]) -> BuildPlan:
        """Build the plan for ``contract_names``.

        Raises:
            ResolutionError: If a contract or one of its imports is unresolvable.
            CyclicDependencyError: If a contract's imports form a cycle.
            VersionSelectionError: If no compiler version fits a contract.
            ArtifactError: If an existing artifact cannot be read.
        """
        plan = BuildPlan()

        for contract_name in contract_names:
            contract_source = self._resolver.resolve(contract_name)
            source_tree_hash_hex = self._hasher.get_source_tree_hash_hex(contract_source.path)
            current_artifact = load_artifact_if_exists(self.artifacts_dir, contract_name)

            if not needs_recompile(current_artifact, source_tree_hash_hex, self.compiler_settings):
                logger.debug("contract_up_to_date", contract=contract_name)
                plan.skipped.append(contract_name)
                continue

            plan.contract_data[contract_source.path] = ContractData(
                contract_name=contract_name,
                contract_path=contract_source.path,
                source_tree_hash_hex=source_tree_hash_hex,
                current_artifact=current_artifact,
            )

            solc_version = select_version(
                contract_source,
                self.available_versions,
                override=self.solc_version,
            )
            batch = plan.batches.get(solc_version)
            if batch is None:
                batch = VersionBatch(
                    solc_version=solc_version,
                    standard_input={
                        "language": SOURCE_LANGUAGE,
                        "sources": {},
                        "settings": copy.deepcopy(self.compiler_settings),
                    },
                )
                plan.batches[solc_version] = batch

            batch.standard_input["sources"][contract_source.path] = {
                "content": contract_source.source,
            }
            if contract_source.path not in batch.contracts_to_compile:
                batch.contracts_to_compile.append(contract_source.path)

        return plan
