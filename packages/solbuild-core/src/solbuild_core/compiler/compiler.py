"""Compiler class for solbuild.

This module implements the Compiler that turns the Solidity contracts of a
project into JSON artifacts, recompiling only what changed:

1. Resolve each requested contract and hash its import tree
2. Compare against the artifact on disk to decide what is stale
3. Select a compiler version per stale contract from its pragma
4. Compile each version batch and merge the output into artifacts

Batches run one at a time in ascending version order. Artifacts from batches
that finished stay on disk if a later batch fails.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import semantic_version
import structlog

from solbuild_core.compiler.batcher import CompileBatcher
from solbuild_core.compiler.invoker import CompileInvoker
from solbuild_core.compiler.merger import ArtifactMerger
from solbuild_core.compiler.models import (
    COMPILER_NAME,
    CompilationSummary,
    CompilerInfo,
    ContractArtifact,
)
from solbuild_core.compiler.solc import SolcProvider
from solbuild_core.compiler.source_tree import SourceTreeHasher
from solbuild_core.config import CompilerOptions, load_compiler_options
from solbuild_core.resolvers import (
    SOLIDITY_FILE_EXTENSION,
    NameResolver,
    build_default_resolver,
)

logger = structlog.get_logger(__name__)


class Compiler:
    """Compile Solidity contracts and save the results as artifact files.

    Options passed in take precedence over a compiler.json (or
    compiler.yaml) in the working directory, which takes precedence over
    defaults.

    Example:
        >>> compiler = Compiler({"contracts": ["Token"]})
        >>> summary = compiler.compile()
        >>> summary.compiled
        {'0.8.20+commit.a1b79de6': ['Token']}
    """

    def __init__(
        self,
        opts: CompilerOptions | dict[str, Any] | None = None,
        *,
        solc_provider: SolcProvider | None = None,
        search_dir: Path | None = None,
    ) -> None:
        """Initialize the Compiler.

        Args:
            opts: Explicit options; only the fields that were set override
                the config file.
            solc_provider: Compiler binary provider. Defaults to one backed by
                ``solcBinDir`` and the built-in release catalog.
            search_dir: Directory searched for a config file (default: cwd).

        Raises:
            ConfigurationError: If the options or config file are invalid.
        """
        if isinstance(opts, CompilerOptions):
            overrides = opts.model_dump(include=opts.model_fields_set)
        else:
            overrides = opts
        self.options = load_compiler_options(overrides, search_dir=search_dir)

        self._name_resolver = NameResolver(self.options.contracts_dir)
        self._resolver = build_default_resolver(self.options.contracts_dir, self._name_resolver)
        self._provider = solc_provider or SolcProvider(
            self.options.solc_bin_dir,
            timeout=self.options.download_timeout,
        )
        self._invoker = CompileInvoker(self._provider, self._resolver)
        self._merger = ArtifactMerger(self.options.artifacts_dir)

    def compile(self) -> CompilationSummary:
        """Compile the selected contracts and write their artifacts.

        Returns:
            Which contracts were compiled (by compiler version) and skipped.

        Raises:
            ResolutionError: If a contract or import cannot be resolved.
            VersionSelectionError: If a contract has no usable compiler.
            DownloadFailedError: If a compiler binary cannot be fetched.
            CompilationError: If a batch fails to compile or lacks output.
            ArtifactError: If an existing artifact cannot be read.
        """
        self.options.artifacts_dir.mkdir(parents=True, exist_ok=True)
        if self.options.solc_version is not None:
            self._provider.get_full_version(self.options.solc_version)

        contract_names = self._get_contract_names()
        batcher = CompileBatcher(
            self._resolver,
            SourceTreeHasher(self._resolver),
            artifacts_dir=self.options.artifacts_dir,
            compiler_settings=self.options.compiler_settings,
            available_versions=self._provider.available_versions(),
            solc_version=self.options.solc_version,
        )
        plan = batcher.plan(contract_names)

        compiled: dict[str, list[str]] = {}
        warnings: list[str] = []
        for solc_version in sorted(plan.batches, key=semantic_version.Version):
            batch = plan.batches[solc_version]
            logger.info(
                "compiling_batch",
                solc_version=solc_version,
                count=len(batch.contracts_to_compile),
                contracts=batch.contracts_to_compile,
            )
            result = self._invoker.invoke(solc_version, batch.standard_input)
            warnings.extend(result.warnings)

            compiler_info = CompilerInfo(
                name=COMPILER_NAME,
                version=result.full_version,
                settings=self.options.compiler_settings,
            )
            source_codes = {
                path: self._resolver.resolve(path).source for path in result.output.get("sources", {})
            }

            # Merge the whole batch before writing so a missing output leaves it untouched
            artifacts: list[ContractArtifact] = []
            for contract_path in batch.contracts_to_compile:
                data = plan.contract_data[contract_path]
                artifacts.append(
                    self._merger.merge(
                        data.contract_name,
                        contract_path,
                        result.output,
                        data.source_tree_hash_hex,
                        compiler_info,
                        source_codes,
                        data.current_artifact,
                    )
                )
            for artifact in artifacts:
                self._merger.persist(artifact)
                compiled.setdefault(result.full_version, []).append(artifact.contract_name)

        return CompilationSummary(compiled=compiled, skipped=plan.skipped, warnings=warnings)

    def _get_contract_names(self) -> list[str]:
        if not self.options.compiles_all_contracts:
            return list(self.options.contracts)

        names: list[str] = []
        for contract_source in self._name_resolver.get_all():
            name = Path(contract_source.path).name[: -len(SOLIDITY_FILE_EXTENSION)]
            if name not in names:
                names.append(name)
        return names
