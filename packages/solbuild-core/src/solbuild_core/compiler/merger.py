"""Artifact loading, merging and persistence.

An artifact is rebuilt from fresh compiler output on every compile, but the
fields owned by deployment tooling (``networks`` and anything unknown to
this package) are carried forward from the artifact already on disk.

Merge order:
1. defaults (latest schema, empty networks)
2. the existing artifact, if any
3. the fields produced by this compile, unconditionally
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from solbuild_core.compiler.models import (
    LATEST_ARTIFACT_VERSION,
    CompilerInfo,
    ContractArtifact,
)
from solbuild_core.errors import ArtifactError, OutputMissingError

logger = structlog.get_logger(__name__)

ARTIFACT_FILE_EXTENSION = ".json"
ARTIFACT_INDENT = 4


def get_artifact_path(artifacts_dir: Path, contract_name: str) -> Path:
    """Return ``<artifacts_dir>/<contract_name>.json``."""
    return artifacts_dir / f"{contract_name}{ARTIFACT_FILE_EXTENSION}"


def load_artifact_if_exists(artifacts_dir: Path, contract_name: str) -> ContractArtifact | None:
    """Load the artifact for ``contract_name`` if one has been written.

    Raises:
        ArtifactError: If the file exists but is not a valid artifact.
    """
    path = get_artifact_path(artifacts_dir, contract_name)
    if not path.is_file():
        return None
    try:
        return parse_artifact(path.read_bytes().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, PydanticValidationError) as e:
        raise ArtifactError(str(path), internal_details=str(e)) from e


def parse_artifact(text: str) -> ContractArtifact:
    """Parse a serialized artifact."""
    return ContractArtifact.model_validate(json.loads(text))


def serialize_artifact(artifact: ContractArtifact) -> str:
    """Serialize ``artifact`` with sorted keys for reproducible diffs."""
    data = artifact.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=ARTIFACT_INDENT, sort_keys=True) + "\n"


class ArtifactMerger:
    """Build and persist artifacts from compiler output.

    Attributes:
        artifacts_dir: Directory artifacts are written to.
    """

    def __init__(self, artifacts_dir: Path) -> None:
        self.artifacts_dir = artifacts_dir

    def merge(
        self,
        contract_name: str,
        contract_path: str,
        compiled: dict[str, Any],
        source_tree_hash_hex: str,
        compiler: CompilerInfo,
        source_codes: dict[str, str],
        current_artifact: ContractArtifact | None,
    ) -> ContractArtifact:
        """Produce the artifact to persist for one contract.

        Args:
            contract_name: Contract name, which must equal the file base name.
            contract_path: Source path the contract was compiled from.
            compiled: Full Standard JSON output of the batch.
            source_tree_hash_hex: Source tree hash of the contract.
            compiler: Identity of the compiler used.
            source_codes: Source text of every file in the compilation.
            current_artifact: The artifact on disk, if any.

        Returns:
            The merged artifact (not yet written).

        Raises:
            OutputMissingError: If the output has no entry for the contract.
        """
        contract_output = compiled.get("contracts", {}).get(contract_path, {}).get(contract_name)
        if contract_output is None:
            raise OutputMissingError(contract_name, contract_path)

        replaced: dict[str, Any] = {
            "schema_version": LATEST_ARTIFACT_VERSION,
            "compiler_output": copy.deepcopy(contract_output),
            "sources": copy.deepcopy(compiled.get("sources", {})),
            "source_codes": dict(source_codes),
            "source_tree_hash_hex": source_tree_hash_hex,
            "compiler": compiler.model_copy(deep=True),
        }

        if current_artifact is None:
            return ContractArtifact(contract_name=contract_name, networks={}, **replaced)
        return current_artifact.model_copy(update=replaced, deep=True)

    def persist(self, artifact: ContractArtifact) -> Path:
        """Write ``artifact`` to the artifacts directory.

        Returns:
            Path of the written file.
        """
        path = get_artifact_path(self.artifacts_dir, artifact.contract_name)
        path.write_text(serialize_artifact(artifact))
        logger.info("artifact_saved", contract=artifact.contract_name, path=str(path))
        return path
