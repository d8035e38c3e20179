"""Unit tests for artifact merging and persistence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from solbuild_core.compiler.merger import (
    ArtifactMerger,
    get_artifact_path,
    load_artifact_if_exists,
    parse_artifact,
    serialize_artifact,
)
from solbuild_core.compiler.models import LATEST_ARTIFACT_VERSION, CompilerInfo, ContractArtifact
from solbuild_core.errors import ArtifactError, OutputMissingError

HASH = "0x" + "ab" * 32
COMPILED: dict[str, Any] = {
    "contracts": {
        "Token.sol": {
            "Token": {"abi": [{"type": "constructor"}], "evm": {"bytecode": {"object": "0x60"}}},
        },
    },
    "sources": {"Token.sol": {"id": 0}},
}
COMPILER = CompilerInfo(
    name="solc",
    version="0.8.20+commit.a1b79de6",
    settings={"optimizer": {"enabled": True, "runs": 200}},
)
SOURCE_CODES = {"Token.sol": "contract Token {}"}


def _merge(merger: ArtifactMerger, current: ContractArtifact | None) -> ContractArtifact:
    return merger.merge("Token", "Token.sol", COMPILED, HASH, COMPILER, SOURCE_CODES, current)


class TestArtifactMerger:
    """Tests for ArtifactMerger.merge."""

    def test_new_artifact(self, tmp_path: Path) -> None:
        """A fresh artifact has empty networks and the latest schema."""
        artifact = _merge(ArtifactMerger(tmp_path), None)

        assert artifact.contract_name == "Token"
        assert artifact.schema_version == LATEST_ARTIFACT_VERSION
        assert artifact.networks == {}
        assert artifact.compiler_output == COMPILED["contracts"]["Token.sol"]["Token"]
        assert artifact.sources == COMPILED["sources"]
        assert artifact.source_codes == SOURCE_CODES
        assert artifact.source_tree_hash_hex == HASH
        assert artifact.compiler == COMPILER

    def test_networks_preserved(self, tmp_path: Path) -> None:
        """Deployment records survive a recompile."""
        current = ContractArtifact(
            contract_name="Token",
            schema_version=LATEST_ARTIFACT_VERSION,
            compiler=CompilerInfo(name="solc", version="0.8.20+commit.a1b79de6", settings={}),
            networks={"1": {"address": "0xabc"}},
        )
        artifact = _merge(ArtifactMerger(tmp_path), current)

        assert artifact.networks == {"1": {"address": "0xabc"}}
        assert artifact.compiler is not None
        assert artifact.compiler.settings == {"optimizer": {"enabled": True, "runs": 200}}

    def test_unknown_fields_preserved(self, tmp_path: Path) -> None:
        """Fields written by other tools are carried forward."""
        current = parse_artifact(
            json.dumps({"contractName": "Token", "schemaVersion": "1.0.0", "updatedAt": "yesterday"})
        )
        artifact = _merge(ArtifactMerger(tmp_path), current)
        data = json.loads(serialize_artifact(artifact))

        assert data["updatedAt"] == "yesterday"
        assert data["schemaVersion"] == LATEST_ARTIFACT_VERSION

    def test_merge_does_not_alias_output(self, tmp_path: Path) -> None:
        """The artifact owns copies of the compiler output."""
        artifact = _merge(ArtifactMerger(tmp_path), None)
        artifact.compiler_output["abi"].append({"type": "fallback"})
        assert len(COMPILED["contracts"]["Token.sol"]["Token"]["abi"]) == 1

    def test_output_missing(self, tmp_path: Path) -> None:
        """A contract not named after its file has no output entry."""
        merger = ArtifactMerger(tmp_path)
        with pytest.raises(OutputMissingError):
            merger.merge("Coin", "Coin.sol", COMPILED, HASH, COMPILER, SOURCE_CODES, None)

    def test_persist_writes_sorted_json(self, tmp_path: Path) -> None:
        """Artifacts are written as camelCase JSON with sorted keys."""
        merger = ArtifactMerger(tmp_path)
        path = merger.persist(_merge(merger, None))

        assert path == tmp_path / "Token.json"
        text = path.read_text()
        data = json.loads(text)
        assert list(data) == sorted(data)
        assert data["contractName"] == "Token"
        assert data["sourceTreeHashHex"] == HASH
        assert text.endswith("\n")


class TestArtifactIO:
    """Tests for artifact loading helpers."""

    def test_path(self, tmp_path: Path) -> None:
        """Artifacts are named after the contract."""
        assert get_artifact_path(tmp_path, "Token") == tmp_path / "Token.json"

    def test_missing_artifact(self, tmp_path: Path) -> None:
        """No file means no artifact."""
        assert load_artifact_if_exists(tmp_path, "Token") is None

    def test_round_trip(self, tmp_path: Path) -> None:
        """A persisted artifact loads back equal."""
        merger = ArtifactMerger(tmp_path)
        artifact = _merge(merger, None)
        merger.persist(artifact)
        assert load_artifact_if_exists(tmp_path, "Token") == artifact

    def test_serialization_is_stable(self, tmp_path: Path) -> None:
        """Serializing a loaded artifact reproduces the file byte for byte."""
        merger = ArtifactMerger(tmp_path)
        path = merger.persist(_merge(merger, None))
        loaded = load_artifact_if_exists(tmp_path, "Token")
        assert loaded is not None
        assert serialize_artifact(loaded) == path.read_text()

    def test_old_artifact_loads(self, tmp_path: Path) -> None:
        """Artifacts without compiler or hash fields still load."""
        (tmp_path / "Token.json").write_text(
            json.dumps({"contractName": "Token", "schemaVersion": "1.0.0", "networks": {}})
        )
        artifact = load_artifact_if_exists(tmp_path, "Token")
        assert artifact is not None
        assert artifact.compiler is None
        assert artifact.source_tree_hash_hex is None

    def test_non_utf8_artifact(self, tmp_path: Path) -> None:
        """An undecodable artifact raises ArtifactError."""
        (tmp_path / "Token.json").write_bytes(b'{"contractName": "\xff"}')
        with pytest.raises(ArtifactError):
            load_artifact_if_exists(tmp_path, "Token")

    @pytest.mark.parametrize("content", ["{broken", json.dumps({"networks": {}})])
    def test_invalid_artifact(self, tmp_path: Path, content: str) -> None:
        """Malformed or incomplete artifacts raise ArtifactError."""
        (tmp_path / "Token.json").write_text(content)
        with pytest.raises(ArtifactError):
            load_artifact_if_exists(tmp_path, "Token")
