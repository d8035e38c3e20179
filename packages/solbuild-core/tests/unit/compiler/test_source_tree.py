"""Unit tests for source tree hashing."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from solbuild_core.compiler.source_tree import SourceTreeHasher
from solbuild_core.errors import CyclicDependencyError, ResolutionError
from solbuild_core.resolvers import RelativeFSResolver, Resolver, SourceUnit


class DictResolver(Resolver):
    """Resolver over an in-memory mapping, counting lookups."""

    def __init__(self, sources: dict[str, str]) -> None:
        self.sources = sources
        self.lookups: list[str] = []

    def resolve_if_exists(self, import_path: str) -> SourceUnit | None:
        self.lookups.append(import_path)
        if import_path not in self.sources:
            return None
        return SourceUnit(path=import_path, source=self.sources[import_path])


def _sha(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


class TestSourceTreeHasher:
    """Tests for SourceTreeHasher."""

    def test_leaf_is_content_hash(self) -> None:
        """A file without imports hashes to its own content hash."""
        source = "contract A {}"
        hasher = SourceTreeHasher(DictResolver({"A.sol": source}))
        assert hasher.get_source_tree_hash("A.sol") == _sha(source.encode())

    def test_combines_dependencies_in_order(self) -> None:
        """The tree hash covers the source hash and dependency hashes in order."""
        sources = {
            "A.sol": 'import "B.sol";\nimport "C.sol";\ncontract A {}',
            "B.sol": "contract B {}",
            "C.sol": "contract C {}",
        }
        hasher = SourceTreeHasher(DictResolver(sources))
        expected = _sha(
            _sha(sources["A.sol"].encode())
            + _sha(sources["B.sol"].encode())
            + _sha(sources["C.sol"].encode())
        )
        assert hasher.get_source_tree_hash("A.sol") == expected

    def test_hex_is_prefixed(self) -> None:
        """The hex form carries a 0x prefix."""
        hasher = SourceTreeHasher(DictResolver({"A.sol": "contract A {}"}))
        digest = hasher.get_source_tree_hash_hex("A.sol")
        assert digest.startswith("0x")
        assert len(digest) == 2 + 64

    def test_deterministic(self) -> None:
        """Unchanged sources hash identically across hashers."""
        sources = {"A.sol": 'import "B.sol";', "B.sol": "contract B {}"}
        first = SourceTreeHasher(DictResolver(sources)).get_source_tree_hash_hex("A.sol")
        second = SourceTreeHasher(DictResolver(dict(sources))).get_source_tree_hash_hex("A.sol")
        assert first == second

    def test_transitive_change_propagates(self) -> None:
        """Changing a transitive import changes the root hash."""
        sources = {
            "A.sol": 'import "B.sol";',
            "B.sol": 'import "C.sol";',
            "C.sol": "contract C {}",
        }
        before = SourceTreeHasher(DictResolver(sources)).get_source_tree_hash_hex("A.sol")
        changed = {**sources, "C.sol": "contract C { uint x; }"}
        after = SourceTreeHasher(DictResolver(changed)).get_source_tree_hash_hex("A.sol")
        assert before != after

    def test_import_order_matters(self) -> None:
        """Reordering imports changes the hash."""
        base = {"B.sol": "contract B {}", "C.sol": "contract C {}"}
        ab = {**base, "A.sol": 'import "B.sol";\nimport "C.sol";'}
        ba = {**base, "A.sol": 'import "C.sol";\nimport "B.sol";'}
        assert SourceTreeHasher(DictResolver(ab)).get_source_tree_hash(
            "A.sol"
        ) != SourceTreeHasher(DictResolver(ba)).get_source_tree_hash("A.sol")

    def test_shared_dependency_resolved_once(self) -> None:
        """Memoization resolves a diamond's shared base only once."""
        resolver = DictResolver(
            {
                "A.sol": 'import "B.sol";\nimport "C.sol";',
                "B.sol": 'import "D.sol";',
                "C.sol": 'import "D.sol";',
                "D.sol": "contract D {}",
            }
        )
        SourceTreeHasher(resolver).get_source_tree_hash("A.sol")
        assert resolver.lookups.count("D.sol") == 1

    def test_missing_import(self) -> None:
        """An unresolvable import fails the hash."""
        hasher = SourceTreeHasher(DictResolver({"A.sol": 'import "Missing.sol";'}))
        with pytest.raises(ResolutionError, match="Missing.sol"):
            hasher.get_source_tree_hash("A.sol")

    def test_cycle_detected(self) -> None:
        """A cycle raises instead of recursing forever."""
        hasher = SourceTreeHasher(
            DictResolver({"A.sol": 'import "B.sol";', "B.sol": 'import "A.sol";'})
        )
        with pytest.raises(CyclicDependencyError) as exc_info:
            hasher.get_source_tree_hash("A.sol")
        assert exc_info.value.cycle == ["A.sol", "B.sol", "A.sol"]

    def test_self_import_is_cycle(self) -> None:
        """A file importing itself is a cycle."""
        hasher = SourceTreeHasher(DictResolver({"A.sol": 'import "A.sol";'}))
        with pytest.raises(CyclicDependencyError):
            hasher.get_source_tree_hash("A.sol")

    def test_same_line_import_change_propagates(self) -> None:
        """An import sharing a line with the pragma still counts as a dependency."""
        sources = {
            "A.sol": 'pragma solidity ^0.8.0; import "./B.sol";\ncontract A {}',
            "B.sol": "contract B {}",
        }
        before = SourceTreeHasher(DictResolver(sources)).get_source_tree_hash_hex("A.sol")
        changed = {**sources, "B.sol": "contract B { uint x; }"}
        after = SourceTreeHasher(DictResolver(changed)).get_source_tree_hash_hex("A.sol")
        assert before != after

    def test_commented_import_not_resolved(self) -> None:
        """A commented-out import of a deleted file does not break hashing."""
        source = '/* import "./Gone.sol"; */\n// import "Old.sol";\ncontract A {}'
        hasher = SourceTreeHasher(DictResolver({"A.sol": source}))
        assert hasher.get_source_tree_hash("A.sol") == _sha(source.encode())

    def test_line_ending_change_propagates(self, tmp_path: Path) -> None:
        """Switching a dependency from LF to CRLF changes the root hash."""
        (tmp_path / "A.sol").write_bytes(b'import "B.sol";\ncontract A {}\n')
        dependency = tmp_path / "B.sol"

        dependency.write_bytes(b"contract B {\n}\n")
        lf_hash = SourceTreeHasher(RelativeFSResolver(tmp_path)).get_source_tree_hash_hex("A.sol")

        dependency.write_bytes(b"contract B {\r\n}\r\n")
        crlf_hash = SourceTreeHasher(RelativeFSResolver(tmp_path)).get_source_tree_hash_hex("A.sol")

        assert lf_hash != crlf_hash
