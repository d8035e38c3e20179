"""Shared pytest fixtures for solbuild-core tests.

Provides a fake compiler (no native solc needed), a provider serving it,
and helpers for laying out a contracts project on disk.
"""

from __future__ import annotations

import json
import posixpath
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog

from solbuild_core.compiler.solc import CompilerInstance, ImportCallback, SolcProvider

FAKE_CATALOG = {
    "0.5.9": "0.5.9+commit.e560f70d",
    "0.6.3": "0.6.3+commit.8dda9521",
    "0.6.12": "0.6.12+commit.27d51765",
    "0.7.0": "0.7.0+commit.9e61f92b",
    "0.8.20": "0.8.20+commit.a1b79de6",
}

FAKE_BYTECODE = "6080604052"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


class FakeSolc(CompilerInstance):
    """In-process stand-in for a solc binary.

    Every source in the request yields one contract named after its file.
    Diagnostics in ``diagnostics`` are returned with every output.

    Attributes:
        requests: Parsed requests received, in order.
        imports: Paths passed to the import callback, in order.
    """

    def __init__(
        self,
        full_version: str,
        *,
        diagnostics: list[dict[str, Any]] | None = None,
        request_imports: list[str] | None = None,
        omit_contracts: set[str] | None = None,
    ) -> None:
        self.full_version = full_version
        self.diagnostics = diagnostics or []
        self.request_imports = request_imports or []
        self.omit_contracts = omit_contracts or set()
        self.requests: list[dict[str, Any]] = []
        self.imports: list[str] = []

    def compile(self, request_json: str, import_callback: ImportCallback) -> str:
        request = json.loads(request_json)
        self.requests.append(request)
        sources = dict(request["sources"])

        for path in self.request_imports:
            self.imports.append(path)
            result = import_callback(path)
            if "contents" in result:
                sources[path] = {"content": result["contents"]}

        contracts: dict[str, Any] = {}
        for path in sources:
            name = posixpath.basename(path)[: -len(".sol")]
            if name in self.omit_contracts:
                continue
            contracts[path] = {
                name: {
                    "abi": [],
                    "evm": {
                        "bytecode": {"object": FAKE_BYTECODE},
                        "deployedBytecode": {"object": FAKE_BYTECODE},
                    },
                }
            }

        output = {
            "contracts": contracts,
            "sources": {path: {"id": i} for i, path in enumerate(sources)},
            "errors": self.diagnostics,
        }
        return json.dumps(output)


class FakeSolcProvider(SolcProvider):
    """SolcProvider that hands out FakeSolc instances instead of downloading.

    Attributes:
        compiled_versions: Versions requested via get_compiler, in order.
        instances: The FakeSolc created for each version.
    """

    def __init__(self, bin_dir: Path, **solc_kwargs: Any) -> None:
        super().__init__(bin_dir, catalog=FAKE_CATALOG, platform="linux-amd64")
        self.solc_kwargs = solc_kwargs
        self.compiled_versions: list[str] = []
        self.instances: dict[str, FakeSolc] = {}

    def get_compiler(self, version: str) -> CompilerInstance:
        full_version = self.get_full_version(version)
        self.compiled_versions.append(version)
        solc = FakeSolc(full_version, **self.solc_kwargs)
        self.instances[version] = solc
        return solc


@pytest.fixture
def fake_provider(tmp_path: Path) -> FakeSolcProvider:
    """Return a FakeSolcProvider caching into a temporary directory."""
    return FakeSolcProvider(tmp_path / "solc_bin")


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an empty project with a contracts directory and chdir into it.

    Returns:
        The project root.
    """
    root = tmp_path / "project"
    (root / "contracts").mkdir(parents=True)
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def write_contract(project_dir: Path) -> Callable[..., Path]:
    """Return a helper writing a contract source under contracts/.

    Example:
        >>> write_contract("Token.sol", "pragma solidity ^0.8.0; contract Token {}")
    """

    def _write(relative_path: str, source: str) -> Path:
        path = project_dir / "contracts" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return path

    return _write


def contract_source(name: str, pragma: str = "^0.8.0", imports: list[str] | None = None) -> str:
    """Return minimal Solidity source for a contract named ``name``."""
    lines = [f"pragma solidity {pragma};"]
    lines.extend(f'import "{path}";' for path in imports or [])
    lines.append(f"contract {name} {{}}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_source() -> Callable[..., str]:
    """Return the ``contract_source`` helper."""
    return contract_source
