"""Compiler invocation for one version batch.

Diagnostics with severity "warning" are reported and the build continues.
Any other severity is fatal for the whole batch: all fatal diagnostics are
reported and CompilationFailedError is raised. A batch is one compiler run
over a shared import graph, so there is no partial success within it.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from solbuild_core.compiler.models import CompileResult
from solbuild_core.compiler.parsing import get_normalized_error_message
from solbuild_core.compiler.solc import SolcProvider
from solbuild_core.errors import CompilationFailedError
from solbuild_core.resolvers import Resolver

logger = structlog.get_logger(__name__)

SOLIDITY_WARNING = "warning"
HEX_PREFIX = "0x"


def add_hex_prefix(value: str) -> str:
    """Return ``value`` with a single leading 0x."""
    return value if value.startswith(HEX_PREFIX) else f"{HEX_PREFIX}{value}"


def normalize_bytecode(output: dict[str, Any]) -> None:
    """0x-prefix every bytecode and deployedBytecode object in ``output``."""
    for contracts in output.get("contracts", {}).values():
        for contract in contracts.values():
            evm = contract.get("evm")
            if not evm:
                continue
            for key in ("bytecode", "deployedBytecode"):
                bytecode = evm.get(key)
                if bytecode and isinstance(bytecode.get("object"), str):
                    bytecode["object"] = add_hex_prefix(bytecode["object"])


def format_diagnostic(entry: dict[str, Any]) -> str:
    """Return the display text of a compiler diagnostic."""
    return get_normalized_error_message(
        entry.get("formattedMessage") or entry.get("message", "")
    ).strip()


class CompileInvoker:
    """Run version batches through the compiler.

    Imports the compiler asks for mid-compilation are resolved through the
    same resolver chain used to plan the build.
    """

    def __init__(self, provider: SolcProvider, resolver: Resolver) -> None:
        self._provider = provider
        self._resolver = resolver

    def invoke(self, solc_version: str, standard_input: dict[str, Any]) -> CompileResult:
        """Compile ``standard_input`` with compiler ``solc_version``.

        Returns:
            Parsed output with 0x-prefixed bytecode.

        Raises:
            UnknownCompilerVersionError: If the version has no binary.
            DownloadFailedError: If the binary cannot be fetched.
            CompilationFailedError: If any non-warning diagnostic is reported.
        """
        solc = self._provider.get_compiler(solc_version)
        output_json = solc.compile(json.dumps(standard_input), self._import_callback)
        output: dict[str, Any] = json.loads(output_json)

        diagnostics: list[dict[str, Any]] = output.get("errors") or []
        errors = [d for d in diagnostics if d.get("severity") != SOLIDITY_WARNING]
        warnings = [d for d in diagnostics if d.get("severity") == SOLIDITY_WARNING]

        if errors:
            for entry in errors:
                logger.debug("compiler_error", solc_version=solc_version, message=format_diagnostic(entry))
            raise CompilationFailedError(solc_version, errors)

        for entry in warnings:
            logger.warning("compiler_warning", solc_version=solc_version, message=format_diagnostic(entry))

        normalize_bytecode(output)
        return CompileResult(
            solc_version=solc_version,
            full_version=solc.full_version,
            output=output,
            warnings=[format_diagnostic(entry) for entry in warnings],
        )

    def _import_callback(self, import_path: str) -> dict[str, str]:
        source = self._resolver.resolve_if_exists(import_path)
        if source is None:
            return {"error": f"File not found: {import_path}"}
        return {"contents": source.source}
