"""Shared test fixtures for solbuild-cli tests.

Provides CliRunner fixtures and a stand-in for the core Compiler so
command tests never download or run a real compiler.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from click.testing import CliRunner

import solbuild_core
from solbuild_core import CompilationSummary


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


class StubCompiler:
    """Records the options it was built with and returns a canned result.

    Attributes:
        calls: Options passed to each instance, in order.
        result: Summary to return, or exception to raise, from compile().
    """

    calls: list[dict[str, Any]] = []
    result: CompilationSummary | Exception = CompilationSummary()

    def __init__(self, opts: dict[str, Any] | None = None, **kwargs: Any) -> None:
        StubCompiler.calls.append(dict(opts or {}))

    def compile(self) -> CompilationSummary:
        if isinstance(StubCompiler.result, Exception):
            raise StubCompiler.result
        return StubCompiler.result


@pytest.fixture
def stub_compiler(monkeypatch: pytest.MonkeyPatch) -> type[StubCompiler]:
    """Replace solbuild_core.Compiler with StubCompiler for one test."""
    StubCompiler.calls = []
    StubCompiler.result = CompilationSummary()
    monkeypatch.setattr(solbuild_core, "Compiler", StubCompiler)
    return StubCompiler
