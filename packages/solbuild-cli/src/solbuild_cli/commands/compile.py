"""solbuild compile command - Build contract artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from solbuild_cli.errors import handle_permission_error, handle_solbuild_error
from solbuild_cli.output import info, success, warning


def parse_contracts_option(value: str | None) -> str | list[str] | None:
    """Turn ``--contracts`` into a ``contracts`` option value.

    Example:
        >>> parse_contracts_option("Token, Vault")
        ['Token', 'Vault']
        >>> parse_contracts_option("*")
        '*'
    """
    if value is None:
        return None
    if value.strip() == "*":
        return "*"
    names = [name.strip() for name in value.split(",") if name.strip()]
    if not names:
        raise click.BadParameter("expected '*' or a comma-separated list of names")
    return names


@click.command("compile")
@click.option(
    "-c",
    "--contracts-dir",
    "contracts_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the contracts [default: ./contracts]",
)
@click.option(
    "-o",
    "--artifacts-dir",
    "artifacts_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory artifacts are written to [default: ./artifacts]",
)
@click.option(
    "-s",
    "--solc-version",
    "solc_version",
    type=str,
    default=None,
    help="Compile everything with this compiler version instead of selecting per pragma",
)
@click.option(
    "--contracts",
    "contracts",
    type=str,
    default=None,
    help="Comma-separated contract names, or '*' for all [default: *]",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show build progress logs.")
def compile_cmd(
    contracts_dir: str | None,
    artifacts_dir: str | None,
    solc_version: str | None,
    contracts: str | None,
    verbose: bool,
) -> None:
    """Compile contracts into JSON artifacts.

    Options given here override compiler.json, which overrides defaults.
    Contracts whose sources, settings and artifact format are unchanged
    are skipped.

    Examples:

        solbuild compile

        solbuild compile --contracts Token,Vault

        solbuild compile --solc-version 0.8.20 --artifacts-dir build/
    """
    # Import here to avoid heavy imports at CLI startup
    from solbuild_core import Compiler, SolbuildError, configure_logging

    configure_logging(log_level="DEBUG" if verbose else "ERROR", add_timestamp=False)

    overrides: dict[str, Any] = {}
    if contracts_dir is not None:
        overrides["contracts_dir"] = Path(contracts_dir)
    if artifacts_dir is not None:
        overrides["artifacts_dir"] = Path(artifacts_dir)
    if solc_version is not None:
        overrides["solc_version"] = solc_version
    parsed_contracts = parse_contracts_option(contracts)
    if parsed_contracts is not None:
        overrides["contracts"] = parsed_contracts

    try:
        compiler = Compiler(overrides)
        summary = compiler.compile()
    except SolbuildError as e:
        handle_solbuild_error(e)
    except PermissionError as e:
        handle_permission_error(str(e.filename or "the artifacts directory"), "write to")

    for message in summary.warnings:
        warning(message)

    for full_version, names in summary.compiled.items():
        success(f"Compiled {', '.join(names)} with solc {full_version}")
    if summary.skipped:
        info(f"Up to date: {', '.join(summary.skipped)}")
    if summary.compiled_count == 0 and not summary.skipped:
        info("No contracts found")
    elif summary.compiled_count == 0:
        success("Nothing to compile")
