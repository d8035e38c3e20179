"""solbuild versions command - List usable compiler versions."""

from __future__ import annotations

import click

from solbuild_cli.output import info, print_json


@click.command("versions")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print a JSON object.")
def versions(as_json: bool) -> None:
    """List compiler versions that can be selected, newest first.

    Examples:

        solbuild versions

        solbuild versions --json
    """
    import semantic_version

    from solbuild_core import BIN_PATHS

    ordered = sorted(BIN_PATHS, key=semantic_version.Version, reverse=True)

    if as_json:
        print_json({version: BIN_PATHS[version] for version in ordered})
        return

    for version in ordered:
        info(f"{version}  ({BIN_PATHS[version]})")
