"""solbuild schema command - Export JSON Schema."""

from __future__ import annotations

from pathlib import Path

import click

from solbuild_cli.errors import EXIT_SYSTEM_ERROR, EXIT_USER_ERROR
from solbuild_cli.output import error, success

ARTIFACT_SCHEMA_FILENAME = "artifact.schema.json"
COMPILER_SCHEMA_FILENAME = "compiler.schema.json"


@click.group()
def schema() -> None:
    """Manage JSON Schema for IDE support.

    **Commands:**

    - `solbuild schema export` - Export artifact and compiler.json JSON Schema
    """
    pass


@schema.command("export")
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default="./schemas",
    help="Output directory [default: ./schemas]",
)
def export_schema(output_dir: str) -> None:
    """Export JSON Schema for artifact files and compiler.json.

    Writes artifact.schema.json and compiler.schema.json to the output
    directory.

    Examples:

        solbuild schema export

        solbuild schema export --output docs/schemas
    """
    output = Path(output_dir)

    try:
        # Import here to avoid heavy imports at CLI startup
        from solbuild_core import export_artifact_schema, export_compiler_options_schema

        artifact_path = output / ARTIFACT_SCHEMA_FILENAME
        compiler_path = output / COMPILER_SCHEMA_FILENAME
        export_artifact_schema(artifact_path)
        export_compiler_options_schema(compiler_path)

        success(f"Schema exported to {artifact_path}")
        success(f"Schema exported to {compiler_path}")

    except PermissionError:
        error(f"Cannot write to: {output_dir}")
        raise SystemExit(EXIT_SYSTEM_ERROR) from None

    except OSError as e:
        error(f"Schema export failed: {e}")
        raise SystemExit(EXIT_USER_ERROR) from None
