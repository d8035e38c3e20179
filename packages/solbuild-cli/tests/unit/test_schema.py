"""Tests for solbuild schema command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from solbuild_cli.commands.schema import (
    ARTIFACT_SCHEMA_FILENAME,
    COMPILER_SCHEMA_FILENAME,
    export_schema,
    schema,
)


class TestSchemaGroup:
    """Tests for schema command group."""

    def test_schema_help(self, cli_runner: CliRunner) -> None:
        """Test schema --help shows subcommands."""
        result = cli_runner.invoke(schema, ["--help"])
        assert result.exit_code == 0
        assert "export" in result.output.lower()


class TestSchemaExport:
    """Tests for schema export command."""

    def test_export_writes_both_schemas(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Both schema files are written as JSON Schema."""
        result = cli_runner.invoke(export_schema, ["--output", str(tmp_path / "schemas")])
        assert result.exit_code == 0

        for name in (ARTIFACT_SCHEMA_FILENAME, COMPILER_SCHEMA_FILENAME):
            content = json.loads((tmp_path / "schemas" / name).read_text())
            assert "json-schema.org" in content["$schema"]
            assert "properties" in content

    def test_export_default_location(self, isolated_runner: CliRunner) -> None:
        """Without --output the schemas go to ./schemas."""
        result = isolated_runner.invoke(export_schema, [])
        assert result.exit_code == 0
        assert Path("schemas", ARTIFACT_SCHEMA_FILENAME).is_file()

    def test_export_to_file_path_fails(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """An output path that is a file is a user error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        result = cli_runner.invoke(export_schema, ["--output", str(blocker / "schemas")])
        assert result.exit_code == 1
