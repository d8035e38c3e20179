"""JSON Schema export for solbuild.

Exports JSON Schema for the artifact file format and for compiler.json so
that editors and other languages can validate them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from solbuild_core.compiler.models import ContractArtifact
from solbuild_core.config import CompilerOptions

JSON_SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def export_artifact_schema(output_path: Path | str | None = None) -> dict[str, Any]:
    """Export JSON Schema for artifact files.

    Args:
        output_path: If given, the schema is also written there.

    Returns:
        The JSON Schema as a dictionary.
    """
    schema = ContractArtifact.model_json_schema(by_alias=True)
    return _finalize(schema, "Solbuild contract artifact", output_path)


def export_compiler_options_schema(output_path: Path | str | None = None) -> dict[str, Any]:
    """Export JSON Schema for compiler.json.

    Args:
        output_path: If given, the schema is also written there.

    Returns:
        The JSON Schema as a dictionary.
    """
    schema = CompilerOptions.model_json_schema(by_alias=True)
    return _finalize(schema, "Solbuild compiler options", output_path)


def _finalize(schema: dict[str, Any], title: str, output_path: Path | str | None) -> dict[str, Any]:
    schema["$schema"] = JSON_SCHEMA_DRAFT
    schema["title"] = title
    if output_path is not None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(schema, indent=2) + "\n")
    return schema
