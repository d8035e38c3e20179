"""Compiler options for solbuild.

This module defines CompilerOptions, the single configuration record for a
build, and the loader that merges explicitly passed options with a project
config file (compiler.json, or compiler.yaml / compiler.yml) and defaults.

Precedence (highest first):
1. Options passed to the Compiler (CLI flags or programmatic use)
2. Config file in the working directory
3. Defaults defined below
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from solbuild_core.errors import ConfigurationError

logger = structlog.get_logger(__name__)

# Wildcard selecting every file / every contract
ALL_CONTRACTS_IDENTIFIER = "*"
ALL_FILES_IDENTIFIER = "*"

# Config files searched in the working directory, in order
CONFIG_FILE_NAMES = ("compiler.json", "compiler.yaml", "compiler.yml")

DEFAULT_CONTRACTS_DIR = "contracts"
DEFAULT_ARTIFACTS_DIR = "artifacts"
DEFAULT_DOWNLOAD_TIMEOUT = 60.0

# Environment variable overriding the compiler binary cache location
SOLC_BIN_DIR_ENV_VAR = "SOLBUILD_SOLC_BIN_DIR"

# Compiler settings cannot be configured from the command line.
# Use a config file for anything beyond the defaults.
DEFAULT_COMPILER_SETTINGS: dict[str, Any] = {
    "optimizer": {
        "enabled": False,
    },
    "outputSelection": {
        ALL_FILES_IDENTIFIER: {
            ALL_CONTRACTS_IDENTIFIER: ["abi", "evm.bytecode.object"],
        },
    },
}


def default_solc_bin_dir() -> Path:
    """Return the compiler binary cache directory.

    Returns:
        $SOLBUILD_SOLC_BIN_DIR if set, otherwise ~/.solbuild/solc_bin.
    """
    override = os.environ.get(SOLC_BIN_DIR_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".solbuild" / "solc_bin"


class CompilerOptions(BaseModel):
    """Options controlling a build.

    Keys are camelCase in config files. Alternative names (sourceDir,
    compilerVersion, units) are accepted on input.

    Attributes:
        contracts_dir: Directory holding the Solidity sources.
        artifacts_dir: Directory artifacts are written to.
        solc_version: Compiler version override. None selects per contract
            from its version pragma.
        compiler_settings: Standard JSON ``settings`` object for every batch.
        contracts: "*" for every contract found, or explicit contract names.
        solc_bin_dir: Local cache for downloaded compiler binaries.
        download_timeout: Timeout in seconds for binary downloads.

    Example:
        >>> opts = CompilerOptions(contracts=["Token", "Exchange"])
        >>> opts.contracts_dir
        PosixPath('contracts')
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    contracts_dir: Path = Field(
        default=Path(DEFAULT_CONTRACTS_DIR),
        validation_alias=AliasChoices("contractsDir", "sourceDir", "contracts_dir"),
        serialization_alias="contractsDir",
        description="Directory holding the Solidity sources",
    )
    artifacts_dir: Path = Field(
        default=Path(DEFAULT_ARTIFACTS_DIR),
        validation_alias=AliasChoices("artifactsDir", "artifacts_dir"),
        serialization_alias="artifactsDir",
        description="Directory artifacts are written to",
    )
    solc_version: str | None = Field(
        default=None,
        validation_alias=AliasChoices("solcVersion", "compilerVersion", "solc_version"),
        serialization_alias="solcVersion",
        description="Compiler version override (default: select from pragma)",
    )
    compiler_settings: dict[str, Any] = Field(
        default_factory=lambda: json.loads(json.dumps(DEFAULT_COMPILER_SETTINGS)),
        validation_alias=AliasChoices("compilerSettings", "compiler_settings"),
        serialization_alias="compilerSettings",
        description="Standard JSON settings object passed to the compiler",
    )
    contracts: Literal["*"] | list[str] = Field(
        default=ALL_CONTRACTS_IDENTIFIER,
        validation_alias=AliasChoices("contracts", "units"),
        serialization_alias="contracts",
        description='Contract names to compile, or "*" for all',
    )
    solc_bin_dir: Path = Field(
        default_factory=default_solc_bin_dir,
        validation_alias=AliasChoices("solcBinDir", "solc_bin_dir"),
        serialization_alias="solcBinDir",
        description="Local cache for compiler binaries",
    )
    download_timeout: float = Field(
        default=DEFAULT_DOWNLOAD_TIMEOUT,
        gt=0,
        validation_alias=AliasChoices("downloadTimeout", "download_timeout"),
        serialization_alias="downloadTimeout",
        description="Timeout in seconds for compiler binary downloads",
    )

    @field_validator("contracts")
    @classmethod
    def validate_contracts(cls, v: str | list[str]) -> str | list[str]:
        """Reject an empty explicit contract list."""
        if isinstance(v, list) and not v:
            raise ValueError('contracts must be "*" or a non-empty list of names')
        return v

    @property
    def compiles_all_contracts(self) -> bool:
        """True when every discovered contract should be compiled."""
        return self.contracts == ALL_CONTRACTS_IDENTIFIER


def find_config_file(search_dir: Path | None = None) -> Path | None:
    """Find a config file in ``search_dir`` (default: working directory).

    Args:
        search_dir: Directory to look in.

    Returns:
        Path of the first config file found, or None.
    """
    base = search_dir or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read raw options from a JSON or YAML config file.

    Args:
        path: Config file path.

    Returns:
        Raw option mapping (empty for an empty file).

    Raises:
        ConfigurationError: If the file cannot be parsed or is not a mapping.
    """
    try:
        text = path.read_bytes().decode("utf-8")
        if path.suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            data = yaml.safe_load(text) or {}
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            "Config file is not valid",
            file_path=str(path),
            internal_details=str(e),
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping of options",
            file_path=str(path),
        )
    return data


def load_compiler_options(
    overrides: dict[str, Any] | None = None,
    *,
    search_dir: Path | None = None,
) -> CompilerOptions:
    """Build CompilerOptions from overrides, config file and defaults.

    Args:
        overrides: Explicit options (any accepted key spelling). Entries
            whose value is None are ignored.
        search_dir: Directory searched for a config file.

    Returns:
        Validated CompilerOptions.

    Raises:
        ConfigurationError: If the config file or merged options are invalid.

    Example:
        >>> opts = load_compiler_options({"contractsDir": "src"})
    """
    config_path = find_config_file(search_dir)
    file_opts = CompilerOptions()
    if config_path is not None:
        logger.debug("config_file_found", path=str(config_path))
        file_opts = _validate(read_config_file(config_path), str(config_path))

    passed = {k: v for k, v in (overrides or {}).items() if v is not None}
    passed_opts = _validate(passed, None)

    # Passed options win field by field over the file
    merged = file_opts.model_dump()
    merged.update(passed_opts.model_dump(include=passed_opts.model_fields_set))
    return CompilerOptions.model_validate(merged)


def _validate(raw: dict[str, Any], file_path: str | None) -> CompilerOptions:
    try:
        return CompilerOptions.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field_path = ".".join(str(x) for x in first["loc"])
        raise ConfigurationError(
            f"Invalid compiler options: {first['msg']}",
            file_path=file_path,
            field_path=field_path or None,
        ) from e
