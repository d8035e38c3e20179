"""Compiler binaries: download, cache and invocation.

This module provides:
- CompilerInstance: the stable ``compile(request_json, import_callback)``
  interface the rest of the package depends on
- NativeSolc: CompilerInstance backed by a native solc executable
- SolcProvider: maps a version to a CompilerInstance, downloading the binary
  into a local cache on first use

Binaries come from https://binaries.soliditylang.org/<platform>/. A download
failure (non-200, transport error, timeout) raises DownloadFailedError and is
not retried.
"""

from __future__ import annotations

import json
import os
import re
import subprocess
import sys
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path

import httpx
import semantic_version
import structlog

from solbuild_core.compiler.bin_paths import BIN_PATHS
from solbuild_core.errors import (
    CompilationError,
    ConfigurationError,
    DownloadFailedError,
    UnknownCompilerVersionError,
)

logger = structlog.get_logger(__name__)

BASE_COMPILER_URL = "https://binaries.soliditylang.org"
SUCCESS_STATUS = 200

# (path) -> {"contents": source} | {"error": message}
ImportCallback = Callable[[str], dict[str, str]]

# Reported by solc for imports that are not part of the request
MISSING_SOURCE_REGEX = re.compile(r'Source "([^"]+)" not found')


def detect_platform() -> str:
    """Return the binaries.soliditylang.org platform directory for this host.

    Raises:
        ConfigurationError: If no static solc build exists for the platform.
    """
    if sys.platform.startswith("linux"):
        return "linux-amd64"
    if sys.platform == "darwin":
        return "macosx-amd64"
    raise ConfigurationError(f"Unsupported platform for solc binaries: {sys.platform}")


class CompilerInstance(ABC):
    """A compiler that speaks the Standard JSON protocol.

    Attributes:
        full_version: Full release version, e.g. "0.8.20+commit.a1b79de6".
    """

    full_version: str

    @abstractmethod
    def compile(self, request_json: str, import_callback: ImportCallback) -> str:
        """Compile a Standard JSON request.

        Args:
            request_json: Serialized ``{language, sources, settings}`` request.
            import_callback: Called for each import the compiler needs that is
                not in the request.

        Returns:
            Serialized Standard JSON output.
        """


class NativeSolc(CompilerInstance):
    """CompilerInstance running a native solc binary with ``--standard-json``.

    A native binary cannot call back into Python, so imports it reports as
    missing are resolved through the callback and the request is re-run with
    them added. The loop ends once nothing new can be supplied; remaining
    diagnostics are returned to the caller unchanged.
    """

    def __init__(self, binary_path: Path, full_version: str) -> None:
        self.binary_path = binary_path
        self.full_version = full_version

    def compile(self, request_json: str, import_callback: ImportCallback) -> str:
        request = json.loads(request_json)
        sources: dict[str, dict[str, str]] = dict(request.get("sources", {}))
        attempted: set[str] = set()

        while True:
            output_json = self._run(json.dumps({**request, "sources": sources}))
            missing = [
                path
                for path in _missing_sources(output_json)
                if path not in sources and path not in attempted
            ]
            added = False
            for path in missing:
                attempted.add(path)
                result = import_callback(path)
                if "contents" in result:
                    sources[path] = {"content": result["contents"]}
                    added = True
            if not added:
                return output_json
            logger.debug("compiler_imports_supplied", paths=missing)

    def _run(self, input_json: str) -> str:
        try:
            completed = subprocess.run(
                [str(self.binary_path), "--standard-json"],
                input=input_json,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CompilationError(
                f"Failed to run solc {self.full_version}",
                internal_details=f"{self.binary_path}: {e}",
            ) from e

        if completed.returncode != 0 or not completed.stdout.strip():
            raise CompilationError(
                f"solc {self.full_version} exited with status {completed.returncode}",
                internal_details=completed.stderr.strip() or None,
            )
        return completed.stdout


def _missing_sources(output_json: str) -> list[str]:
    output = json.loads(output_json)
    missing: list[str] = []
    for entry in output.get("errors", []):
        match = MISSING_SOURCE_REGEX.search(entry.get("message", ""))
        if match and match.group(1) not in missing:
            missing.append(match.group(1))
    return missing


class SolcProvider:
    """Provide compiler instances by version, caching binaries locally.

    Attributes:
        bin_dir: Local binary cache, keyed by build identifier.
        catalog: Short version -> full version.
        platform: binaries.soliditylang.org platform directory.
        base_url: URL prefix the build identifier is appended to.
        timeout: Download timeout in seconds.

    Example:
        >>> provider = SolcProvider(Path("~/.solbuild/solc_bin").expanduser())
        >>> solc = provider.get_compiler("0.8.20")
        >>> solc.full_version
        '0.8.20+commit.a1b79de6'
    """

    def __init__(
        self,
        bin_dir: Path,
        *,
        catalog: Mapping[str, str] | None = None,
        platform: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.bin_dir = bin_dir
        self.catalog = dict(catalog if catalog is not None else BIN_PATHS)
        self.platform = platform or detect_platform()
        self.base_url = base_url or f"{BASE_COMPILER_URL}/{self.platform}/"
        self.timeout = timeout
        self._client = client

    def available_versions(self) -> list[str]:
        """Return catalog versions, lowest first."""
        return sorted(self.catalog, key=semantic_version.Version)

    def get_full_version(self, version: str) -> str:
        """Return the full release version for ``version``.

        Raises:
            UnknownCompilerVersionError: If the version is not in the catalog.
        """
        try:
            return self.catalog[version]
        except KeyError:
            raise UnknownCompilerVersionError(version, self.available_versions()) from None

    def build_identifier(self, version: str) -> str:
        """Return the download file name for ``version`` on this platform."""
        return f"solc-{self.platform}-v{self.get_full_version(version)}"

    def get_compiler(self, version: str) -> CompilerInstance:
        """Return a compiler for ``version``, downloading it if not cached.

        Raises:
            UnknownCompilerVersionError: If the version is not in the catalog.
            DownloadFailedError: If the binary cannot be fetched.
        """
        full_version = self.get_full_version(version)
        build = self.build_identifier(version)
        binary_path = self.bin_dir / build

        if binary_path.is_file():
            logger.debug("compiler_cache_hit", build=build)
        else:
            self._download(build, binary_path)

        return NativeSolc(binary_path, full_version)

    def _download(self, build: str, binary_path: Path) -> None:
        url = f"{self.base_url}{build}"
        logger.info("downloading_compiler", build=build, url=url)

        try:
            if self._client is not None:
                response = self._client.get(url, timeout=self.timeout, follow_redirects=True)
            else:
                response = httpx.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.TimeoutException as e:
            raise DownloadFailedError(
                build, url, internal_details=f"Timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise DownloadFailedError(build, url, internal_details=str(e)) from e

        if response.status_code != SUCCESS_STATUS:
            raise DownloadFailedError(
                build,
                url,
                status_code=response.status_code,
                internal_details=f"HTTP {response.status_code} from {url}",
            )

        # Write to a temp file first so a crash never leaves a partial binary
        self.bin_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.bin_dir, prefix=f".{build}.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(response.content)
            os.chmod(tmp_name, 0o755)
            os.replace(tmp_name, binary_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("compiler_cached", build=build, path=str(binary_path))
