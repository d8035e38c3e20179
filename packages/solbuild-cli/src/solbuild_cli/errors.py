"""CLI error handling for solbuild-cli.

Wraps solbuild-core exceptions in user-friendly messages with
appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from solbuild_cli.output import error, fatal_diagnostic

if TYPE_CHECKING:
    from solbuild_core.errors import SolbuildError


# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # User error (bad config, compile errors, missing contract)
EXIT_SYSTEM_ERROR = 2  # System error (permissions, write failure)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        error(self.format_message())


def handle_solbuild_error(err: SolbuildError) -> NoReturn:
    """Report a solbuild-core error and exit.

    Fatal compiler diagnostics are printed before the summary message.

    Raises:
        CLIError: Always.
    """
    from solbuild_core.errors import CompilationFailedError

    if isinstance(err, CompilationFailedError):
        from solbuild_core.compiler.invoker import format_diagnostic

        for entry in err.errors:
            fatal_diagnostic(format_diagnostic(entry))

    raise CLIError(err.user_message)


def handle_permission_error(path: str, operation: str = "access") -> NoReturn:
    """Handle permission errors.

    Raises:
        CLIError: Always, with the system error exit code.
    """
    raise CLIError(
        f"Permission denied: Cannot {operation} {path}",
        exit_code=EXIT_SYSTEM_ERROR,
    )
