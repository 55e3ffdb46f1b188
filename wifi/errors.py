"""Exit codes and error types for the wifi CLI.

Handlers raise these; the pipeline turns them into an exit status and a
message on stderr.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes owned by the CLI itself.

    Failures of networksetup/airport keep the tool's own return code.
    """
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
    CONFIG_ERROR = 3
    INTERRUPTED = 130  # Standard for Ctrl+C


@dataclass
class CLIError(Exception):
    """CLI error with exit code and message."""
    message: str
    code: int = ExitCode.ERROR
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class UsageError(CLIError):
    """Bad or missing subcommand arguments."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.USAGE, hint)


class ConfigError(CLIError):
    """Unreadable or malformed configuration file."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ExitCode.CONFIG_ERROR, hint)


class QualityUnavailableError(CLIError):
    """Signal or noise missing from the diagnostic output."""
    def __init__(self, message: str = "signal quality unavailable", hint: Optional[str] = None):
        super().__init__(message, ExitCode.ERROR, hint)


def exit_status(returncode: int) -> int:
    """Shell-style exit status for a child's return code.

    ``subprocess`` reports death by signal N as ``-N``; shells use ``128 + N``.
    """
    return 128 - returncode if returncode < 0 else returncode


class ToolError(CLIError):
    """An external tool exited non-zero; its exit status is forwarded."""
    def __init__(self, tool: str, returncode: int, detail: str = ""):
        if returncode < 0:
            message = f"{tool} killed by signal {-returncode}"
        else:
            message = f"{tool} exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, exit_status(returncode) or ExitCode.ERROR)
        self.tool = tool
        self.returncode = returncode


def handle_error(error: BaseException, verbose: bool = False) -> int:
    """Print an error to stderr and return the exit code to use."""
    if isinstance(error, CLIError):
        if error.message:
            print(f"Error: {error.message}", file=sys.stderr)
        if error.hint:
            print(f"Hint: {error.hint}", file=sys.stderr)
        return int(error.code)

    if isinstance(error, KeyboardInterrupt):
        print("\nInterrupted.", file=sys.stderr)
        return ExitCode.INTERRUPTED

    # Unexpected error
    print(f"Error: {str(error) or type(error).__name__}", file=sys.stderr)
    if verbose:
        import traceback
        traceback.print_exception(type(error), error, error.__traceback__)
    return ExitCode.ERROR
