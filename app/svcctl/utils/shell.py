"""Shell execution utilities.

Runs service manager commands with captured, machine-readable output, and
log viewers attached to the user's terminal.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass

# Keeps systemctl/journalctl output parseable regardless of the user's locale
_PARSEABLE_ENV: dict[str, str] = {
    "LC_ALL": "C",
    "SYSTEMD_COLORS": "0",
    "SYSTEMD_PAGER": "",
}


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def error_text(self) -> str:
        """Best available error description: stderr, else stdout."""
        return self.stderr.strip() or self.stdout.strip()


def _merged_env(extra: dict[str, str] | None) -> dict[str, str]:
    return {**os.environ, **(extra or {})}


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Execute a command and capture its output.

    The C locale is forced and colors are disabled so that output can be
    parsed.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.
        env: Additional environment variables (merged over the defaults).

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        env=_merged_env({**_PARSEABLE_ENV, **(env or {})}),
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_interactive(args: list[str], *, env: dict[str, str] | None = None) -> int:
    """Execute a command attached to the user's terminal.

    Output is not captured, so the child writes straight to the console.
    Used to show and follow service logs.

    Args:
        args: Command and arguments to execute.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    result = subprocess.run(args, check=False, env=_merged_env(env))
    return result.returncode
