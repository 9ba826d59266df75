"""Running external commands with a timeout."""

import logging
import subprocess
from typing import Protocol, Sequence

from pkgscout.models import CommandResult

logger = logging.getLogger(__name__)

# Conventional shell exit codes
EXIT_NOT_FOUND = 127
EXIT_PERMISSION_DENIED = 126
EXIT_TIMEOUT = -1


class CommandRunner(Protocol):
    """Anything that can run a command and report how it went."""

    def __call__(self, command: str, args: Sequence[str], timeout_ms: int) -> CommandResult: ...


def run_command(command: str, args: Sequence[str], timeout_ms: int) -> CommandResult:
    """
    Run a command and capture its output.

    Never raises for a non-zero exit, a timeout, or a missing binary; those
    are reported through the returned CommandResult.

    Args:
        command: Executable name or absolute path
        args: Arguments to pass
        timeout_ms: Timeout in milliseconds

    Returns:
        CommandResult with exit code, stdout and stderr
    """
    argv = [command, *args]
    logger.debug("Running %s (timeout %d ms)", argv, timeout_ms)

    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout_ms / 1000,
        )
        return CommandResult(
            command=argv,
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
    except subprocess.TimeoutExpired as e:
        return CommandResult(
            command=argv,
            exit_code=EXIT_TIMEOUT,
            stdout=_decode(e.stdout),
            stderr=f"Command timed out after {timeout_ms} ms",
            timed_out=True,
        )
    except FileNotFoundError:
        return CommandResult(
            command=argv,
            exit_code=EXIT_NOT_FOUND,
            stderr=f"{command}: command not found",
        )
    except PermissionError as e:
        return CommandResult(
            command=argv,
            exit_code=EXIT_PERMISSION_DENIED,
            stderr=f"Permission denied: {e}",
            permission_denied=True,
        )
    except OSError as e:
        return CommandResult(
            command=argv,
            exit_code=EXIT_NOT_FOUND,
            stderr=f"OS error: {e}",
        )


def _decode(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
