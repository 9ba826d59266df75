"""Exceptions raised by single-manager operations."""

from typing import Optional

from pkgscout.models import CommandResult


class PkgScoutError(Exception):
    """Base class for pkgscout errors."""


class UnknownManagerError(PkgScoutError):
    """The requested manager id is not registered."""

    def __init__(self, manager: str):
        self.manager = manager
        super().__init__(f"Unknown package manager: {manager}")


class ManagerDisabledError(PkgScoutError):
    """The manager is disabled in the user configuration."""

    def __init__(self, manager: str):
        self.manager = manager
        super().__init__(f"Package manager '{manager}' is disabled in the configuration")


class ManagerNotInstalledError(PkgScoutError):
    """No search tier found the manager's executable."""

    def __init__(self, manager: str):
        self.manager = manager
        super().__init__(f"Package manager '{manager}' is not installed")


class ManagerPermissionError(PkgScoutError):
    """The executable exists but the OS refused to run it."""

    def __init__(self, manager: str, path: str):
        self.manager = manager
        self.path = path
        super().__init__(f"Permission denied executing {path} for '{manager}'")


class CommandFailedError(PkgScoutError):
    """A manager command exited non-zero or timed out."""

    def __init__(self, manager: str, result: CommandResult, message: Optional[str] = None):
        self.manager = manager
        self.result = result
        if message is None:
            if result.timed_out:
                message = f"'{' '.join(result.command)}' timed out"
            else:
                detail = result.stderr.strip() or result.stdout.strip() or "no output"
                message = f"'{' '.join(result.command)}' exited with {result.exit_code}: {detail}"
        super().__init__(message)


class UnsupportedOperationError(PkgScoutError):
    """The manager does not support the requested operation."""

    def __init__(self, manager: str, operation: str):
        self.manager = manager
        self.operation = operation
        super().__init__(f"'{operation}' is not supported for '{manager}'")
