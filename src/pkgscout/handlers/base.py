"""Shared behaviour for package manager handlers."""

import logging
import sys
from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Sequence

from pkgscout.errors import (
    CommandFailedError,
    ManagerNotInstalledError,
    ManagerPermissionError,
    UnsupportedOperationError,
)
from pkgscout.executor import CommandRunner
from pkgscout.models import CommandResult, ManagerId, PackageLocation, PackageRecord, SearchResult, UninstallResult
from pkgscout.search import PathSearch

logger = logging.getLogger(__name__)

DEFAULT_LIST_TIMEOUT_MS = 60_000
DEFAULT_UNINSTALL_TIMEOUT_MS = 300_000


def platform_paths(
    darwin: Sequence[str] = (),
    linux: Sequence[str] = (),
    windows: Sequence[str] = (),
) -> tuple[str, ...]:
    """Pick the common install locations for the running platform."""
    if sys.platform == "darwin":
        return tuple(darwin)
    if sys.platform.startswith("win"):
        return tuple(windows)
    return tuple(linux)


class ManagerHandler(ABC):
    """
    Knowledge about one package manager.

    Subclasses declare the manager's identity as class attributes and
    implement parse_output. A handler keeps no state of its own; where the
    executable lives is remembered by the PathSearch cache.
    """

    id: ClassVar[ManagerId]
    display_name: ClassVar[str]
    executable: ClassVar[str]
    common_paths: ClassVar[tuple[str, ...]] = ()
    probe_args: ClassVar[tuple[str, ...]] = ("--version",)
    list_args: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        search: PathSearch,
        runner: Optional[CommandRunner] = None,
        custom_paths: Sequence[str] = (),
        timeout_ms: Optional[int] = None,
    ):
        self.search = search
        self.runner = runner if runner is not None else search.runner
        self.custom_paths = tuple(custom_paths)
        self.timeout_ms = timeout_ms

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id.value!r})"

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def locate(self) -> Optional[SearchResult]:
        """Find the executable through the tiered search."""
        return self.search.find_executable(
            self.id,
            self.executable,
            self.common_paths,
            self.custom_paths,
            self.probe_args,
        )

    def check_availability(self) -> bool:
        """True when the executable exists, whether or not it is on PATH."""
        return self.locate() is not None

    def resolve_executable(self) -> str:
        """Path to run commands with; raises if the manager is not installed."""
        result = self.locate()
        if result is None:
            raise ManagerNotInstalledError(self.id.value)
        return result.path

    # -------------------------------------------------------------------------
    # Command helpers
    # -------------------------------------------------------------------------

    def _timeout(self, default_ms: int) -> int:
        return self.timeout_ms if self.timeout_ms is not None else default_ms

    def run(self, args: Sequence[str], default_timeout_ms: int = DEFAULT_LIST_TIMEOUT_MS) -> CommandResult:
        """Run the resolved executable with args."""
        path = self.resolve_executable()
        result = self.runner(path, list(args), self._timeout(default_timeout_ms))
        if result.permission_denied:
            raise ManagerPermissionError(self.id.value, path)
        return result

    def run_checked(self, args: Sequence[str], default_timeout_ms: int = DEFAULT_LIST_TIMEOUT_MS) -> CommandResult:
        """Like run, but a non-zero exit or timeout raises CommandFailedError."""
        result = self.run(args, default_timeout_ms)
        if not result.succeeded:
            raise CommandFailedError(self.id.value, result)
        return result

    # -------------------------------------------------------------------------
    # Listing and uninstalling
    # -------------------------------------------------------------------------

    def list_packages(self) -> list[PackageRecord]:
        """List installed packages."""
        result = self.run_checked(self.list_args)
        return self.parse_output(result.stdout)

    @abstractmethod
    def parse_output(self, raw: str) -> list[PackageRecord]:
        """Turn list output into records. Must not raise for any input."""

    def uninstall_args(self, name: str, location: Optional[PackageLocation] = None) -> list[str]:
        """Arguments that remove a package; managers without uninstall raise."""
        raise UnsupportedOperationError(self.id.value, "uninstall")

    def uninstall_package(self, name: str, location: Optional[PackageLocation] = None) -> UninstallResult:
        """
        Remove an installed package.

        Args:
            name: Package (or version, for pyenv) to remove
            location: Sub-kind hint, used by managers with several kinds

        Returns:
            UninstallResult describing the outcome
        """
        name = validate_package_name(name)
        args = self.uninstall_args(name, location)
        result = self.run(args, DEFAULT_UNINSTALL_TIMEOUT_MS)

        if result.succeeded:
            logger.info("Uninstalled %s via %s", name, self.id.value)
            return UninstallResult(manager=self.id, name=name, success=True, command=result.command)

        error = CommandFailedError(self.id.value, result)
        logger.warning("Uninstall of %s via %s failed: %s", name, self.id.value, error)
        return UninstallResult(
            manager=self.id,
            name=name,
            success=False,
            error=str(error),
            command=result.command,
        )


def validate_package_name(name: str) -> str:
    """Reject names that are blank or would be read as command options."""
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Package name must not be empty")
    name = name.strip()
    if name.startswith("-"):
        raise ValueError(f"Invalid package name: {name}")
    return name
