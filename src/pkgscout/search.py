"""Tiered search for package manager executables.

Tiers run in order and stop at the first hit:

1. direct command - run ``<executable> --version`` and let PATH resolve it
2. PATH scan - look for the executable in every PATH directory
3. custom paths - candidates from the user configuration
4. common paths - well-known install locations for the manager

Custom paths are always tried before common paths. Results, including
"not found", are cached per manager for the rest of the session.
"""

import logging
import os
import re
import shutil
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from pkgscout.cache import PathCache
from pkgscout.errors import ManagerPermissionError
from pkgscout.executor import CommandRunner, run_command
from pkgscout.models import DiscoveryMethod, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_MS = 5_000

# Suffixes tried on Windows-style platforms
WINDOWS_SUFFIXES = (".exe", ".cmd", ".bat")

_PERCENT_VAR = re.compile(r"%([A-Za-z_][A-Za-z0-9_]*)%")


def expand_path(path: str) -> Path:
    """Expand ~, $VAR and %VAR% placeholders in path."""
    expanded = _PERCENT_VAR.sub(lambda m: os.environ.get(m.group(1), m.group(0)), path)
    return Path(os.path.expanduser(os.path.expandvars(expanded)))


def executable_names(executable: str) -> list[str]:
    """File names that count as the executable on this platform."""
    if os.name == "nt" and not executable.lower().endswith(WINDOWS_SUFFIXES):
        return [executable + suffix for suffix in WINDOWS_SUFFIXES] + [executable]
    return [executable]


def is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def path_directories() -> list[str]:
    """Directories listed in the process PATH, in order, without blanks."""
    return [d for d in os.environ.get("PATH", "").split(os.pathsep) if d]


class PathSearch:
    """Resolves executables through the four tiers, backed by a PathCache."""

    def __init__(
        self,
        runner: CommandRunner = run_command,
        cache: Optional[PathCache] = None,
        timeout_ms: int = DEFAULT_PROBE_TIMEOUT_MS,
    ):
        self.runner = runner
        self.cache = cache if cache is not None else PathCache()
        self.timeout_ms = timeout_ms

    def find_executable(
        self,
        manager,
        executable: str,
        common_paths: Sequence[str],
        custom_paths: Sequence[str] = (),
        probe_args: Sequence[str] = ("--version",),
    ) -> Optional[SearchResult]:
        """
        Locate a manager's executable.

        Args:
            manager: Manager id used as the cache key
            executable: Executable name (e.g. 'brew')
            common_paths: Well-known install locations, in priority order
            custom_paths: User-configured locations, searched before common paths
            probe_args: Arguments that make the executable print its version

        Returns:
            SearchResult for the first tier that succeeds, or None

        Raises:
            ManagerPermissionError: Nothing usable was found and at least one
                candidate could not be executed because of permissions
        """
        if self.cache.has_path(manager):
            cached = self.cache.get_result(manager)
            logger.debug("Cache hit for %s: %s", manager, cached)
            return cached

        denied: list[str] = []
        result = (
            self._direct_command(executable, probe_args, denied)
            or self._path_scan(executable, probe_args, denied)
            or self._candidate_paths(executable, common_paths, custom_paths, probe_args, denied)
        )

        if result is None and denied:
            raise ManagerPermissionError(str(getattr(manager, "value", manager)), denied[0])

        if result is None:
            logger.debug("%s not found by any tier", executable)
            self.cache.set_path(manager, None)
            self.cache.set_availability(manager, False)
        else:
            logger.debug("%s resolved to %s via %s", executable, result.path, result.method.value)
            self.cache.set_path(manager, result.path, result.method)
            self.cache.set_availability(manager, True)
        return result

    def _probe(self, command: str, probe_args: Sequence[str], denied: list[str]) -> bool:
        result = self.runner(command, list(probe_args), self.timeout_ms)
        if result.permission_denied:
            denied.append(command)
        return result.succeeded

    def _probe_file(self, path: Path, probe_args: Sequence[str], denied: list[str]) -> bool:
        # A file without the execute bit is a found-but-unusable binary
        if not os.access(path, os.X_OK):
            denied.append(str(path))
            return False
        return self._probe(str(path), probe_args, denied)

    def _direct_command(
        self, executable: str, probe_args: Sequence[str], denied: list[str]
    ) -> Optional[SearchResult]:
        if not self._probe(executable, probe_args, denied):
            return None
        return SearchResult(
            path=shutil.which(executable) or executable,
            method=DiscoveryMethod.DIRECT_COMMAND,
        )

    def _path_scan(
        self, executable: str, probe_args: Sequence[str], denied: list[str]
    ) -> Optional[SearchResult]:
        seen: set[str] = set()
        for directory in path_directories():
            for name in executable_names(executable):
                candidate = expand_path(directory) / name
                key = str(candidate)
                if key in seen:
                    continue
                seen.add(key)
                if is_file(candidate) and self._probe_file(candidate, probe_args, denied):
                    return SearchResult(path=key, method=DiscoveryMethod.PATH_SCAN)
        return None

    def _candidate_paths(
        self,
        executable: str,
        common_paths: Sequence[str],
        custom_paths: Sequence[str],
        probe_args: Sequence[str],
        denied: list[str],
    ) -> Optional[SearchResult]:
        for candidate, method in self.candidates(executable, common_paths, custom_paths):
            if self._probe_file(candidate, probe_args, denied):
                return SearchResult(path=str(candidate), method=method)
        return None

    def candidates(
        self,
        executable: str,
        common_paths: Iterable[str],
        custom_paths: Iterable[str] = (),
    ) -> Iterator[tuple[Path, DiscoveryMethod]]:
        """
        Existing files to try, custom paths first.

        A candidate that names a directory is joined with the executable name.
        """
        seen: set[str] = set()
        ordered = [(p, DiscoveryMethod.CUSTOM_PATH) for p in custom_paths]
        ordered += [(p, DiscoveryMethod.COMMON_PATH) for p in common_paths]

        for raw, method in ordered:
            base = expand_path(raw)
            if is_dir(base):
                paths = [base / name for name in executable_names(executable)]
            else:
                paths = [base]
            for path in paths:
                key = str(path)
                if key in seen:
                    continue
                seen.add(key)
                if is_file(path):
                    yield path, method
