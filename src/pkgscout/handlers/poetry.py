"""Poetry-managed virtual environments.

Poetry has no command that lists what it installed globally, so listing reads
the virtualenvs directory instead. Each entry is named
``<project>-<hash>-py<X.Y>``; entries that don't follow that pattern are
still reported, with an unknown version.
"""

import os
import re
import sys
from pathlib import Path

from pkgscout.errors import ManagerPermissionError
from pkgscout.handlers.base import ManagerHandler, platform_paths
from pkgscout.handlers.parsing import iter_lines, make_record
from pkgscout.models import ManagerId, PackageLocation, PackageRecord
from pkgscout.search import expand_path

UNKNOWN_VERSION = "unknown"

_VENV_NAME = re.compile(r"^(?P<project>.+)-(?P<hash>[A-Za-z0-9_-]{8})-py(?P<python>\d+(?:\.\d+)*)$")


def virtualenvs_dir() -> Path:
    """Where Poetry keeps its virtualenvs on this machine."""
    configured = os.environ.get("POETRY_VIRTUALENVS_PATH")
    if configured:
        return expand_path(configured)

    cache_dir = os.environ.get("POETRY_CACHE_DIR")
    if cache_dir:
        return expand_path(cache_dir) / "virtualenvs"

    if sys.platform == "darwin":
        return expand_path("~/Library/Caches/pypoetry/virtualenvs")
    if sys.platform.startswith("win"):
        return expand_path("%LOCALAPPDATA%\\pypoetry\\Cache\\virtualenvs")
    xdg_cache = os.environ.get("XDG_CACHE_HOME") or "~/.cache"
    return expand_path(xdg_cache) / "pypoetry" / "virtualenvs"


class PoetryHandler(ManagerHandler):
    id = ManagerId.POETRY
    display_name = "Poetry"
    executable = "poetry"
    common_paths = platform_paths(
        darwin=(
            "~/.local/bin/poetry",
            "~/Library/Application Support/pypoetry/venv/bin/poetry",
            "/opt/homebrew/bin/poetry",
            "/usr/local/bin/poetry",
            "~/.poetry/bin/poetry",
        ),
        linux=(
            "~/.local/bin/poetry",
            "~/.local/share/pypoetry/venv/bin/poetry",
            "/usr/local/bin/poetry",
            "/usr/bin/poetry",
            "~/.poetry/bin/poetry",
        ),
        windows=(
            "%APPDATA%\\Python\\Scripts\\poetry.exe",
            "%APPDATA%\\pypoetry\\venv\\Scripts\\poetry.exe",
            "%USERPROFILE%\\.local\\bin\\poetry.exe",
        ),
    )

    def list_packages(self) -> list[PackageRecord]:
        # Only meaningful once Poetry itself has been found
        self.resolve_executable()

        directory = virtualenvs_dir()
        if not directory.is_dir():
            return []
        try:
            with os.scandir(directory) as entries:
                names = sorted(e.name for e in entries if e.is_dir() and not e.name.startswith("."))
        except PermissionError:
            raise ManagerPermissionError(self.id.value, str(directory))
        return self.parse_output("\n".join(names))

    def parse_output(self, raw: str) -> list[PackageRecord]:
        """Parse newline-separated virtualenv directory names."""
        records = []
        for line in iter_lines(raw):
            if "/" in line or "\\" in line:
                continue
            match = _VENV_NAME.match(line)
            if match:
                record = make_record(
                    name=match.group("project"),
                    version=match.group("python"),
                    manager=self.id,
                    location=PackageLocation.GLOBAL,
                    environment=line,
                )
            else:
                record = make_record(
                    name=line,
                    version=UNKNOWN_VERSION,
                    manager=self.id,
                    location=PackageLocation.GLOBAL,
                    environment=line,
                )
            if record:
                records.append(record)
        return records
