"""Python versions installed with pyenv."""

import re
from typing import Optional

from pkgscout.handlers.base import ManagerHandler, platform_paths
from pkgscout.handlers.parsing import iter_lines, make_record
from pkgscout.models import ManagerId, PackageLocation, PackageRecord

# "3.11.2", "miniconda3-latest", "3.11.2/envs/tools"
_VERSION_LINE = re.compile(r"^[A-Za-z0-9][\w.+\-/]*$")


class PyenvHandler(ManagerHandler):
    id = ManagerId.PYENV
    display_name = "pyenv"
    executable = "pyenv"
    list_args = ("versions", "--bare")
    common_paths = platform_paths(
        darwin=(
            "$PYENV_ROOT/bin/pyenv",
            "~/.pyenv/bin/pyenv",
            "/opt/homebrew/bin/pyenv",
            "/usr/local/bin/pyenv",
        ),
        linux=(
            "$PYENV_ROOT/bin/pyenv",
            "~/.pyenv/bin/pyenv",
            "/home/linuxbrew/.linuxbrew/bin/pyenv",
            "/usr/local/bin/pyenv",
        ),
        windows=(
            "%PYENV_ROOT%\\bin\\pyenv.bat",
            "%USERPROFILE%\\.pyenv\\pyenv-win\\bin\\pyenv.bat",
        ),
    )

    def parse_output(self, raw: str) -> list[PackageRecord]:
        """One installed version per line; each becomes a 'python' record."""
        records = []
        for line in iter_lines(raw):
            if not _VERSION_LINE.match(line):
                continue
            record = make_record(
                name="python",
                version=line,
                manager=self.id,
                location=PackageLocation.PYENV_VERSION,
            )
            if record:
                records.append(record)
        return records

    def uninstall_args(self, name: str, location: Optional[PackageLocation] = None) -> list[str]:
        # For pyenv the "package" is the version to remove
        return ["uninstall", "-f", name]
