"""Conda packages in the active environment."""

import os
from typing import Optional

from pkgscout.handlers.base import ManagerHandler, platform_paths
from pkgscout.handlers.parsing import (
    is_package_name,
    is_version,
    iter_lines,
    load_json,
    make_record,
    recover_objects,
    text,
)
from pkgscout.models import ManagerId, PackageLocation, PackageRecord

_UNIX_PREFIXES = (
    "~/miniconda3",
    "~/anaconda3",
    "~/miniforge3",
    "~/mambaforge",
    "/opt/conda",
    "/opt/miniconda3",
    "/opt/anaconda3",
)


def active_environment() -> str:
    """Name of the conda environment commands will see."""
    return os.environ.get("CONDA_DEFAULT_ENV") or "base"


class CondaHandler(ManagerHandler):
    id = ManagerId.CONDA
    display_name = "Conda"
    executable = "conda"
    list_args = ("list", "--json")
    common_paths = platform_paths(
        darwin=(
            "$CONDA_EXE",
            *(f"{prefix}/bin/conda" for prefix in _UNIX_PREFIXES),
            "~/opt/miniconda3/bin/conda",
            "~/opt/anaconda3/bin/conda",
            "/opt/homebrew/Caskroom/miniconda/base/bin/conda",
            "/usr/local/Caskroom/miniconda/base/bin/conda",
            "/opt/homebrew/Caskroom/miniforge/base/bin/conda",
        ),
        linux=(
            "$CONDA_EXE",
            *(f"{prefix}/bin/conda" for prefix in _UNIX_PREFIXES),
        ),
        windows=(
            "%CONDA_EXE%",
            "%USERPROFILE%\\miniconda3\\Scripts\\conda.exe",
            "%USERPROFILE%\\anaconda3\\Scripts\\conda.exe",
            "%USERPROFILE%\\miniforge3\\Scripts\\conda.exe",
            "%PROGRAMDATA%\\miniconda3\\Scripts\\conda.exe",
            "%PROGRAMDATA%\\anaconda3\\Scripts\\conda.exe",
        ),
    )

    def list_packages(self) -> list[PackageRecord]:
        result = self.run_checked(self.list_args)
        return self.parse_output(result.stdout, environment=active_environment())

    def parse_output(self, raw: str, environment: Optional[str] = None) -> list[PackageRecord]:
        """
        Parse ``conda list --json``.

        Falls back to salvaging whole entries from damaged JSON, then to the
        plain ``conda list`` table (name, version, build, channel).
        """
        data = load_json(raw)
        if isinstance(data, list):
            return self._from_entries(data, environment)
        if data is not None:
            return []

        recovered = recover_objects(raw)
        if recovered:
            return self._from_entries(recovered, environment)

        return self._from_table(raw, environment)

    def _from_entries(self, entries: list, environment: Optional[str]) -> list[PackageRecord]:
        records = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            record = make_record(
                name=text(entry.get("name")),
                version=text(entry.get("version")),
                manager=self.id,
                location=PackageLocation.CONDA_ENV,
                channel=text(entry.get("channel")),
                environment=environment,
            )
            if record:
                records.append(record)
        return records

    def _from_table(self, raw: str, environment: Optional[str]) -> list[PackageRecord]:
        records = []
        for line in iter_lines(raw):
            if line.startswith("#"):
                continue
            parts = line.split()
            if len(parts) < 2 or not is_package_name(parts[0]) or not is_version(parts[1]):
                continue
            record = make_record(
                name=parts[0],
                version=parts[1],
                manager=self.id,
                location=PackageLocation.CONDA_ENV,
                channel=parts[3] if len(parts) >= 4 else None,
                environment=environment,
            )
            if record:
                records.append(record)
        return records

    def uninstall_args(self, name: str, location: Optional[PackageLocation] = None) -> list[str]:
        return ["remove", "-y", name]
