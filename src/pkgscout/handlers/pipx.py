"""Applications installed with pipx."""

import re
from typing import Optional

from pkgscout.handlers.base import ManagerHandler, platform_paths
from pkgscout.handlers.parsing import iter_lines, load_json, make_record, text
from pkgscout.models import ManagerId, PackageLocation, PackageRecord

# "package black 23.1.0, installed using Python 3.11.4"
_TEXT_LINE = re.compile(r"^package\s+(?P<name>\S+)\s+(?P<version>[^\s,]+)")
_MAIN_PACKAGE = re.compile(r'"main_package"\s*:')
_PACKAGE_FIELDS = re.compile(
    r'"package"\s*:\s*"(?P<name>[^"]+)"(?:(?!"package").)*?"package_version"\s*:\s*"(?P<version>[^"]+)"',
    re.DOTALL,
)


class PipxHandler(ManagerHandler):
    id = ManagerId.PIPX
    display_name = "pipx"
    executable = "pipx"
    list_args = ("list", "--json")
    common_paths = platform_paths(
        darwin=(
            "~/.local/bin/pipx",
            "/opt/homebrew/bin/pipx",
            "/usr/local/bin/pipx",
        ),
        linux=(
            "~/.local/bin/pipx",
            "/usr/bin/pipx",
            "/usr/local/bin/pipx",
            "/home/linuxbrew/.linuxbrew/bin/pipx",
        ),
        windows=(
            "%USERPROFILE%\\.local\\bin\\pipx.exe",
            "%APPDATA%\\Python\\Scripts\\pipx.exe",
            "%USERPROFILE%\\scoop\\shims\\pipx.exe",
        ),
    )

    def parse_output(self, raw: str) -> list[PackageRecord]:
        """
        Parse ``pipx list --json``.

        The document maps venv names to metadata, either under a top-level
        "venvs" key or directly. Damaged JSON is searched for main_package
        blocks; plain ``pipx list`` text is the last resort.
        """
        data = load_json(raw)
        if isinstance(data, dict):
            venvs = data.get("venvs", data)
            return self._from_venvs(venvs) if isinstance(venvs, dict) else []
        if data is not None:
            return []

        recovered = self._recover(raw)
        if recovered:
            return recovered
        return self._from_text(raw)

    def _record(self, name, version) -> Optional[PackageRecord]:
        return make_record(
            name=text(name),
            version=text(version),
            manager=self.id,
            location=PackageLocation.PIPX_VENV,
        )

    def _from_venvs(self, venvs: dict) -> list[PackageRecord]:
        records = []
        for venv_name, info in venvs.items():
            if not isinstance(info, dict):
                continue
            metadata = info.get("metadata")
            main = metadata.get("main_package") if isinstance(metadata, dict) else None
            if not isinstance(main, dict):
                continue
            record = self._record(main.get("package") or venv_name, main.get("package_version"))
            if record:
                records.append(record)
        return records

    def _recover(self, raw: str) -> list[PackageRecord]:
        if not isinstance(raw, str):
            return []
        markers = list(_MAIN_PACKAGE.finditer(raw))
        records = []
        seen = set()
        for i, marker in enumerate(markers):
            # Each block ends where the next main_package begins
            end = markers[i + 1].start() if i + 1 < len(markers) else len(raw)
            match = _PACKAGE_FIELDS.search(raw, marker.end(), end)
            if match is None:
                continue
            record = self._record(match.group("name"), match.group("version"))
            if record and (record.name, record.version) not in seen:
                seen.add((record.name, record.version))
                records.append(record)
        return records

    def _from_text(self, raw: str) -> list[PackageRecord]:
        records = []
        for line in iter_lines(raw):
            match = _TEXT_LINE.match(line)
            if not match:
                continue
            record = self._record(match.group("name"), match.group("version"))
            if record:
                records.append(record)
        return records

    def uninstall_args(self, name: str, location: Optional[PackageLocation] = None) -> list[str]:
        return ["uninstall", name]
