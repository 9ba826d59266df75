"""Handlers for the older language-ecosystem managers: npm, pip, composer, cargo and gem."""

import re
from typing import Optional

from pkgscout.errors import CommandFailedError
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


class _SimpleHandler(ManagerHandler):
    """Global packages with a plain uninstall command."""

    uninstall_prefix: tuple[str, ...] = ()

    def _record(self, name, version, **extra) -> Optional[PackageRecord]:
        return make_record(
            name=text(name),
            version=text(version),
            manager=self.id,
            location=PackageLocation.GLOBAL,
            **extra,
        )

    def uninstall_args(self, name: str, location: Optional[PackageLocation] = None) -> list[str]:
        return [*self.uninstall_prefix, name]


# =============================================================================
# npm
# =============================================================================

_NPM_DEPENDENCY = re.compile(r'"(?P<name>[^"]+)"\s*:\s*\{\s*"version"\s*:\s*"(?P<version>[^"]+)"')
_NPM_TREE = re.compile(r"^[\s│├└─┬`|+\\-]+")


class NpmHandler(_SimpleHandler):
    id = ManagerId.NPM
    display_name = "npm"
    executable = "npm"
    list_args = ("list", "-g", "--depth=0", "--json")
    uninstall_prefix = ("uninstall", "-g")
    common_paths = platform_paths(
        darwin=("/opt/homebrew/bin/npm", "/usr/local/bin/npm", "~/.volta/bin/npm"),
        linux=("/usr/bin/npm", "/usr/local/bin/npm", "~/.volta/bin/npm"),
        windows=("%PROGRAMFILES%\\nodejs\\npm.cmd", "%APPDATA%\\npm\\npm.cmd"),
    )

    def list_packages(self) -> list[PackageRecord]:
        # npm exits 1 on extraneous or invalid packages but still prints the tree
        result = self.run(self.list_args)
        if not result.succeeded and (result.timed_out or not result.stdout.strip()):
            raise CommandFailedError(self.id.value, result)
        return self.parse_output(result.stdout)

    def parse_output(self, raw: str) -> list[PackageRecord]:
        data = load_json(raw)
        if isinstance(data, dict):
            dependencies = data.get("dependencies")
            if not isinstance(dependencies, dict):
                return []
            records = []
            for name, info in dependencies.items():
                version = info.get("version") if isinstance(info, dict) else info
                record = self._record(name, version)
                if record:
                    records.append(record)
            return records
        if data is not None:
            return []

        records = []
        if isinstance(raw, str):
            for match in _NPM_DEPENDENCY.finditer(raw):
                record = self._record(match.group("name"), match.group("version"))
                if record:
                    records.append(record)
        if records:
            return records

        # `npm list -g` tree: "├── @scope/name@1.2.3"
        for line in iter_lines(raw):
            if not _NPM_TREE.match(line):
                continue
            entry = _NPM_TREE.sub("", line).split()
            if not entry:
                continue
            spec = entry[0]
            at = spec.rfind("@")
            if at <= 0:
                continue
            name, version = spec[:at], spec[at + 1 :]
            if is_package_name(name) and is_version(version):
                record = self._record(name, version)
                if record:
                    records.append(record)
        return records


# =============================================================================
# pip
# =============================================================================


class PipHandler(_SimpleHandler):
    id = ManagerId.PIP
    display_name = "pip"
    executable = "pip"
    list_args = ("list", "--format=json")
    uninstall_prefix = ("uninstall", "-y")
    common_paths = platform_paths(
        darwin=("/opt/homebrew/bin/pip3", "/usr/local/bin/pip3", "/usr/bin/pip3", "~/.local/bin/pip"),
        linux=("/usr/bin/pip3", "/usr/local/bin/pip3", "~/.local/bin/pip"),
        windows=("%LOCALAPPDATA%\\Programs\\Python\\Python312\\Scripts\\pip.exe",),
    )

    def parse_output(self, raw: str) -> list[PackageRecord]:
        data = load_json(raw)
        if isinstance(data, list):
            entries = data
        elif data is not None:
            return []
        else:
            entries = recover_objects(raw)

        if entries:
            records = []
            for entry in entries:
                if isinstance(entry, dict):
                    record = self._record(entry.get("name"), entry.get("version"))
                    if record:
                        records.append(record)
            return records

        # `pip list` table: "Package    Version" header, dashes, then rows
        records = []
        for line in iter_lines(raw):
            parts = line.split()
            if len(parts) < 2 or parts[0] == "Package" or not is_package_name(parts[0]):
                continue
            if is_version(parts[1]):
                record = self._record(parts[0], parts[1])
                if record:
                    records.append(record)
        return records


# =============================================================================
# composer
# =============================================================================


class ComposerHandler(_SimpleHandler):
    id = ManagerId.COMPOSER
    display_name = "Composer"
    executable = "composer"
    list_args = ("global", "show", "--format=json")
    uninstall_prefix = ("global", "remove")
    common_paths = platform_paths(
        darwin=("/opt/homebrew/bin/composer", "/usr/local/bin/composer", "~/.local/bin/composer"),
        linux=("/usr/bin/composer", "/usr/local/bin/composer", "~/.local/bin/composer"),
        windows=("%PROGRAMDATA%\\ComposerSetup\\bin\\composer.bat",),
    )

    def _from_entries(self, entries: list) -> list[PackageRecord]:
        records = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            record = self._record(
                entry.get("name"),
                entry.get("version"),
                description=text(entry.get("description")),
                homepage=text(entry.get("homepage")),
            )
            if record:
                records.append(record)
        return records

    def parse_output(self, raw: str) -> list[PackageRecord]:
        data = load_json(raw)
        if isinstance(data, dict):
            installed = data.get("installed")
            return self._from_entries(installed) if isinstance(installed, list) else []
        if data is not None:
            return []

        recovered = recover_objects(raw)
        if recovered:
            return self._from_entries(recovered)

        # `composer global show`: "vendor/package v1.2.3 Description"
        records = []
        for line in iter_lines(raw):
            parts = line.split(None, 2)
            if len(parts) < 2 or "/" not in parts[0] or not is_package_name(parts[0]):
                continue
            if is_version(parts[1]):
                record = self._record(parts[0], parts[1], description=text(parts[2]) if len(parts) > 2 else None)
                if record:
                    records.append(record)
        return records


# =============================================================================
# cargo
# =============================================================================

# "ripgrep v13.0.0:" or "cargo-edit v0.12.2 (https://github.com/...):"
_CARGO_CRATE = re.compile(r"^(?P<name>\S+)\s+v(?P<version>[^\s:]+)(?:\s+\([^)]*\))?:$")


class CargoHandler(_SimpleHandler):
    id = ManagerId.CARGO
    display_name = "Cargo"
    executable = "cargo"
    list_args = ("install", "--list")
    uninstall_prefix = ("uninstall",)
    common_paths = platform_paths(
        darwin=("$CARGO_HOME/bin/cargo", "~/.cargo/bin/cargo", "/opt/homebrew/bin/cargo"),
        linux=("$CARGO_HOME/bin/cargo", "~/.cargo/bin/cargo", "/usr/bin/cargo"),
        windows=("%CARGO_HOME%\\bin\\cargo.exe", "%USERPROFILE%\\.cargo\\bin\\cargo.exe"),
    )

    def parse_output(self, raw: str) -> list[PackageRecord]:
        if not isinstance(raw, str):
            return []
        records = []
        for line in raw.splitlines():
            # Installed binaries are listed indented below their crate
            if not line or line[0].isspace():
                continue
            match = _CARGO_CRATE.match(line.rstrip())
            if match and is_package_name(match.group("name")):
                record = self._record(match.group("name"), match.group("version"))
                if record:
                    records.append(record)
        return records


# =============================================================================
# gem
# =============================================================================

# "rake (13.0.6, 12.3.3)" or "bundler (default: 2.4.10)"
_GEM_LINE = re.compile(r"^(?P<name>\S+)\s+\((?P<versions>[^)]*)\)")


class GemHandler(_SimpleHandler):
    id = ManagerId.GEM
    display_name = "RubyGems"
    executable = "gem"
    list_args = ("list", "--local")
    uninstall_prefix = ("uninstall", "-x")
    common_paths = platform_paths(
        darwin=(
            "/opt/homebrew/opt/ruby/bin/gem",
            "/usr/local/opt/ruby/bin/gem",
            "~/.rbenv/shims/gem",
            "/usr/bin/gem",
        ),
        linux=("/usr/bin/gem", "/usr/local/bin/gem", "~/.rbenv/shims/gem"),
        windows=("C:\\Ruby32-x64\\bin\\gem.cmd",),
    )

    def parse_output(self, raw: str) -> list[PackageRecord]:
        records = []
        for line in iter_lines(raw):
            match = _GEM_LINE.match(line)
            if not match or not is_package_name(match.group("name")):
                continue
            # Newest version first; drop "default:" markers and platform suffixes
            first = match.group("versions").split(",")[0].replace("default:", "").split()
            if not first or not is_version(first[0]):
                continue
            record = self._record(match.group("name"), first[0])
            if record:
                records.append(record)
        return records
