"""Tests for data models."""

import pytest
from pydantic import ValidationError

from pkgscout.models import (
    CommandResult,
    DiscoveryMethod,
    ManagerAvailability,
    ManagerId,
    PackageLocation,
    PackageManagerStatus,
    PackageRecord,
    SearchResult,
)


class TestManagerId:
    def test_core_managers_exist(self):
        assert ManagerId.BREW == "brew"
        assert ManagerId.CONDA == "conda"
        assert ManagerId.PIPX == "pipx"
        assert ManagerId.POETRY == "poetry"
        assert ManagerId.PYENV == "pyenv"

    def test_legacy_managers_exist(self):
        for name in ("npm", "pip", "composer", "cargo", "gem"):
            assert ManagerId(name).value == name


class TestPackageRecord:
    def test_minimal_record(self):
        record = PackageRecord(name="numpy", version="1.26.0", manager="conda")
        assert record.manager == ManagerId.CONDA
        assert record.location == PackageLocation.GLOBAL
        assert record.channel is None

    def test_strips_name_and_version(self):
        record = PackageRecord(name="  wget ", version=" 1.21.4\n", manager="brew")
        assert record.name == "wget"
        assert record.version == "1.21.4"

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            PackageRecord(name="", version="1.0", manager="pip")

    def test_rejects_blank_version(self):
        with pytest.raises(ValidationError):
            PackageRecord(name="requests", version="   ", manager="pip")

    def test_rejects_unknown_manager(self):
        with pytest.raises(ValidationError):
            PackageRecord(name="x", version="1", manager="apt")

    def test_is_immutable(self):
        record = PackageRecord(name="rake", version="13.0.6", manager="gem")
        with pytest.raises(ValidationError):
            record.name = "other"

    def test_location_accepts_hyphenated_values(self):
        record = PackageRecord(name="black", version="23.1.0", manager="pipx", location="pipx-venv")
        assert record.location == PackageLocation.PIPX_VENV


class TestSearchResult:
    @pytest.mark.parametrize(
        "method,in_path",
        [
            (DiscoveryMethod.DIRECT_COMMAND, True),
            (DiscoveryMethod.PATH_SCAN, True),
            (DiscoveryMethod.COMMON_PATH, False),
            (DiscoveryMethod.CUSTOM_PATH, False),
        ],
    )
    def test_in_path_follows_method(self, method, in_path):
        assert SearchResult(path="/bin/x", method=method).in_path is in_path


class TestCommandResult:
    def test_zero_exit_succeeds(self):
        assert CommandResult(exit_code=0).succeeded

    def test_non_zero_exit_fails(self):
        assert not CommandResult(exit_code=2).succeeded

    def test_timeout_fails_even_with_zero_exit(self):
        assert not CommandResult(exit_code=0, timed_out=True).succeeded


class TestPackageManagerStatus:
    def test_is_installed(self):
        assert PackageManagerStatus(manager="brew", status="available").is_installed
        assert PackageManagerStatus(manager="brew", status="path_missing").is_installed
        assert not PackageManagerStatus(
            manager="brew", status=ManagerAvailability.NOT_INSTALLED
        ).is_installed
