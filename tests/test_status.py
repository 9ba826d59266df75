"""Tests for status classification."""

import pytest

from pkgscout.models import DiscoveryMethod, ManagerAvailability, ManagerId, SearchResult
from pkgscout.status import classify, failed_probe, path_missing_message


class TestClassify:
    def test_not_found(self):
        status = classify(ManagerId.CONDA, None)
        assert status.status == ManagerAvailability.NOT_INSTALLED
        assert status.found_path is None
        assert status.discovery_method is None
        assert not status.in_path

    @pytest.mark.parametrize("method", [DiscoveryMethod.DIRECT_COMMAND, DiscoveryMethod.PATH_SCAN])
    def test_path_tiers_are_available(self, method):
        status = classify(ManagerId.BREW, SearchResult(path="/usr/local/bin/brew", method=method))
        assert status.status == ManagerAvailability.AVAILABLE
        assert status.in_path
        assert status.discovery_method == method
        assert status.message is None

    @pytest.mark.parametrize("method", [DiscoveryMethod.COMMON_PATH, DiscoveryMethod.CUSTOM_PATH])
    def test_file_tiers_are_path_missing(self, method):
        status = classify(ManagerId.BREW, SearchResult(path="/opt/homebrew/bin/brew", method=method))
        assert status.status == ManagerAvailability.PATH_MISSING
        assert not status.in_path
        assert status.found_path == "/opt/homebrew/bin/brew"
        assert "/opt/homebrew/bin/brew" in status.message
        assert "PATH" in status.message

    def test_same_input_same_output(self):
        result = SearchResult(path="/bin/pipx", method=DiscoveryMethod.COMMON_PATH)
        assert classify(ManagerId.PIPX, result) == classify(ManagerId.PIPX, result)


class TestMessages:
    def test_path_missing_message(self):
        message = path_missing_message("/opt/homebrew/bin/brew")
        assert message.startswith("/opt/homebrew/bin/brew found but not on PATH")

    def test_failed_probe(self):
        status = failed_probe(ManagerId.GEM, "timed out")
        assert status.status == ManagerAvailability.NOT_INSTALLED
        assert status.message == "Discovery failed: timed out"
        assert not status.in_path
