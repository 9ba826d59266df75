"""Tests for the session path cache."""

import threading
from unittest.mock import patch

from pkgscout.cache import PathCache
from pkgscout.models import DiscoveryMethod, ManagerId, SearchResult


class TestPathCache:
    def test_empty_cache(self):
        cache = PathCache()
        assert cache.get_path("brew") is None
        assert not cache.has_path("brew")
        assert cache.get_availability("brew") is None
        assert cache.get_result("brew") is None

    def test_set_and_get_path(self):
        cache = PathCache()
        cache.set_path("brew", "/opt/homebrew/bin/brew", DiscoveryMethod.COMMON_PATH)
        assert cache.get_path("brew") == "/opt/homebrew/bin/brew"
        assert cache.has_path("brew")
        assert cache.get_result("brew") == SearchResult(
            path="/opt/homebrew/bin/brew", method=DiscoveryMethod.COMMON_PATH
        )

    def test_negative_entry(self):
        cache = PathCache()
        cache.set_path("conda", None)
        assert cache.has_path("conda")
        assert cache.get_path("conda") is None
        assert cache.get_result("conda") is None

    def test_enum_and_string_keys_are_the_same(self):
        cache = PathCache()
        cache.set_path(ManagerId.PYENV, "/usr/bin/pyenv", DiscoveryMethod.PATH_SCAN)
        assert cache.get_path("pyenv") == "/usr/bin/pyenv"

    def test_availability(self):
        cache = PathCache()
        cache.set_availability("pipx", True)
        assert cache.get_availability("pipx") is True
        cache.set_availability("pipx", False)
        assert cache.get_availability("pipx") is False

    def test_availability_kept_when_path_set(self):
        cache = PathCache()
        cache.set_availability("gem", True)
        cache.set_path("gem", "/usr/bin/gem", DiscoveryMethod.PATH_SCAN)
        assert cache.get_availability("gem") is True

    def test_clear(self):
        cache = PathCache()
        cache.set_path("brew", "/usr/local/bin/brew", DiscoveryMethod.PATH_SCAN)
        cache.set_availability("brew", True)
        cache.clear()
        assert not cache.has_path("brew")
        assert cache.get_availability("brew") is None

    def test_entries_live_for_the_session_by_default(self):
        cache = PathCache()
        cache.set_path("brew", "/usr/local/bin/brew", DiscoveryMethod.PATH_SCAN)
        with patch("pkgscout.cache.time.monotonic", return_value=10**9):
            assert cache.get_path("brew") == "/usr/local/bin/brew"

    def test_ttl_expires_entries(self):
        cache = PathCache(ttl=60)
        with patch("pkgscout.cache.time.monotonic", return_value=1000.0):
            cache.set_path("brew", "/usr/local/bin/brew", DiscoveryMethod.PATH_SCAN)
        with patch("pkgscout.cache.time.monotonic", return_value=1030.0):
            assert cache.get_path("brew") == "/usr/local/bin/brew"
        with patch("pkgscout.cache.time.monotonic", return_value=1061.0):
            assert cache.get_path("brew") is None
            assert not cache.has_path("brew")

    def test_concurrent_writes_to_different_managers(self):
        cache = PathCache()
        managers = [m.value for m in ManagerId]

        def write(manager):
            for i in range(200):
                cache.set_path(manager, f"/bin/{manager}", DiscoveryMethod.PATH_SCAN)
                cache.set_availability(manager, True)

        threads = [threading.Thread(target=write, args=(m,)) for m in managers]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for manager in managers:
            assert cache.get_path(manager) == f"/bin/{manager}"
            assert cache.get_availability(manager) is True
