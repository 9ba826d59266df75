"""Tests for user configuration loading."""

import json

import pytest
from pydantic import ValidationError

from pkgscout.config import CONFIG_FILE, UserConfig, config_path, load_user_config
from pkgscout.models import ManagerId


def write_config(path, data):
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


class TestUserConfig:
    def test_defaults(self):
        config = UserConfig()
        assert config.custom_paths == {}
        assert config.disabled == frozenset()
        assert config.timeout is None

    def test_camel_case_keys(self):
        config = UserConfig.model_validate(
            {"customPaths": {"brew": ["/custom/brew"]}, "disabled": ["gem"], "timeout": 8000}
        )
        assert config.paths_for(ManagerId.BREW) == ["/custom/brew"]
        assert config.is_disabled(ManagerId.GEM)
        assert config.timeout == 8000

    def test_field_names_accepted(self):
        config = UserConfig(custom_paths={"conda": ["/opt/conda/bin/conda"]})
        assert config.paths_for("conda") == ["/opt/conda/bin/conda"]

    def test_single_path_string(self):
        config = UserConfig.model_validate({"customPaths": {"pipx": "/x/pipx"}})
        assert config.paths_for(ManagerId.PIPX) == ["/x/pipx"]

    def test_unknown_managers_ignored(self):
        config = UserConfig.model_validate(
            {"customPaths": {"apt": ["/usr/bin/apt"], "brew": []}, "disabled": ["apt", "NPM"]}
        )
        assert list(config.custom_paths) == [ManagerId.BREW]
        assert config.disabled == frozenset({ManagerId.NPM})

    def test_paths_keep_declared_order(self):
        config = UserConfig.model_validate({"customPaths": {"brew": ["/b", "/a", "/c"]}})
        assert config.paths_for(ManagerId.BREW) == ["/b", "/a", "/c"]

    def test_paths_for_unconfigured_manager(self):
        assert UserConfig().paths_for(ManagerId.CARGO) == []

    @pytest.mark.parametrize("timeout", [0, -5])
    def test_rejects_non_positive_timeout(self, timeout):
        with pytest.raises(ValidationError):
            UserConfig(timeout=timeout)


class TestConfigPath:
    def test_default(self):
        assert config_path() == CONFIG_FILE

    def test_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PKGSCOUT_CONFIG", str(tmp_path / "alt.json"))
        assert config_path() == tmp_path / "alt.json"

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PKGSCOUT_CONFIG", str(tmp_path / "alt.json"))
        assert config_path(tmp_path / "explicit.json") == tmp_path / "explicit.json"


class TestLoadUserConfig:
    def test_missing_file(self, tmp_path):
        assert load_user_config(tmp_path / "missing.json") == UserConfig()

    def test_valid_file(self, tmp_path):
        path = write_config(
            tmp_path / "config.json",
            {"customPaths": {"brew": ["/custom/homebrew/bin/brew"]}, "disabled": ["gem"], "timeout": 8000},
        )
        config = load_user_config(path)
        assert config.paths_for(ManagerId.BREW) == ["/custom/homebrew/bin/brew"]
        assert config.is_disabled(ManagerId.GEM)
        assert config.timeout == 8000

    def test_reads_env_var(self, tmp_path, monkeypatch):
        path = write_config(tmp_path / "env.json", {"disabled": ["cargo"]})
        monkeypatch.setenv("PKGSCOUT_CONFIG", str(path))
        assert load_user_config().is_disabled(ManagerId.CARGO)

    def test_malformed_json_falls_back(self, tmp_path, caplog):
        path = write_config(tmp_path / "config.json", "{not json")
        with caplog.at_level("WARNING"):
            config = load_user_config(path)
        assert config == UserConfig()
        assert "Ignoring unreadable config" in caplog.text

    def test_wrong_types_fall_back(self, tmp_path):
        path = write_config(tmp_path / "config.json", {"timeout": "soon", "disabled": 3})
        assert load_user_config(path) == UserConfig()

    def test_non_object_falls_back(self, tmp_path):
        path = write_config(tmp_path / "config.json", "[1, 2, 3]")
        assert load_user_config(path) == UserConfig()

    def test_deeply_nested_file_falls_back(self, tmp_path):
        path = write_config(tmp_path / "config.json", "[" * 100_000 + "]" * 100_000)
        assert load_user_config(path) == UserConfig()
