"""Shared fixtures: a scripted command runner and an isolated environment."""

import logging
import threading

import pytest

from pkgscout.handlers import HANDLER_TYPES
from pkgscout.models import CommandResult


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(exit_code=0, stdout=stdout)


def failed(exit_code: int = 1, stderr: str = "boom") -> CommandResult:
    return CommandResult(exit_code=exit_code, stderr=stderr)


class FakeRunner:
    """
    Command runner that replays scripted responses.

    Responses are looked up by (command, args) first, then by command alone.
    A response may be a CommandResult, a string (stdout of a successful run),
    an exception instance (raised), or a callable taking (command, args).
    Unknown commands behave like a missing binary.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, command, args, timeout_ms):
        args = list(args)
        with self._lock:
            self.calls.append((command, args, timeout_ms))

        response = self.responses.get((command, tuple(args)), self.responses.get(command))
        if callable(response) and not isinstance(response, CommandResult):
            response = response(command, args)
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return CommandResult(command=[command, *args], exit_code=127, stderr="command not found")
        if isinstance(response, str):
            return CommandResult(command=[command, *args], exit_code=0, stdout=response)
        return response.model_copy(update={"command": [command, *args]})

    def commands(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def make_executable(tmp_path):
    """Create an executable file under tmp_path and return its path as a string."""

    def _make(relative: str, mode: int = 0o755) -> str:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\necho fake\n")
        path.chmod(mode)
        return str(path)

    return _make


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the real PATH, home directory and install locations."""
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("PATH", str(empty_bin))
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "PKGSCOUT_CONFIG",
        "PKGSCOUT_LOG_LEVEL",
        "CONDA_EXE",
        "CONDA_DEFAULT_ENV",
        "PYENV_ROOT",
        "CARGO_HOME",
        "POETRY_VIRTUALENVS_PATH",
        "POETRY_CACHE_DIR",
        "XDG_CACHE_HOME",
    ):
        monkeypatch.delenv(var, raising=False)

    for handler_type in HANDLER_TYPES.values():
        monkeypatch.setattr(handler_type, "common_paths", ())


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
