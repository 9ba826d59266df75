"""Tests for running external commands."""

import sys

from pkgscout.executor import EXIT_NOT_FOUND, run_command


class TestRunCommand:
    def test_captures_stdout(self):
        result = run_command(sys.executable, ["-c", "print('hello')"], 10_000)
        assert result.succeeded
        assert result.stdout.strip() == "hello"
        assert result.command == [sys.executable, "-c", "print('hello')"]

    def test_non_zero_exit_is_reported(self):
        result = run_command(
            sys.executable, ["-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"], 10_000
        )
        assert not result.succeeded
        assert result.exit_code == 3
        assert result.stderr == "bad"

    def test_timeout(self):
        result = run_command(sys.executable, ["-c", "import time; time.sleep(5)"], 200)
        assert result.timed_out
        assert not result.succeeded
        assert "timed out" in result.stderr

    def test_missing_binary(self, tmp_path):
        result = run_command(str(tmp_path / "no-such-manager"), ["--version"], 1_000)
        assert result.exit_code == EXIT_NOT_FOUND
        assert not result.succeeded
        assert not result.permission_denied

    def test_permission_denied(self, tmp_path):
        script = tmp_path / "locked"
        script.write_text("#!/bin/sh\necho hi\n")
        script.chmod(0o644)

        result = run_command(str(script), [], 1_000)

        assert not result.succeeded
        if sys.platform != "win32":
            assert result.permission_denied
