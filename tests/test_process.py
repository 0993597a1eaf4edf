"""Tests for native command execution."""

import sys

import pytest

from svcinstall.service.process import CommandResult, run_command


class TestRunCommand:
    """Tests for run_command against real subprocesses."""

    @pytest.mark.asyncio
    async def test_captures_output(self):
        result = await run_command(sys.executable, "-c", "print('hello')")

        assert result.ok
        assert result.stdout.strip() == "hello"
        assert result.args[0] == sys.executable

    @pytest.mark.asyncio
    async def test_nonzero_exit(self):
        result = await run_command(
            sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"
        )

        assert not result.ok
        assert result.returncode == 3
        assert result.diagnostics == "bad"

    @pytest.mark.asyncio
    async def test_missing_binary(self):
        result = await run_command("svcinstall-definitely-missing-binary")

        assert result.returncode == 127
        assert not result.ok
        assert result.stderr


class TestCommandResult:
    """Tests for CommandResult helpers."""

    def test_diagnostics_prefers_stderr(self):
        result = CommandResult(args=("x",), returncode=1, stdout="out", stderr=" err\n")
        assert result.diagnostics == "err"

    def test_diagnostics_falls_back_to_stdout(self):
        result = CommandResult(args=("x",), returncode=1, stdout="out\n")
        assert result.diagnostics == "out"

    def test_command_line(self):
        result = CommandResult(args=("systemctl", "--user", "start", "web"), returncode=0)
        assert result.command_line == "systemctl --user start web"
