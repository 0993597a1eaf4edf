"""Shared test fixtures and factories."""

from pathlib import Path

import pytest

from svcinstall.config.models import InstallConfig
from svcinstall.service.process import CommandResult
from svcinstall.service.runtime import Runtime

# =============================================================================
# Native Command Fakes
# =============================================================================


class FakeRunner:
    """Stand-in for run_command that records calls and returns canned results.

    Responses are matched by substring against the joined command line; the
    first match wins. Unmatched commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._responses: list[tuple[str, int, str, str]] = []

    def respond(
        self, fragment: str, stdout: str = "", stderr: str = "", returncode: int = 0
    ) -> None:
        self._responses.append((fragment, returncode, stdout, stderr))

    def fail(self, fragment: str, stderr: str = "boom", returncode: int = 1) -> None:
        self.respond(fragment, stderr=stderr, returncode=returncode)

    @property
    def commands(self) -> list[str]:
        return [" ".join(call) for call in self.calls]

    async def __call__(self, *args: str) -> CommandResult:
        self.calls.append(args)
        line = " ".join(args)
        for fragment, returncode, stdout, stderr in self._responses:
            if fragment in line:
                return CommandResult(
                    args=args, returncode=returncode, stdout=stdout, stderr=stderr
                )
        return CommandResult(args=args, returncode=0)


@pytest.fixture
def fake_runner(monkeypatch) -> FakeRunner:
    """Replace every native command invocation with a FakeRunner."""
    runner = FakeRunner()
    for module in (
        "svcinstall.service.backends.systemd",
        "svcinstall.service.backends.windows",
        "svcinstall.service.detect",
    ):
        monkeypatch.setattr(f"{module}.run_command", runner)
    return runner


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def runtime() -> Runtime:
    """A fixed interpreter so rendered PATHs are predictable."""
    return Runtime(label="Python", executable="/opt/python/bin/python3")


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory."""
    path = tmp_path / "home" / "testuser"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Directory receiving staged artifacts for manual steps."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def install_config(home: Path) -> InstallConfig:
    """A complete user scope install configuration."""
    return InstallConfig(
        name="test-service",
        cmd="python -m http.server 8080",
        user="testuser",
        home=str(home),
        cwd="/srv/app",
        path=["/usr/local/bin"],
        env=["FOO=bar"],
    )


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
