"""Abstract base for service manager backends."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from svcinstall.config.models import InstallConfig, UninstallConfig
from svcinstall.errors import (
    ActivationError,
    AlreadyExistsError,
    NotFoundError,
    PreconditionError,
)
from svcinstall.service.runtime import Runtime

logger = logging.getLogger(__name__)


class InitSystem(str, Enum):
    """Init systems the detector can report."""

    SYSTEMD = "systemd"
    SYSVINIT = "sysvinit"
    DOCKER_INIT = "docker-init"
    UPSTART = "upstart"
    LAUNCHD = "launchd"
    WINDOWS = "windows"
    OPENRC = "openrc"


@dataclass(frozen=True)
class ManualStep:
    """A command the operator has to run, usually with elevated privileges."""

    description: str
    command: str


@dataclass(frozen=True)
class Generated:
    """Dry-run outcome: the rendered artifact and where it would go."""

    path: Path
    content: str


@dataclass(frozen=True)
class Completed:
    """The operation finished; follow_up lists optional native commands."""

    path: Path
    message: str
    follow_up: tuple[ManualStep, ...] = ()


@dataclass(frozen=True)
class RequiresManualStep:
    """Elevation is required, so the remaining work is handed to the operator.

    Attributes:
        path: Destination of the artifact.
        message: Why the steps are manual.
        steps: Ordered commands to run.
        staged_file: Temporary file holding the rendered artifact (install only).
    """

    path: Path
    message: str
    steps: tuple[ManualStep, ...]
    staged_file: Path | None = None


ServiceResult = Generated | Completed | RequiresManualStep

NO_ROOT_MESSAGE = (
    "The service installer does not have (and should not have) root permissions, "
    "so the next steps have to be carried out manually."
)


def double_quote(value: str, special: str = '"\\') -> str:
    """Wrap value in double quotes, backslash-escaping each character in special."""
    escaped = "".join(f"\\{char}" if char in special else char for char in value)
    return f'"{escaped}"'


class ServiceBackend(ABC):
    """Abstract interface for service manager backends.

    Backends render and install one service artifact for one init system:
    - systemd unit files
    - sysvinit scripts (also used for docker-init)
    - upstart jobs
    - launchd property lists
    - Windows service wrappers
    """

    def __init__(self, runtime: Runtime | None = None, temp_dir: Path | None = None):
        """Initialize the backend.

        Args:
            runtime: Interpreter to reference in rendered PATHs. Defaults to
                the running Python.
            temp_dir: Directory for staged artifacts. Defaults to the system
                temporary directory.
        """
        self.runtime = runtime or Runtime.current()
        self._temp_dir = temp_dir

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'systemd', 'launchd')."""
        ...

    @abstractmethod
    def generate_config(self, config: InstallConfig) -> str:
        """Render the native artifact. Pure; never touches the filesystem."""
        ...

    @abstractmethod
    async def install(
        self, config: InstallConfig, only_generate: bool = False
    ) -> ServiceResult:
        """Install the service, or only render it when only_generate is set.

        Raises:
            AlreadyExistsError: If an artifact exists at any candidate path.
            PreconditionError: If a requirement is not met; nothing is written.
            ActivationError: If the artifact could not be written or a native
                command failed; changes are rolled back.
        """
        ...

    @abstractmethod
    async def uninstall(self, config: UninstallConfig) -> ServiceResult:
        """Remove the service artifact, or describe how to remove it.

        Raises:
            NotFoundError: If no artifact exists for the requested scope.
        """
        ...

    @staticmethod
    def _require_home(config: InstallConfig | UninstallConfig) -> str:
        if not config.home:
            raise PreconditionError(
                "Home directory not found in $HOME, must be specified using the --home flag."
            )
        return config.home

    @staticmethod
    def _ensure_absent(name: str, *paths: Path) -> None:
        for path in paths:
            if path.exists():
                raise AlreadyExistsError(f"Service '{name}' already exists in '{path}'.")

    @staticmethod
    def _ensure_present(name: str, path: Path) -> None:
        if not path.exists():
            raise NotFoundError(f"Service '{name}' does not exist in '{path}'.")

    def _stage(self, config: InstallConfig, content: str, suffix: str = "") -> Path:
        """Write content to a private temporary file for a manual copy step."""
        fd, name = tempfile.mkstemp(
            prefix=f"{config.name}-", suffix=suffix, dir=self._temp_dir
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        logger.debug("Staged %s artifact at %s", self.name, name)
        return Path(name)

    def _write_artifact(self, path: Path, content: str, newline: str | None = None) -> None:
        """Write an artifact, removing any partial file if the write fails.

        Raises:
            ActivationError: If the directory or file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8", newline=newline)
        except OSError as e:
            self._remove_quietly(path)
            raise ActivationError(f"Could not write '{path}'.", str(e)) from e
        logger.debug("Wrote %s artifact to %s", self.name, path)

    @staticmethod
    def _remove_quietly(path: Path) -> bool:
        """Best-effort removal used by rollbacks. Failures are logged, not raised."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to rollback changes: Could not remove '%s'. Error: %s", path, e)
            return False
        logger.info("Changes rolled back: Removed '%s'.", path)
        return True
