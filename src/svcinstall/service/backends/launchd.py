"""Launchd backend for macOS."""

import logging
import plistlib
from pathlib import Path

from svcinstall.config.models import InstallConfig, UninstallConfig
from svcinstall.errors import ServiceError
from svcinstall.service.base import (
    Completed,
    Generated,
    ManualStep,
    ServiceBackend,
    ServiceResult,
)
from svcinstall.service.runtime import Runtime

logger = logging.getLogger(__name__)

SYSTEM_DAEMON_DIR = Path("/Library/LaunchDaemons")


class LaunchdBackend(ServiceBackend):
    """Launchd property list backend.

    User agents are stored in ~/Library/LaunchAgents/<name>.plist, system
    daemons in /Library/LaunchDaemons/<name>.plist. Loading is left to the
    operator.
    """

    def __init__(
        self,
        runtime: Runtime | None = None,
        temp_dir: Path | None = None,
        system_dir: Path = SYSTEM_DAEMON_DIR,
    ):
        super().__init__(runtime=runtime, temp_dir=temp_dir)
        self.system_dir = system_dir

    @property
    def name(self) -> str:
        return "launchd"

    @staticmethod
    def user_path(home: str, name: str) -> Path:
        """Path to a user agent plist."""
        return Path(home) / "Library" / "LaunchAgents" / f"{name}.plist"

    def system_path(self, name: str) -> Path:
        """Path to a system daemon plist."""
        return self.system_dir / f"{name}.plist"

    def generate_config(self, config: InstallConfig) -> str:
        """Render the property list.

        ProgramArguments is the command split on whitespace; extra env
        entries become EnvironmentVariables keys after PATH.
        """
        home = self._require_home(config)

        environment = {"PATH": ":".join(self.runtime.search_path(home, config.path))}
        for entry in config.env:
            key, value = entry.split("=", 1)
            environment[key] = value

        plist: dict[str, object] = {
            "Label": config.name,
            "ProgramArguments": (config.cmd or "").split(),
            "EnvironmentVariables": environment,
        }
        if config.cwd:
            plist["WorkingDirectory"] = config.cwd
        plist["KeepAlive"] = True

        return plistlib.dumps(plist, sort_keys=False).decode("utf-8")

    async def install(
        self, config: InstallConfig, only_generate: bool = False
    ) -> ServiceResult:
        """Write the plist; loading it is printed as a follow-up."""
        home = self._require_home(config)
        user_path = self.user_path(home, config.name)
        system_path = self.system_path(config.name)
        plist_path = system_path if config.system else user_path

        # Never overwrite, regardless of scope
        self._ensure_absent(config.name, user_path, system_path)

        content = self.generate_config(config)
        if only_generate:
            return Generated(path=plist_path, content=content)

        self._write_artifact(plist_path, content)

        logger.info("Installed launchd service: %s", plist_path)
        if config.system:
            load = ManualStep(
                "Run the following command as root to load the service:",
                f"sudo launchctl load {plist_path}",
            )
        else:
            load = ManualStep(
                "Run the following command to load the service:",
                f"launchctl load {plist_path}",
            )
        return Completed(
            path=plist_path,
            message=f"Service '{config.name}' installed at '{plist_path}'.",
            follow_up=(load,),
        )

    async def uninstall(self, config: UninstallConfig) -> ServiceResult:
        """Remove the plist; unloading it is printed as a follow-up."""
        if config.system:
            plist_path = self.system_path(config.name)
        else:
            plist_path = self.user_path(self._require_home(config), config.name)

        self._ensure_present(config.name, plist_path)

        try:
            plist_path.unlink()
        except OSError as e:
            raise ServiceError(
                f"Failed to uninstall service: Could not remove '{plist_path}'. Error: {e}"
            ) from e

        if config.system:
            unload = ManualStep(
                "Run the following command as root to unload the service (if it's running):",
                f"sudo launchctl unload {plist_path}",
            )
        else:
            unload = ManualStep(
                "Run the following command to unload the service (if it's running):",
                f"launchctl unload {plist_path}",
            )
        return Completed(
            path=plist_path,
            message=f"Service '{config.name}' uninstalled successfully.",
            follow_up=(unload,),
        )
