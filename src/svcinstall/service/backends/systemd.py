"""Systemd backend for Linux.

User scope units live in ~/.config/systemd/user and are activated with
systemctl --user. System scope units belong in /etc/systemd/system, which the
installer never writes itself.
"""

import logging
from pathlib import Path

from svcinstall.config.models import InstallConfig, UninstallConfig
from svcinstall.errors import ActivationError, PreconditionError, ServiceError
from svcinstall.service.base import (
    NO_ROOT_MESSAGE,
    Completed,
    Generated,
    ManualStep,
    RequiresManualStep,
    ServiceBackend,
    ServiceResult,
    double_quote,
)
from svcinstall.service.process import run_command
from svcinstall.service.runtime import Runtime

logger = logging.getLogger(__name__)

SYSTEM_UNIT_DIR = Path("/etc/systemd/system")

MISSING_USER_MESSAGE = (
    "Username not found in $USER, must be specified using the --user flag."
)


def _unit_value(value: str) -> str:
    """Quote a value for a unit file, escaping % so it is not read as a specifier."""
    return double_quote(value.replace("%", "%%"))


class SystemdBackend(ServiceBackend):
    """Systemd unit file backend.

    Uses systemctl --user for user scope activation.
    Unit file stored in ~/.config/systemd/user/<name>.service
    """

    def __init__(
        self,
        runtime: Runtime | None = None,
        temp_dir: Path | None = None,
        system_dir: Path = SYSTEM_UNIT_DIR,
    ):
        super().__init__(runtime=runtime, temp_dir=temp_dir)
        self.system_dir = system_dir

    @property
    def name(self) -> str:
        return "systemd"

    @staticmethod
    def user_path(home: str, name: str) -> Path:
        """Path to a user scope unit file."""
        return Path(home) / ".config" / "systemd" / "user" / f"{name}.service"

    def system_path(self, name: str) -> Path:
        """Path to a system scope unit file."""
        return self.system_dir / f"{name}.service"

    def generate_config(self, config: InstallConfig) -> str:
        """Render the unit file.

        System scope units run as config.user and are wanted by
        multi-user.target; user scope units omit User= and are wanted by
        default.target.
        """
        home = self._require_home(config)
        if config.system and not config.user:
            raise PreconditionError(MISSING_USER_MESSAGE)

        search_path = ":".join(self.runtime.search_path(home, config.path))

        lines = [
            "[Unit]",
            f"Description={config.name} {self.runtime.description_suffix}",
            "",
            "[Service]",
            f"ExecStart=/bin/sh -c {_unit_value(config.cmd or '')}",
            "Restart=always",
            "RestartSec=30",
            f"Environment=PATH={search_path}",
        ]
        lines.extend(f"Environment={_unit_value(entry)}" for entry in config.env)
        if config.cwd:
            lines.append(f"WorkingDirectory={config.cwd}")
        if config.system:
            lines.append(f"User={config.user}")
        lines.extend(
            [
                "",
                "[Install]",
                f"WantedBy={'multi-user.target' if config.system else 'default.target'}",
                "",
            ]
        )
        return "\n".join(lines)

    async def install(
        self, config: InstallConfig, only_generate: bool = False
    ) -> ServiceResult:
        """Install the unit, enabling linger first in user scope."""
        home = self._require_home(config)
        user_path = self.user_path(home, config.name)
        system_path = self.system_path(config.name)
        service_path = system_path if config.system else user_path

        # Never overwrite, regardless of scope
        self._ensure_absent(config.name, user_path, system_path)

        if not config.system and not only_generate:
            await self._enable_linger(config)

        content = self.generate_config(config)

        if only_generate:
            return Generated(path=service_path, content=content)

        if config.system:
            staged = self._stage(config, content, suffix=".service")
            return RequiresManualStep(
                path=service_path,
                message=NO_ROOT_MESSAGE,
                steps=(
                    ManualStep(
                        "The systemd configuration has been saved to a temporary file, "
                        "copy this file to the correct location using the following command:",
                        f"sudo cp {staged} {service_path}",
                    ),
                    ManualStep(
                        "Reload systemd configuration", "sudo systemctl daemon-reload"
                    ),
                    ManualStep(
                        "Enable the service", f"sudo systemctl enable {config.name}"
                    ),
                    ManualStep(
                        "Start the service now", f"sudo systemctl start {config.name}"
                    ),
                ),
                staged_file=staged,
            )

        self._write_artifact(service_path, content)
        await self._activate(config.name, service_path)

        logger.info("Installed systemd user service: %s", service_path)
        return Completed(
            path=service_path,
            message=f"Service '{config.name}' installed at '{service_path}' and enabled.",
        )

    async def uninstall(self, config: UninstallConfig) -> ServiceResult:
        """Remove a user scope unit, or describe how to remove a system one."""
        if config.system:
            service_path = self.system_path(config.name)
        else:
            service_path = self.user_path(self._require_home(config), config.name)

        self._ensure_present(config.name, service_path)

        if config.system:
            return RequiresManualStep(
                path=service_path,
                message=NO_ROOT_MESSAGE,
                steps=(
                    ManualStep(
                        "Stop the service (if it's running):",
                        f"sudo systemctl stop {config.name}",
                    ),
                    ManualStep(
                        "Disable the service:", f"sudo systemctl disable {config.name}"
                    ),
                    ManualStep("Remove the unit file:", f"sudo rm {service_path}"),
                    ManualStep(
                        "Reload systemd configuration", "sudo systemctl daemon-reload"
                    ),
                ),
            )

        try:
            service_path.unlink()
        except OSError as e:
            raise ServiceError(
                f"Failed to uninstall service: Could not remove '{service_path}'. Error: {e}"
            ) from e

        return Completed(
            path=service_path,
            message=f"Service '{config.name}' uninstalled successfully.",
            follow_up=(
                ManualStep(
                    "Run the following command to reload the systemctl daemon:",
                    "systemctl --user daemon-reload",
                ),
            ),
        )

    async def _enable_linger(self, config: InstallConfig) -> None:
        """Let user services run without an active login session."""
        if not config.user:
            raise PreconditionError(MISSING_USER_MESSAGE)
        result = await run_command("loginctl", "enable-linger", config.user)
        if not result.ok:
            raise PreconditionError(
                f"Failed to enable linger for user mode. {result.diagnostics}".strip()
            )

    async def _activate(self, name: str, service_path: Path) -> None:
        """Reload, enable and start; roll back on the first failure."""
        steps = (
            (("daemon-reload",), "Failed to reload daemon"),
            (("enable", name), "Failed to enable service"),
            (("start", name), "Failed to start service"),
        )
        enabled = False
        for args, failure in steps:
            result = await run_command("systemctl", "--user", *args)
            if not result.ok:
                await self._rollback(name, service_path, enabled)
                raise ActivationError(
                    f"{failure}, rolled back any changes.", result.diagnostics
                )
            if args[0] == "enable":
                enabled = True

    async def _rollback(self, name: str, service_path: Path, enabled: bool) -> None:
        """Undo a partial user scope install. Never raises."""
        try:
            if enabled:
                result = await run_command("systemctl", "--user", "disable", name)
                if not result.ok:
                    logger.error(
                        "Failed to disable '%s' while rolling back: %s",
                        name,
                        result.diagnostics,
                    )
            if not self._remove_quietly(service_path):
                return
            result = await run_command("systemctl", "--user", "daemon-reload")
            if not result.ok:
                logger.error(
                    "Failed to reload daemon while rolling back: %s", result.diagnostics
                )
        except Exception as e:
            logger.error("Failed to rollback changes for '%s': %s", name, e)
