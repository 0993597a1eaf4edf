"""Windows service control manager backend."""

import logging
from pathlib import Path

from svcinstall.config.models import InstallConfig, UninstallConfig
from svcinstall.errors import ActivationError, ServiceError
from svcinstall.service.base import Completed, Generated, ServiceBackend, ServiceResult
from svcinstall.service.process import CommandResult, run_command

logger = logging.getLogger(__name__)

HOST_MODULE = "svcinstall.service.winhost"


class WindowsBackend(ServiceBackend):
    """Windows SCM backend.

    A batch wrapper in ~/.service/<name>.bat prepares the environment and
    hands the command to a service host process. The SCM entry is created
    with sc.exe through an elevation prompt.
    """

    @property
    def name(self) -> str:
        return "windows"

    @staticmethod
    def batch_path(home: str, name: str) -> Path:
        return Path(home) / ".service" / f"{name}.bat"

    def generate_config(self, config: InstallConfig) -> str:
        home = self._require_home(config)
        search_path = ";".join(
            self.runtime.search_path(home, config.path, windows=True)
        )

        lines = ["@echo off"]
        if config.cwd:
            lines.append(f'cd "{config.cwd}"')
        lines.append(f'set "PATH=%PATH%;{search_path}"')
        lines.extend(f'set "{entry}"' for entry in config.env)
        lines.append(
            f'"{self.runtime.executable}" -m {HOST_MODULE} '
            f"--name {config.name} -- {config.cmd or ''}"
        )
        return "\r\n".join(lines) + "\r\n"

    async def install(
        self, config: InstallConfig, only_generate: bool = False
    ) -> ServiceResult:
        """Write the batch wrapper, then register it with the SCM."""
        batch_path = self.batch_path(self._require_home(config), config.name)
        self._ensure_absent(config.name, batch_path)

        content = self.generate_config(config)
        if only_generate:
            return Generated(path=batch_path, content=content)

        self._write_artifact(batch_path, content, newline="")

        sc_args = (
            f'create {config.name} binPath="cmd.exe /C {batch_path}" '
            f'start= auto DisplayName= "{config.name}" obj= LocalSystem'
        )
        result = await self._run_elevated_sc(sc_args)
        if not result.ok:
            self._remove_quietly(batch_path)
            raise ActivationError("Failed to install service.", result.diagnostics)

        logger.info("Installed Windows service %s using %s", config.name, batch_path)
        return Completed(
            path=batch_path,
            message=f"Service '{config.name}' installed at '{batch_path}' and enabled.",
        )

    async def uninstall(self, config: UninstallConfig) -> ServiceResult:
        """Delete the SCM entry, then the batch wrapper."""
        batch_path = self.batch_path(self._require_home(config), config.name)
        self._ensure_present(config.name, batch_path)

        result = await self._run_elevated_sc(f"delete {config.name}")
        if not result.ok:
            raise ActivationError("Failed to uninstall service.", result.diagnostics)

        try:
            batch_path.unlink()
        except OSError as e:
            raise ServiceError(
                f"Failed to uninstall service: Could not remove '{batch_path}'. Error: {e}"
            ) from e

        return Completed(
            path=batch_path,
            message=f"Service '{config.name}' uninstalled successfully.",
        )

    @staticmethod
    async def _run_elevated_sc(sc_args: str) -> CommandResult:
        """Run sc.exe through PowerShell so Windows shows its UAC prompt."""
        return await run_command(
            "powershell.exe",
            "-Command",
            "Start-Process",
            "sc.exe",
            "-ArgumentList",
            f"'{sc_args}'",
            "-Verb",
            "RunAs",
        )
