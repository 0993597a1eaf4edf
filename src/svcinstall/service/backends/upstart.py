"""Upstart job backend."""

from pathlib import Path

from svcinstall.config.models import InstallConfig, UninstallConfig
from svcinstall.service.base import (
    NO_ROOT_MESSAGE,
    Generated,
    ManualStep,
    RequiresManualStep,
    ServiceBackend,
    ServiceResult,
    double_quote,
)
from svcinstall.service.runtime import Runtime

JOB_DIR = Path("/etc/init")


class UpstartBackend(ServiceBackend):
    """Upstart job backend. Jobs live in /etc/init/<name>.conf."""

    def __init__(
        self,
        runtime: Runtime | None = None,
        temp_dir: Path | None = None,
        job_dir: Path = JOB_DIR,
    ):
        super().__init__(runtime=runtime, temp_dir=temp_dir)
        self.job_dir = job_dir

    @property
    def name(self) -> str:
        return "upstart"

    def job_path(self, name: str) -> Path:
        return self.job_dir / f"{name}.conf"

    def generate_config(self, config: InstallConfig) -> str:
        home = self._require_home(config)
        search_path = ":".join(self.runtime.search_path(home, config.path))

        lines = [
            f"# {config.name} {self.runtime.description_suffix}",
            "",
            f'description "{config.name} {self.runtime.label} Service"',
            'author "Service user"',
            "",
            "start on (filesystem and net-device-up IFACE!=lo)",
            "stop on runlevel [!2345]",
            "",
            "respawn",
            "respawn limit 10 5",
            "",
            f"env PATH=$PATH:{search_path}",
        ]
        for entry in config.env:
            key, value = entry.split("=", 1)
            lines.append(f"env {key}={double_quote(value)}")
        if config.cwd:
            lines.append(f"chdir {config.cwd}")
        lines.extend(
            [
                "",
                f"env SERVICE_COMMAND={double_quote(config.cmd or '')}",
                "",
                "exec $SERVICE_COMMAND",
                "",
            ]
        )
        return "\n".join(lines)

    async def install(
        self, config: InstallConfig, only_generate: bool = False
    ) -> ServiceResult:
        job_path = self.job_path(config.name)
        self._ensure_absent(config.name, job_path)

        content = self.generate_config(config)
        if only_generate:
            return Generated(path=job_path, content=content)

        staged = self._stage(config, content, suffix=".conf")
        return RequiresManualStep(
            path=job_path,
            message=NO_ROOT_MESSAGE,
            steps=(
                ManualStep(
                    "The upstart configuration has been saved to a temporary file, "
                    "copy this file to the correct location using the following command:",
                    f"sudo cp {staged} {job_path}",
                ),
                ManualStep("Start the service now", f"sudo start {config.name}"),
            ),
            staged_file=staged,
        )

    async def uninstall(self, config: UninstallConfig) -> ServiceResult:
        job_path = self.job_path(config.name)
        self._ensure_present(config.name, job_path)

        return RequiresManualStep(
            path=job_path,
            message=NO_ROOT_MESSAGE,
            steps=(
                ManualStep(
                    "Stop the service (if it's running):", f"sudo stop {config.name}"
                ),
                ManualStep("Remove the job file:", f"sudo rm {job_path}"),
            ),
        )
