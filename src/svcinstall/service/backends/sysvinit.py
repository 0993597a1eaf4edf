"""SysV init script backend, also used inside containers running docker-init."""

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

INIT_SCRIPT_DIR = Path("/etc/init.d")
PID_DIR = Path("/var/run")

# Characters that stay special inside double quotes in sh
SHELL_SPECIAL = '"\\$`'


class SysvinitBackend(ServiceBackend):
    """LSB init script backend.

    Scripts are written to /etc/init.d/<name> by the operator; every install
    and uninstall is a manual runbook.
    """

    def __init__(
        self,
        runtime: Runtime | None = None,
        temp_dir: Path | None = None,
        init_dir: Path = INIT_SCRIPT_DIR,
        pid_dir: Path = PID_DIR,
    ):
        super().__init__(runtime=runtime, temp_dir=temp_dir)
        self.init_dir = init_dir
        self.pid_dir = pid_dir

    @property
    def name(self) -> str:
        return "sysvinit"

    def script_path(self, name: str) -> Path:
        return self.init_dir / name

    def generate_config(self, config: InstallConfig) -> str:
        home = self._require_home(config)
        name = config.name
        pid_file = self.pid_dir / f"{name}.pid"
        search_path = ":".join(self.runtime.search_path(home, config.path))

        lines = [
            "#!/bin/sh",
            "### BEGIN INIT INFO",
            f"# Provides:          {name}",
            "# Required-Start:    $remote_fs $syslog",
            "# Required-Stop:     $remote_fs $syslog",
            "# Default-Start:     2 3 4 5",
            "# Default-Stop:      0 1 6",
            f"# Short-Description: {name} {self.runtime.description_suffix}",
            f"# Description:       Start {name} service",
            "### END INIT INFO",
            "",
            f"PATH=$PATH:{search_path}",
            "export PATH",
        ]
        for entry in config.env:
            key, value = entry.split("=", 1)
            lines.append(f"export {key}={double_quote(value, SHELL_SPECIAL)}")
        lines.extend(["", f"SERVICE_COMMAND={double_quote(config.cmd or '')}"])
        if config.cwd:
            lines.append(f"WORKING_DIRECTORY={double_quote(config.cwd, SHELL_SPECIAL)}")

        start = [
            "  start)",
            f'    echo "Starting {name}..."',
        ]
        if config.cwd:
            start.append('    cd "$WORKING_DIRECTORY"')
        start.extend(
            [
                "    $SERVICE_COMMAND &",
                f"    echo $! > {pid_file}",
                "    ;;",
            ]
        )

        lines.extend(["", 'case "$1" in', *start])
        lines.extend(
            [
                "  stop)",
                f'    echo "Stopping {name}..."',
                f"    PID=$(cat {pid_file})",
                "    kill $PID",
                f"    rm {pid_file}",
                "    ;;",
                "  restart)",
                "    $0 stop",
                "    $0 start",
                "    ;;",
                "  status)",
                f"    if [ -e {pid_file} ]; then",
                f'      echo "{name} is running"',
                "    else",
                f'      echo "{name} is not running"',
                "    fi",
                "    ;;",
                "  *)",
                '    echo "Usage: $0 {start|stop|restart|status}"',
                "    exit 1",
                "    ;;",
                "esac",
                "",
                "exit 0",
                "",
            ]
        )
        return "\n".join(lines)

    async def install(
        self, config: InstallConfig, only_generate: bool = False
    ) -> ServiceResult:
        script_path = self.script_path(config.name)
        self._ensure_absent(config.name, script_path)

        content = self.generate_config(config)
        if only_generate:
            return Generated(path=script_path, content=content)

        staged = self._stage(config, content)
        return RequiresManualStep(
            path=script_path,
            message=NO_ROOT_MESSAGE,
            steps=(
                ManualStep(
                    "The init script has been saved to a temporary file, copy this "
                    "file to the correct location using the following command:",
                    f"sudo cp {staged} {script_path}",
                ),
                ManualStep("Make the script executable:", f"sudo chmod +x {script_path}"),
                ManualStep(
                    "Enable the service to start at boot:",
                    f"sudo update-rc.d {config.name} defaults",
                ),
                ManualStep("Start the service now", f"sudo service {config.name} start"),
            ),
            staged_file=staged,
        )

    async def uninstall(self, config: UninstallConfig) -> ServiceResult:
        script_path = self.script_path(config.name)
        self._ensure_present(config.name, script_path)

        return RequiresManualStep(
            path=script_path,
            message=(
                "The uninstaller does not have (and should not have) root permissions, "
                "so the next steps have to be carried out manually."
            ),
            steps=(
                ManualStep(
                    "Stop the service (if it's running):",
                    f"sudo service {config.name} stop",
                ),
                ManualStep(
                    "Disable the service from starting at boot:",
                    f"sudo update-rc.d -f {config.name} remove",
                ),
                ManualStep("Remove the init script:", f"sudo rm {script_path}"),
            ),
        )
