"""Init system detection.

Detection order:
1. macOS: launchd
2. Windows: windows
3. Otherwise: classify the command name of process 1 as reported by ps

The result is never cached; every call probes the host again.
"""

import logging
import sys
from collections.abc import Callable
from pathlib import Path

from svcinstall.errors import UnsupportedSystemError
from svcinstall.service.base import InitSystem
from svcinstall.service.process import run_command

logger = logging.getLogger(__name__)

UPSTART_CONTROL = Path("/sbin/initctl")
UPSTART_JOB_DIR = Path("/etc/init")


def upstart_installed() -> bool:
    """Check for the upstart control binary next to its job directory."""
    try:
        return UPSTART_CONTROL.is_file() and UPSTART_JOB_DIR.is_dir()
    except OSError:
        return False


def classify_init_process(
    output: str, upstart_probe: Callable[[], bool] = upstart_installed
) -> InitSystem:
    """Map the command name of process 1 to an init system.

    Substrings are checked in order: systemd, init, openrc, docker-init.
    A generic "init" is upstart only when upstart_probe() says so.

    Raises:
        UnsupportedSystemError: If nothing matches.
    """
    if "systemd" in output:
        return InitSystem.SYSTEMD
    if "init" in output:
        return InitSystem.UPSTART if upstart_probe() else InitSystem.SYSVINIT
    if "openrc" in output:
        return InitSystem.OPENRC
    if "docker-init" in output:
        return InitSystem.DOCKER_INIT
    raise UnsupportedSystemError("Unsupported init system.")


async def detect_init_system(platform: str | None = None) -> InitSystem:
    """Detect the init system of the current host.

    Args:
        platform: Override for sys.platform.

    Returns:
        The detected InitSystem.

    Raises:
        UnsupportedSystemError: If process 1 cannot be inspected or classified.
    """
    platform = platform or sys.platform
    if platform == "darwin":
        return InitSystem.LAUNCHD
    if platform == "win32":
        return InitSystem.WINDOWS

    result = await run_command("ps", "-p", "1", "-o", "comm=")
    if not result.ok:
        raise UnsupportedSystemError(
            f"Unsupported init system. Could not inspect process 1: {result.diagnostics}"
        )

    init_system = classify_init_process(result.stdout)
    logger.debug("Detected init system %s from %r", init_system.value, result.stdout.strip())
    return init_system
