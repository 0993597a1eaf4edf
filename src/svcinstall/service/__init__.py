"""OS-native service installation.

Renders and installs one command as one service for:
- systemd (user and system scope)
- sysvinit / docker-init init scripts
- upstart jobs
- launchd agents and daemons on macOS
- the Windows service control manager

Example:
    from svcinstall.service import ServiceInstaller

    installer = ServiceInstaller()
    result = await installer.install_service({"name": "web", "cmd": "python app.py"})
"""

from svcinstall.service.backends import ManagerRegistry, create_default_registry
from svcinstall.service.base import (
    Completed,
    Generated,
    InitSystem,
    ManualStep,
    RequiresManualStep,
    ServiceBackend,
    ServiceResult,
)
from svcinstall.service.detect import detect_init_system
from svcinstall.service.manager import ServiceInstaller
from svcinstall.service.runtime import Runtime

__all__ = [
    "Completed",
    "Generated",
    "InitSystem",
    "ManagerRegistry",
    "ManualStep",
    "RequiresManualStep",
    "Runtime",
    "ServiceBackend",
    "ServiceInstaller",
    "ServiceResult",
    "create_default_registry",
    "detect_init_system",
]
