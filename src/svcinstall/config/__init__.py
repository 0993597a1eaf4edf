"""Configuration for svcinstall."""

from svcinstall.config.models import (
    DEFAULT_SERVICE_NAME,
    InstallConfig,
    UninstallConfig,
    normalize_install_config,
    normalize_uninstall_config,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "InstallConfig",
    "UninstallConfig",
    "normalize_install_config",
    "normalize_uninstall_config",
]
