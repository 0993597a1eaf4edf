"""High-level service installation interface."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from svcinstall.config.models import (
    InstallConfig,
    UninstallConfig,
    normalize_install_config,
    normalize_uninstall_config,
)
from svcinstall.errors import ValidationError
from svcinstall.service.backends import (
    ManagerRegistry,
    create_default_registry,
    resolve_init_system,
)
from svcinstall.service.base import InitSystem, ServiceBackend, ServiceResult
from svcinstall.service.detect import detect_init_system

logger = logging.getLogger(__name__)

Detector = Callable[[], Awaitable[InitSystem]]


class ServiceInstaller:
    """Single entry point for installing, uninstalling and rendering services.

    Normalizes options, picks a backend (detected, or forced by name) and
    delegates to it.

    Example:
        installer = ServiceInstaller(create_default_registry())
        result = await installer.install_service({"name": "web", "cmd": "python app.py"})
    """

    def __init__(
        self,
        registry: ManagerRegistry | None = None,
        detector: Detector = detect_init_system,
    ):
        """Initialize the installer.

        Args:
            registry: Backends by init system, or None for the built-ins.
            detector: Coroutine function returning the host's init system.
        """
        self._registry = registry or create_default_registry()
        self._detector = detector

    async def select_backend(self, force: str | None = None) -> ServiceBackend:
        """Get the backend for a forced init system name, or detect one.

        Raises:
            UnsupportedSystemError: If the init system is unknown or has no backend.
        """
        if force:
            init_system = resolve_init_system(force)
        else:
            init_system = await self._detector()
        backend = self._registry.get(init_system)
        logger.debug("Using %s backend for %s", backend.name, init_system.value)
        return backend

    async def install_service(
        self,
        options: InstallConfig | Mapping[str, Any],
        only_generate: bool = False,
        force: str | None = None,
    ) -> ServiceResult:
        """Install a command as a service, or render it when only_generate is set.

        Raises:
            ValidationError: If a manager is forced for a real install, the
                command is missing or the options are invalid.
        """
        if force and not only_generate:
            raise ValidationError(
                "Manually selecting an init system is not possible while installing."
            )
        config = normalize_install_config(options)
        if not config.cmd:
            raise ValidationError("Specify a command using '--cmd'")

        backend = await self.select_backend(force)
        return await backend.install(config, only_generate)

    async def uninstall_service(
        self,
        options: UninstallConfig | Mapping[str, Any],
        force: str | None = None,
    ) -> ServiceResult:
        """Uninstall a service."""
        config = normalize_uninstall_config(options)
        backend = await self.select_backend(force)
        return await backend.uninstall(config)

    async def generate_config(
        self,
        options: InstallConfig | Mapping[str, Any],
        force: str | None = None,
    ) -> str:
        """Render the artifact the selected backend would install."""
        config = normalize_install_config(options)
        if not config.cmd:
            raise ValidationError("Specify a command using '--cmd'")
        backend = await self.select_backend(force)
        return backend.generate_config(config)
