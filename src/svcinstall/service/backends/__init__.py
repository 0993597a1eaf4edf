"""Service manager backends and the registry that selects between them."""

from svcinstall.errors import UnsupportedSystemError
from svcinstall.service.backends.launchd import LaunchdBackend
from svcinstall.service.backends.systemd import SystemdBackend
from svcinstall.service.backends.sysvinit import SysvinitBackend
from svcinstall.service.backends.upstart import UpstartBackend
from svcinstall.service.backends.windows import WindowsBackend
from svcinstall.service.base import InitSystem, ServiceBackend
from svcinstall.service.runtime import Runtime


def resolve_init_system(value: InitSystem | str) -> InitSystem:
    """Convert a user-supplied name to an InitSystem.

    Raises:
        UnsupportedSystemError: If the name is not a known init system.
    """
    try:
        return InitSystem(value)
    except ValueError:
        available = [member.value for member in InitSystem]
        raise UnsupportedSystemError(
            f"Unknown init system: {value}. Available: {available}"
        ) from None


class ManagerRegistry:
    """Lookup table from init system to backend.

    Build one per process (see create_default_registry) and pass it to
    whatever dispatches install requests.
    """

    def __init__(self) -> None:
        self._backends: dict[InitSystem, ServiceBackend] = {}

    def register(self, init_system: InitSystem | str, backend: ServiceBackend) -> None:
        self._backends[resolve_init_system(init_system)] = backend

    def get(self, init_system: InitSystem | str) -> ServiceBackend:
        """Get the backend for an init system.

        Raises:
            UnsupportedSystemError: If no backend handles the init system.
        """
        key = resolve_init_system(init_system)
        backend = self._backends.get(key)
        if backend is None:
            raise UnsupportedSystemError(
                f"Unsupported init system: {key.value}. "
                f"Service installation is supported for {self.names}."
            )
        return backend

    def __contains__(self, init_system: object) -> bool:
        try:
            return InitSystem(init_system) in self._backends
        except ValueError:
            return False

    @property
    def names(self) -> list[str]:
        return [key.value for key in self._backends]


def create_default_registry(runtime: Runtime | None = None) -> ManagerRegistry:
    """Create a registry holding the built-in backends.

    sysvinit and docker-init share one init script backend; openrc has none.
    """
    registry = ManagerRegistry()
    init_backend = SysvinitBackend(runtime=runtime)
    registry.register(InitSystem.SYSTEMD, SystemdBackend(runtime=runtime))
    registry.register(InitSystem.SYSVINIT, init_backend)
    registry.register(InitSystem.DOCKER_INIT, init_backend)
    registry.register(InitSystem.UPSTART, UpstartBackend(runtime=runtime))
    registry.register(InitSystem.LAUNCHD, LaunchdBackend(runtime=runtime))
    registry.register(InitSystem.WINDOWS, WindowsBackend(runtime=runtime))
    return registry


__all__ = [
    "LaunchdBackend",
    "ManagerRegistry",
    "SystemdBackend",
    "SysvinitBackend",
    "UpstartBackend",
    "WindowsBackend",
    "create_default_registry",
    "resolve_init_system",
]
