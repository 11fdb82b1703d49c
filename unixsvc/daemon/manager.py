"""Platform-aware service manager facade."""

import platform
from pathlib import Path

from loguru import logger

from unixsvc.daemon.base import ServiceBackend, ServiceInfo
from unixsvc.daemon.bsdrc import BsdRcBackend
from unixsvc.daemon.descriptor import ServiceDescriptor
from unixsvc.daemon.outcome import LifecycleOutcome
from unixsvc.daemon.paths import InitFlavor
from unixsvc.daemon.script import SupervisorCommand
from unixsvc.daemon.shell import CommandRunner
from unixsvc.daemon.sysv import SysVBackend
from unixsvc.errors import ConfigurationError

BACKENDS: dict[InitFlavor, type[ServiceBackend]] = {
    InitFlavor.SYSV: SysVBackend,
    InitFlavor.BSDRC: BsdRcBackend,
}

_SYSTEM_FLAVORS: dict[str, InitFlavor] = {
    "Linux": InitFlavor.SYSV,
    "FreeBSD": InitFlavor.BSDRC,
}


def detect_flavor(system: str | None = None) -> InitFlavor:
    """Map the host OS (``platform.system()``) to its init flavor."""
    system = system or platform.system()
    try:
        return _SYSTEM_FLAVORS[system]
    except KeyError:
        raise ConfigurationError(
            f"unixsvc is supported under Linux and FreeBSD only (you have {system!r})"
        ) from None


class ServiceManager:
    """Facade: picks the backend once, then runs lifecycle operations on it.

    Every operation returns exactly one LifecycleOutcome. Exceptions are kept
    for configuration and host errors (ConfigurationError,
    HostEnvironmentError).
    """

    def __init__(
        self,
        descriptor: ServiceDescriptor,
        supervisor: SupervisorCommand,
        *,
        flavor: InitFlavor | None = None,
        root: Path = Path("/"),
        runner: CommandRunner | None = None,
    ):
        self.flavor = flavor or detect_flavor()
        self._backend = BACKENDS[self.flavor](descriptor, supervisor, root=root, runner=runner)
        logger.debug(f"Using {self.flavor.value} backend for service {descriptor.name}")

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._backend.descriptor

    @property
    def backend(self) -> ServiceBackend:
        return self._backend

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def install(self) -> LifecycleOutcome:
        """Generate and register the control script."""
        return self._report("install", self._backend.install())

    def uninstall(self) -> LifecycleOutcome:
        return self._report("uninstall", self._backend.uninstall())

    def start(self) -> LifecycleOutcome:
        return self._report("start", self._backend.start())

    def stop(self) -> LifecycleOutcome:
        return self._report("stop", self._backend.stop())

    def restart(self) -> LifecycleOutcome:
        return self._report("restart", self._backend.restart())

    @property
    def installed(self) -> bool:
        return self._backend.installed()

    def get_info(self) -> ServiceInfo:
        return self._backend.get_info()

    def log_paths(self) -> tuple[Path, Path]:
        """Return (stdout_log, stderr_log) paths."""
        paths = self._backend.paths
        return paths.stdout_log, paths.stderr_log

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _report(self, action: str, outcome: LifecycleOutcome) -> LifecycleOutcome:
        name = self.descriptor.name
        if outcome.ok:
            logger.info(f"{action} {name}: {outcome}")
        else:
            logger.warning(f"{action} {name}: {outcome}")
        return outcome
