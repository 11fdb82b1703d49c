"""BSD rc.d backend: scripts under /etc/rc.d driven by rc.subr."""

from unixsvc.daemon.base import ServiceBackend
from unixsvc.daemon.outcome import LifecycleOutcome, Outcome
from unixsvc.daemon.paths import InitFlavor


class BsdRcBackend(ServiceBackend):
    """Manages an rc.subr script for one service.

    rc.d picks scripts up by convention, so there is no registration step;
    enabling at boot is left to ``<name>_enable`` in rc.conf.
    """

    flavor = InitFlavor.BSDRC

    def install(self) -> LifecycleOutcome:
        paths = self.paths
        if (outcome := self._create_control_script(paths)) is not None:
            return outcome
        return LifecycleOutcome(Outcome.INSTALLED)

    def uninstall(self) -> LifecycleOutcome:
        paths = self.paths
        self._stop_quietly(paths)
        return self._remove_files(paths)

    def start(self) -> LifecycleOutcome:
        paths = self.paths
        if not paths.control_script.exists():
            return LifecycleOutcome(Outcome.INVALID_INSTALLATION)
        return self._control(paths, "start")

    def stop(self) -> LifecycleOutcome:
        paths = self.paths
        if not paths.control_script.exists():
            return LifecycleOutcome(Outcome.INVALID_INSTALLATION)
        return self._control(paths, "stop")
