"""SysV init backend: /etc/init.d scripts registered via insserv or chkconfig."""

from pathlib import Path

from loguru import logger

from unixsvc.daemon.base import ServiceBackend
from unixsvc.daemon.outcome import LifecycleOutcome, Outcome
from unixsvc.daemon.paths import InitFlavor, tool_search_path
from unixsvc.daemon.shell import find_tool


class SysVBackend(ServiceBackend):
    """Manages an LSB init script for one service."""

    flavor = InitFlavor.SYSV

    # ------------------------------------------------------------------
    # Install / Uninstall
    # ------------------------------------------------------------------

    def install(self) -> LifecycleOutcome:
        paths = self.paths
        if (outcome := self._create_control_script(paths)) is not None:
            return outcome

        # The script stays in place if registration fails; uninstall cleans up.
        failure = self._run_all(self._registration_commands())
        if failure is not None:
            return self._registration_failure(failure)
        return LifecycleOutcome(Outcome.INSTALLED)

    def uninstall(self) -> LifecycleOutcome:
        paths = self.paths
        self._stop_quietly(paths)

        failure = self._run_all(self._deregistration_commands())
        if failure is not None:
            logger.warning(f"De-registration of {self.descriptor.name} failed: {failure.describe()}")

        return self._remove_files(paths)

    # ------------------------------------------------------------------
    # Start / Stop
    # ------------------------------------------------------------------

    def start(self) -> LifecycleOutcome:
        return self._control(self.paths, "start")

    def stop(self) -> LifecycleOutcome:
        return self._control(self.paths, "stop")

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _tool(self, name: str) -> Path | None:
        return find_tool(name, tool_search_path(self.flavor, self.root))

    def _registration_commands(self) -> list[list[str]]:
        name = self.descriptor.name
        if insserv := self._tool("insserv"):
            return [[str(insserv), name]]
        if chkconfig := self._tool("chkconfig"):
            return [[str(chkconfig), "--add", name], [str(chkconfig), name, "on"]]
        logger.debug("Neither insserv nor chkconfig found, skipping registration")
        return []

    def _deregistration_commands(self) -> list[list[str]]:
        name = self.descriptor.name
        if insserv := self._tool("insserv"):
            return [[str(insserv), "-r", name]]
        if chkconfig := self._tool("chkconfig"):
            return [[str(chkconfig), name, "off"], [str(chkconfig), "--del", name]]
        return []
