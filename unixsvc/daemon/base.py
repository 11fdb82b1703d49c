"""Abstract base for init-flavor service backends."""

import os
import shlex
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import psutil
from loguru import logger

from unixsvc.daemon.descriptor import ServiceDescriptor
from unixsvc.daemon.outcome import (
    ALREADY_RUNNING_MARKER,
    NOT_RUNNING_MARKER,
    LifecycleOutcome,
    Outcome,
)
from unixsvc.daemon.paths import InitFlavor, ResolvedPaths, resolve
from unixsvc.daemon.script import SupervisorCommand, render
from unixsvc.daemon.shell import CommandResult, CommandRunner


@dataclass
class ServiceInfo:
    """Status snapshot of an installed (or not installed) service."""

    name: str
    flavor: InitFlavor
    control_script: Path
    pid_file: Path
    stdout_log: Path
    stderr_log: Path
    installed: bool = False
    running: bool = False
    pid: int | None = None


class ServiceBackend(ABC):
    """ABC that each init-flavor backend implements.

    Paths are resolved again on every call, so a host directory that goes
    missing is reported as soon as the next operation runs.
    """

    flavor: InitFlavor

    def __init__(
        self,
        descriptor: ServiceDescriptor,
        supervisor: SupervisorCommand,
        *,
        root: Path = Path("/"),
        runner: CommandRunner | None = None,
    ):
        self.descriptor = descriptor
        self.supervisor = supervisor
        self.root = Path(root)
        self.runner = runner or CommandRunner()

    @property
    def paths(self) -> ResolvedPaths:
        return resolve(self.flavor, self.descriptor.name, root=self.root)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    def install(self) -> LifecycleOutcome:
        """Write the control script and register it with the host."""

    @abstractmethod
    def uninstall(self) -> LifecycleOutcome:
        """Stop (best effort), de-register and remove all service files."""

    @abstractmethod
    def start(self) -> LifecycleOutcome:
        """Run the control script's ``start`` action."""

    @abstractmethod
    def stop(self) -> LifecycleOutcome:
        """Run the control script's ``stop`` action."""

    def restart(self) -> LifecycleOutcome:
        """Stop, then start, whatever the stop produced."""
        stopped = self.stop()
        logger.debug(f"restart {self.descriptor.name}: stop gave {stopped}")
        return self.start()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def installed(self) -> bool:
        return self.paths.control_script.exists()

    def is_running(self) -> bool:
        """Ask the control script's ``status`` action whether the service runs."""
        paths = self.paths
        if not paths.control_script.exists():
            return False
        return self.runner.run([str(paths.control_script), "status"]).ok

    def get_info(self) -> ServiceInfo:
        paths = self.paths
        installed = paths.control_script.exists()
        running = self.is_running() if installed else False
        return ServiceInfo(
            name=self.descriptor.name,
            flavor=self.flavor,
            control_script=paths.control_script,
            pid_file=paths.pid_file,
            stdout_log=paths.stdout_log,
            stderr_log=paths.stderr_log,
            installed=installed,
            running=running,
            pid=_read_pid(paths.pid_file) if running else None,
        )

    # ------------------------------------------------------------------
    # Helpers shared by the flavors
    # ------------------------------------------------------------------

    def _create_control_script(self, paths: ResolvedPaths) -> LifecycleOutcome | None:
        """Write the control script unless one exists.

        Returns the outcome to report when install cannot go on, else None.
        """
        if paths.control_script.exists():
            logger.info(f"{paths.control_script} exists, leaving it untouched")
            return LifecycleOutcome(Outcome.ALREADY_INSTALLED)
        try:
            self._write_control_script(paths)
        except OSError as e:
            return LifecycleOutcome.failed(f"cannot write {paths.control_script}: {e.strerror or e}")
        return None

    def _write_control_script(self, paths: ResolvedPaths) -> None:
        """Atomically write the rendered control script with mode 0755."""
        text = render(self.flavor, self.descriptor, paths, self.supervisor)
        target = paths.control_script
        fd, tmp = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.chmod(tmp, 0o755)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info(f"Wrote control script {target}")

    def _run_all(self, commands: list[list[str]]) -> CommandResult | None:
        """Run commands in order; return the first failing result, if any."""
        for argv in commands:
            result = self.runner.run(argv)
            if not result.ok:
                return result
        return None

    def _control(self, paths: ResolvedPaths, action: str) -> LifecycleOutcome:
        """Invoke ``<control script> <action>`` and normalize its exit status."""
        result = self.runner.run([str(paths.control_script), action])
        if result.ok:
            return LifecycleOutcome(Outcome.STARTED if action == "start" else Outcome.STOPPED)
        if action == "start" and ALREADY_RUNNING_MARKER in result.stdout:
            return LifecycleOutcome(Outcome.ALREADY_RUNNING)
        if action == "stop" and NOT_RUNNING_MARKER in result.stdout:
            return LifecycleOutcome(Outcome.NOT_RUNNING)
        return LifecycleOutcome.failed(result.stderr or result.stdout or result.describe())

    def _stop_quietly(self, paths: ResolvedPaths) -> None:
        if paths.control_script.exists():
            self.runner.run([str(paths.control_script), "stop"])

    def _remove_files(self, paths: ResolvedPaths) -> LifecycleOutcome:
        """Remove control script, PID file and logs; missing files are fine."""
        for path in paths.files():
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove {path}: {e}")
                return LifecycleOutcome.failed(f"failed to remove {path}: {e.strerror or e}")
        logger.info(f"Removed service files for {self.descriptor.name}")
        return LifecycleOutcome(Outcome.UNINSTALLED)

    @staticmethod
    def _registration_failure(result: CommandResult) -> LifecycleOutcome:
        return LifecycleOutcome.failed(
            f"failed to execute: {shlex.join(result.argv)}: {result.stderr.strip()}"
        )


def _read_pid(pid_file: Path) -> int | None:
    """Return the PID stored in ``pid_file`` if that process is alive."""
    try:
        pid = int(pid_file.read_text().strip())
    except (OSError, ValueError):
        return None
    return pid if pid > 0 and psutil.pid_exists(pid) else None

