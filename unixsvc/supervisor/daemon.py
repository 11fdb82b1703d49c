"""Detach a script into the background and keep track of it via a PID file."""

import os
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

import psutil
from loguru import logger

DISCARD = "/dev/null"
UNCHANGED = "-"


class PidFile:
    """PID file of one supervised process."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> int | None:
        try:
            pid = int(self.path.read_text().strip())
        except (OSError, ValueError):
            return None
        return pid if pid > 0 else None

    def write(self, pid: int) -> None:
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        tmp.write_text(f"{pid}\n")
        os.replace(tmp, self.path)

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)

    def running_pid(self) -> int | None:
        """PID of the live process, removing the file if it is stale."""
        pid = self.read()
        if pid is None:
            return None
        if psutil.pid_exists(pid):
            return pid
        logger.debug(f"Removing stale PID file {self.path} (pid {pid})")
        self.remove()
        return None


def _identity(value: str) -> int | str | None:
    if value in ("", UNCHANGED):
        return None
    return int(value) if value.isdigit() else value


@dataclass
class Daemon:
    """One background process, addressed by its PID file."""

    name: str
    script: Path
    pidfile: PidFile
    cwd: Path = Path("/")
    stdout: str = DISCARD
    stderr: str = DISCARD
    user: str = UNCHANGED
    group: str = UNCHANGED
    stop_timeout: float = 2.0  # seconds
    args: list[str] = field(default_factory=list)

    def status(self) -> int | None:
        """PID of the running instance, or None."""
        return self.pidfile.running_pid()

    def start(self) -> bool:
        """Spawn the script detached. Returns False if it already runs."""
        if self.status() is not None:
            return False

        stdout = self._open_log(self.stdout)
        stderr = self._open_log(self.stderr)
        try:
            proc = subprocess.Popen(
                self._command(),
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                stdout=stdout,
                stderr=stderr,
                user=_identity(self.user),
                group=_identity(self.group),
                start_new_session=True,  # detach from our session and terminal
            )
        finally:
            for handle in (stdout, stderr):
                if handle is not subprocess.DEVNULL:
                    handle.close()

        try:
            self.pidfile.write(proc.pid)
        except OSError:
            # an untracked child could never be stopped
            proc.kill()
            proc.wait()
            raise
        logger.info(f"Started {self.name} with PID {proc.pid}")
        return True

    def stop(self) -> bool:
        """Terminate the running instance. Returns False if it was not running."""
        pid = self.status()
        if pid is None:
            return False

        try:
            proc = psutil.Process(pid)
            self._terminate(proc)
        except psutil.NoSuchProcess:
            pass
        self.pidfile.remove()
        logger.info(f"Stopped {self.name} (PID {pid})")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _command(self) -> list[str]:
        script = str(self.script)
        if script.endswith(".py"):
            return [sys.executable, script, *self.args]
        return [script, *self.args]

    @staticmethod
    def _open_log(target: str):
        if target == DISCARD:
            return subprocess.DEVNULL
        return open(target, "ab")

    def _terminate(self, proc: psutil.Process) -> None:
        """SIGTERM twice, then SIGKILL, sharing ``stop_timeout`` between them."""
        deadline = time.monotonic() + self.stop_timeout
        for attempt in range(2):
            proc.terminate()
            remaining = max(deadline - time.monotonic(), 0.0)
            try:
                proc.wait(timeout=remaining / (2 - attempt))
                return
            except psutil.TimeoutExpired:
                logger.warning(f"{self.name} did not stop on SIGTERM (attempt {attempt + 1})")
        logger.warning(f"{self.name} did not stop gracefully, forcing kill")
        proc.kill()
        proc.wait(timeout=5)
