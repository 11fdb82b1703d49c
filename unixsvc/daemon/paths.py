"""Where each init flavor keeps control scripts, PID files and logs."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from unixsvc.errors import HostEnvironmentError


class InitFlavor(str, Enum):
    """Supported init ecosystems."""

    SYSV = "sysv"  # /etc/init.d with insserv or chkconfig
    BSDRC = "bsdrc"  # /etc/rc.d with rc.subr


@dataclass(frozen=True)
class FlavorLayout:
    """Host directories a flavor relies on, relative to the host root."""

    script_dir: str
    pid_dir: str = "var/run"
    log_dir: str = "var/log"
    tool_dirs: tuple[str, ...] = ()

    def required_dirs(self, root: Path) -> list[Path]:
        return [root / self.script_dir, root / self.pid_dir, root / self.log_dir]


LAYOUTS: dict[InitFlavor, FlavorLayout] = {
    InitFlavor.SYSV: FlavorLayout(script_dir="etc/init.d", tool_dirs=("sbin", "usr/sbin")),
    InitFlavor.BSDRC: FlavorLayout(script_dir="etc/rc.d"),
}


@dataclass(frozen=True)
class ResolvedPaths:
    control_script: Path
    pid_file: Path
    stdout_log: Path
    stderr_log: Path

    def files(self) -> tuple[Path, Path, Path, Path]:
        return (self.control_script, self.pid_file, self.stdout_log, self.stderr_log)


def resolve(flavor: InitFlavor, name: str, *, root: Path = Path("/")) -> ResolvedPaths:
    """Derive the four service paths, checking the flavor's directories exist.

    Raises:
        HostEnvironmentError: if the script, PID or log directory is missing.
    """
    layout = LAYOUTS[flavor]
    for directory in layout.required_dirs(root):
        if not directory.is_dir():
            raise HostEnvironmentError(directory)

    log_dir = root / layout.log_dir
    return ResolvedPaths(
        control_script=root / layout.script_dir / name,
        pid_file=root / layout.pid_dir / f"{name}.pid",
        stdout_log=log_dir / f"{name}-out.log",
        stderr_log=log_dir / f"{name}-err.log",
    )


def tool_search_path(flavor: InitFlavor, root: Path = Path("/")) -> list[Path]:
    """Directories searched for the flavor's registration tools."""
    return [root / d for d in LAYOUTS[flavor].tool_dirs]
