"""Running external commands as argument vectors."""

import os
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        return f"{shlex.join(self.argv)} exited with status {self.returncode}"


class CommandRunner:
    """Runs a command to completion, capturing exit status and output.

    Never goes through ``sh -c``; arguments are passed to the program as-is.
    """

    def run(self, argv: Sequence[str]) -> CommandResult:
        argv = tuple(str(a) for a in argv)
        logger.debug(f"Running {shlex.join(argv)}")
        try:
            proc = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            # Missing or non-executable binary: same status a shell would give.
            logger.warning(f"Cannot execute {argv[0]}: {e}")
            return CommandResult(argv, 127, "", f"{argv[0]}: {e.strerror or e}\n")

        result = CommandResult(argv, proc.returncode, proc.stdout, proc.stderr)
        if not result.ok:
            logger.warning(f"{result.describe()}: {proc.stderr.strip()}")
        return result


def find_tool(name: str, search_path: Sequence[Path]) -> Path | None:
    """Return the first executable ``name`` found in ``search_path``."""
    for directory in search_path:
        candidate = Path(directory) / name
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    return None
