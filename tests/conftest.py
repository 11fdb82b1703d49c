"""Shared fixtures: a fake host root under tmp_path and a recording command runner."""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from unixsvc.daemon.descriptor import ServiceDescriptor
from unixsvc.daemon.script import SupervisorCommand
from unixsvc.daemon.shell import CommandResult

HOST_DIRS = ("etc/init.d", "etc/rc.d", "var/run", "var/log", "sbin")


class FakeRunner:
    """Records every argv; answers with ``respond(argv)`` or success."""

    def __init__(self, respond: Callable[[tuple[str, ...]], CommandResult] | None = None):
        self.calls: list[list[str]] = []
        self._respond = respond

    def run(self, argv: Sequence[str]) -> CommandResult:
        argv = tuple(str(a) for a in argv)
        self.calls.append(list(argv))
        if self._respond is not None:
            return self._respond(argv)
        return CommandResult(argv, 0)


def fail_when(predicate, returncode: int = 1, stdout: str = "", stderr: str = ""):
    """Responder failing commands that match ``predicate``, succeeding otherwise."""

    def respond(argv):
        if predicate(argv):
            return CommandResult(argv, returncode, stdout, stderr)
        return CommandResult(argv, 0)

    return respond


def add_tool(root: Path, name: str, directory: str = "sbin") -> Path:
    """Drop an executable placeholder for a host tool such as insserv."""
    tool = root / directory / name
    tool.parent.mkdir(parents=True, exist_ok=True)
    tool.write_text("#!/bin/sh\nexit 0\n")
    tool.chmod(0o755)
    return tool


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    root = tmp_path / "host"
    for d in HOST_DIRS:
        (root / d).mkdir(parents=True)
    return root


@pytest.fixture
def descriptor() -> ServiceDescriptor:
    return ServiceDescriptor(
        name="sample",
        description="Sample Service",
        script="/opt/sample/run.js",
        user="1000",
        group="1000",
        cwd="/opt/sample",
    )


@pytest.fixture
def supervisor() -> SupervisorCommand:
    return SupervisorCommand(("/usr/bin/python3", "-m", "unixsvc.supervisor"))


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()
