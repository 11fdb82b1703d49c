"""Lifecycle outcomes: the single result produced by every lifecycle operation."""

from dataclasses import dataclass
from enum import Enum

# Status-line fragments printed by the supervisor entry point on stdout.
ALREADY_RUNNING_MARKER = "cannot start -- already running"
NOT_RUNNING_MARKER = "cannot stop -- not running"


class Outcome(str, Enum):
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already installed"
    UNINSTALLED = "uninstalled"
    STARTED = "started"
    ALREADY_RUNNING = "already running"
    STOPPED = "stopped"
    NOT_RUNNING = "not running"
    INVALID_INSTALLATION = "invalid installation"
    FAILED = "failed"


_SUCCESS = {Outcome.INSTALLED, Outcome.UNINSTALLED, Outcome.STARTED, Outcome.STOPPED}


@dataclass(frozen=True)
class LifecycleOutcome:
    """What happened during one install/uninstall/start/stop/restart call.

    ``detail`` is only populated for ``Outcome.FAILED`` and carries the
    diagnostic text (usually the captured standard error) verbatim.
    """

    kind: Outcome
    detail: str = ""

    @classmethod
    def failed(cls, detail: str) -> "LifecycleOutcome":
        return cls(Outcome.FAILED, detail)

    @property
    def ok(self) -> bool:
        """True when the requested transition actually happened."""
        return self.kind in _SUCCESS

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 success, 1 expected condition, 2 failure."""
        if self.ok:
            return 0
        if self.kind is Outcome.FAILED:
            return 2
        return 1

    def __str__(self) -> str:
        if self.kind is Outcome.FAILED:
            return f"failed: {self.detail.strip()}" if self.detail.strip() else "failed"
        return self.kind.value
