"""Supervisor entry point: the short-lived process that daemonizes a script."""

from unixsvc.supervisor.daemon import Daemon, PidFile

__all__ = ["Daemon", "PidFile"]
