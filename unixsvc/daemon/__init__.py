"""Init-system integration: install and drive a script as a background service."""

from unixsvc.daemon.base import ServiceBackend, ServiceInfo
from unixsvc.daemon.descriptor import ServiceDescriptor
from unixsvc.daemon.manager import ServiceManager, detect_flavor
from unixsvc.daemon.outcome import LifecycleOutcome, Outcome
from unixsvc.daemon.paths import InitFlavor, ResolvedPaths, resolve
from unixsvc.daemon.script import SupervisorCommand, render

__all__ = [
    "InitFlavor",
    "LifecycleOutcome",
    "Outcome",
    "ResolvedPaths",
    "ServiceBackend",
    "ServiceDescriptor",
    "ServiceInfo",
    "ServiceManager",
    "SupervisorCommand",
    "detect_flavor",
    "render",
    "resolve",
]
