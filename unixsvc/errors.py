"""Exceptions raised by unixsvc.

Only programmer and host errors are raised. Expected conditions such as
"already installed" or "not running" are reported as LifecycleOutcome values.
"""


class UnixServiceError(Exception):
    """Base class for all unixsvc errors."""


class ConfigurationError(UnixServiceError):
    """Unsupported host platform or malformed service descriptor."""


class HostEnvironmentError(UnixServiceError, EnvironmentError):
    """A directory required by the selected init flavor does not exist."""

    def __init__(self, directory):
        self.directory = directory
        super().__init__(f"directory {directory} not existing")
