"""Immutable description of the script to be run as a service."""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from unixsvc.errors import ConfigurationError

_ILLEGAL_CHARS = re.compile(r"[^A-Za-z0-9_]")


def sanitize_name(name: str) -> str:
    """Reduce ``name`` to characters legal in both a filename and a shell identifier.

    Every other character becomes ``_``; a leading digit gets a ``_`` prefix
    so ``${name}_enable`` stays a valid rc variable.
    """
    cleaned = _ILLEGAL_CHARS.sub("_", name.strip())
    if not cleaned.strip("_"):
        raise ConfigurationError(f"invalid service name: {name!r}")
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def _absolute(field_name: str, value) -> PurePosixPath:
    if value is None or str(value) == "":
        raise ConfigurationError(f"service {field_name} is required")
    path = PurePosixPath(str(value))
    if not path.is_absolute():
        raise ConfigurationError(f"service {field_name} must be an absolute path: {value}")
    return path


@dataclass(frozen=True)
class ServiceDescriptor:
    """A service to install: name, script and the identity it runs under.

    All fields are explicit; defaults for ``user``, ``group`` and ``cwd`` are
    filled in by the configuration layer, never read from the running process
    here.
    """

    name: str
    script: PurePosixPath
    user: str
    group: str
    cwd: PurePosixPath
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("service name is required")
        object.__setattr__(self, "name", sanitize_name(self.name))
        object.__setattr__(self, "script", _absolute("script", self.script))
        object.__setattr__(self, "cwd", _absolute("cwd", self.cwd))
        for field_name in ("user", "group"):
            value = str(getattr(self, field_name)).strip()
            if not value:
                raise ConfigurationError(f"service {field_name} is required")
            object.__setattr__(self, field_name, value)
        # Multi-line descriptions would break the init-script comment header.
        object.__setattr__(self, "description", " ".join(self.description.split()))
