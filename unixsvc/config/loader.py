"""Configuration loading and conversion into runtime objects.

This is the only place that reads the invoking process's identity and
working directory; everything downstream receives explicit values.
"""

import json
import os
import shutil
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from unixsvc.config.schema import Config
from unixsvc.daemon.descriptor import ServiceDescriptor
from unixsvc.daemon.paths import InitFlavor
from unixsvc.daemon.script import SupervisorCommand
from unixsvc.errors import ConfigurationError

CONFIG_ENV_VAR = "UNIXSVC_CONFIG"


def get_config_path() -> Path:
    """Get the default configuration file path."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".unixsvc" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2)


def build_descriptor(config: Config) -> ServiceDescriptor:
    """Turn the service section into a descriptor, filling in process defaults."""
    svc = config.service
    if not svc.name:
        raise ConfigurationError("service name is required")
    if not svc.script:
        raise ConfigurationError("service script is required")
    cwd = Path(svc.cwd or os.getcwd()).expanduser().absolute()
    script = Path(svc.script).expanduser()
    if not script.is_absolute():
        script = cwd / script
    return ServiceDescriptor(
        name=svc.name,
        description=svc.description,
        script=script,
        user=svc.user or str(os.geteuid()),
        group=svc.group or str(os.getegid()),
        cwd=cwd,
    )


def build_supervisor_command(config: Config) -> SupervisorCommand:
    """Find the best way to invoke the supervisor entry point."""
    sup = config.supervisor
    if sup.command:
        return SupervisorCommand(tuple(sup.command), stop_timeout=sup.stop_timeout)

    # Strategy 1: console script next to the current Python
    candidate = Path(sys.executable).parent / "unixsvc-daemon"
    if candidate.is_file():
        return SupervisorCommand((str(candidate),), stop_timeout=sup.stop_timeout)

    # Strategy 2: shutil.which
    which = shutil.which("unixsvc-daemon")
    if which:
        return SupervisorCommand((which,), stop_timeout=sup.stop_timeout)

    # Strategy 3: python -m unixsvc.supervisor
    return SupervisorCommand(
        (sys.executable, "-m", "unixsvc.supervisor"), stop_timeout=sup.stop_timeout
    )


def configured_flavor(config: Config) -> InitFlavor | None:
    return InitFlavor(config.host.flavor) if config.host.flavor else None
