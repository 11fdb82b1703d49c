"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field


class ServiceConfig(BaseModel):
    """The script to run and the identity it runs under.

    Empty ``user``, ``group`` and ``cwd`` fall back to the invoking process.
    """

    name: str = ""
    description: str = ""
    script: str = ""
    user: str = ""
    group: str = ""
    cwd: str = ""


class SupervisorConfig(BaseModel):
    """How the control script reaches the supervisor entry point."""

    command: list[str] = Field(default_factory=list)  # empty: auto-detect
    stop_timeout: int | None = Field(default=None, gt=0)  # milliseconds


class HostConfig(BaseModel):
    """Host layout overrides."""

    root: str = "/"
    flavor: Literal["sysv", "bsdrc"] | None = None  # None: detect from the OS


class Config(BaseModel):
    """Root configuration for unixsvc."""

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    host: HostConfig = Field(default_factory=HostConfig)
