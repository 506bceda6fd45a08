"""Docker operations subpackage."""

from ikagent.core.docker.abc import Docker
from ikagent.core.docker.real import RealDocker
from ikagent.core.docker.types import ContainerInfo, ContainerSpec, Mount, build_run_args

__all__ = [
    "Docker",
    "RealDocker",
    "ContainerInfo",
    "ContainerSpec",
    "Mount",
    "build_run_args",
]
