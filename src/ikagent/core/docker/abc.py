"""Docker operations interface.

This module defines the abstract interface for Docker operations, following
the ops pattern with ABC-based dependency injection for testability.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ikagent.core.docker.types import ContainerInfo, ContainerSpec


class Docker(ABC):
    """Abstract interface for Docker operations.

    Real implementations use subprocess to call the Docker CLI. Fake
    implementations are pure in-memory for unit tests without requiring a
    Docker daemon.
    """

    @abstractmethod
    def is_daemon_running(self) -> bool:
        """Check if Docker daemon is running and accessible.

        Note:
            This is a LBYL check - call before other operations to provide
            helpful error messages if Docker isn't available.
        """
        ...

    @abstractmethod
    def image_exists(self, tag: str) -> bool:
        """Check whether an image with `tag` exists locally."""
        ...

    @abstractmethod
    def get_image_label(self, tag: str, label: str) -> str | None:
        """Read a label from a local image.

        Returns:
            The label value, or None if the image or label is missing
        """
        ...

    @abstractmethod
    def build_image(
        self, tag: str, dockerfile: Path, build_context: Path, labels: dict[str, str]
    ) -> None:
        """Build an image, streaming build output to the terminal.

        Raises:
            FileNotFoundError: If dockerfile or build_context don't exist
            RuntimeError: If the build exits non-zero
        """
        ...

    @abstractmethod
    def volume_exists(self, name: str) -> bool:
        """Check whether a named volume exists."""
        ...

    @abstractmethod
    def create_volume(self, name: str) -> None:
        """Create a named volume."""
        ...

    @abstractmethod
    def list_networks(self) -> list[str]:
        """List Docker network names."""
        ...

    @abstractmethod
    def run_container(self, spec: ContainerSpec) -> str:
        """Start a detached container.

        Returns:
            The new container's ID as printed by `docker run -d`

        Raises:
            RuntimeError: If docker run fails
        """
        ...

    @abstractmethod
    def list_containers(self, prefix: str) -> list[ContainerInfo]:
        """List all containers (running or not) whose name starts with `prefix-`."""
        ...

    @abstractmethod
    def start_container(self, name: str) -> None:
        """Start a stopped container."""
        ...

    @abstractmethod
    def stop_container(self, name: str) -> None:
        """Stop a running container."""
        ...

    @abstractmethod
    def remove_container(self, name: str) -> None:
        """Stop (ignoring "already stopped") and remove a container."""
        ...

    @abstractmethod
    def exec_script(self, name: str, script: str, env: dict[str, str]) -> int:
        """Run `bash -c script` inside the container with output streamed.

        Returns:
            Exit code of the script
        """
        ...

    @abstractmethod
    def attach(self, name: str, shell: str) -> int:
        """Open an interactive shell in the container.

        Returns:
            Exit code of the shell session
        """
        ...
