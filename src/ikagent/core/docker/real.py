"""Real Docker operations using subprocess to call Docker CLI.

All operations follow LBYL philosophy: check conditions before acting,
let exceptions bubble to error boundaries.
"""

import logging
import subprocess
from pathlib import Path

from ikagent.core.docker.abc import Docker
from ikagent.core.docker.types import (
    ContainerInfo,
    ContainerSpec,
    build_run_args,
    parse_container_list,
)
from ikagent.core.subprocess import run_subprocess_with_context, run_succeeds

logger = logging.getLogger(__name__)


class RealDocker(Docker):
    """Real Docker operations using Docker CLI via subprocess.

    Commands whose output is parsed go through run_subprocess_with_context.
    Build, exec and attach inherit the terminal so the user sees their output
    live; those report failure through their exit code.

    Example:
        docker = RealDocker()
        if not docker.is_daemon_running():
            raise RuntimeError("Docker daemon not running")
        container_id = docker.run_container(spec)
    """

    def is_daemon_running(self) -> bool:
        """Check if Docker daemon responds to `docker info`."""
        try:
            result = subprocess.run(
                ["docker", "info"],
                capture_output=True,
                check=False,
                timeout=5,
            )
            return result.returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    def image_exists(self, tag: str) -> bool:
        return run_succeeds(["docker", "image", "inspect", tag])

    def get_image_label(self, tag: str, label: str) -> str | None:
        result = subprocess.run(
            [
                "docker",
                "image",
                "inspect",
                "--format",
                f'{{{{ index .Config.Labels "{label}" }}}}',
                tag,
            ],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        value = result.stdout.strip()
        if not value or value == "<no value>":
            return None
        return value

    def build_image(
        self, tag: str, dockerfile: Path, build_context: Path, labels: dict[str, str]
    ) -> None:
        """Build an image, streaming build output to the terminal.

        LBYL checks:
        - Validates dockerfile exists
        - Validates build_context exists
        """
        if not dockerfile.exists():
            raise FileNotFoundError(f"Dockerfile not found: {dockerfile}")
        if not build_context.exists():
            raise FileNotFoundError(f"Build context not found: {build_context}")

        cmd = ["docker", "build", "-t", tag]
        for key, value in labels.items():
            cmd.extend(["--label", f"{key}={value}"])
        cmd.extend(["-f", str(dockerfile), str(build_context)])

        logger.debug("Running %s", " ".join(cmd))
        result = subprocess.run(cmd, check=False)
        if result.returncode != 0:
            raise RuntimeError(f"Docker build failed with exit code {result.returncode}")

    def volume_exists(self, name: str) -> bool:
        return run_succeeds(["docker", "volume", "inspect", name])

    def create_volume(self, name: str) -> None:
        run_subprocess_with_context(
            ["docker", "volume", "create", name],
            operation_context=f"create volume '{name}'",
        )

    def list_networks(self) -> list[str]:
        result = run_subprocess_with_context(
            ["docker", "network", "ls", "--format", "{{.Name}}"],
            operation_context="list networks",
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def run_container(self, spec: ContainerSpec) -> str:
        result = run_subprocess_with_context(
            build_run_args(spec),
            operation_context=f"create container '{spec.name}'",
        )
        return result.stdout.strip()

    def list_containers(self, prefix: str) -> list[ContainerInfo]:
        result = run_subprocess_with_context(
            [
                "docker",
                "ps",
                "-a",
                "--filter",
                f"name={prefix}",
                "--format",
                "{{.ID}}\t{{.Names}}\t{{.Status}}",
            ],
            operation_context="list containers",
        )
        # The name filter is a substring match; keep only our own prefix
        return [
            c
            for c in parse_container_list(result.stdout, prefix)
            if c.name.startswith(f"{prefix}-")
        ]

    def start_container(self, name: str) -> None:
        run_subprocess_with_context(
            ["docker", "start", name],
            operation_context=f"start container '{name}'",
        )

    def stop_container(self, name: str) -> None:
        run_subprocess_with_context(
            ["docker", "stop", name],
            operation_context=f"stop container '{name}'",
        )

    def remove_container(self, name: str) -> None:
        if not run_succeeds(["docker", "stop", name]):
            logger.debug("docker stop %s failed, container likely already stopped", name)
        run_subprocess_with_context(
            ["docker", "rm", name],
            operation_context=f"remove container '{name}'",
        )

    def exec_script(self, name: str, script: str, env: dict[str, str]) -> int:
        cmd = ["docker", "exec"]
        for key, value in env.items():
            cmd.extend(["-e", f"{key}={value}"])
        cmd.extend([name, "bash", "-c", script])

        logger.debug("Running %s", " ".join(cmd))
        result = subprocess.run(cmd, check=False)
        return result.returncode

    def attach(self, name: str, shell: str) -> int:
        cmd = ["docker", "exec", "-it", name, shell]
        logger.debug("Running %s", " ".join(cmd))
        result = subprocess.run(cmd, check=False)
        return result.returncode
