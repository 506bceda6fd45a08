"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency and exit with code 1 before any side effects.
"""

from typing import TYPE_CHECKING, NoReturn

import click

from ikagent.cli.output import user_output
from ikagent.core.project_discovery import NoProjectSentinel, ProjectContext

if TYPE_CHECKING:
    from ikagent.core.context import IkagentContext


def fail(error_message: str, hint: str | None = None) -> NoReturn:
    """Output styled error (and optional hint) and exit 1."""
    user_output(click.style("Error: ", fg="red") + error_message)
    if hint is not None:
        user_output(hint)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str, hint: str | None = None) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            fail(error_message, hint)

    @staticmethod
    def not_none[T](value: T | None, error_message: str, hint: str | None = None) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        This method provides type narrowing: it takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            fail(error_message, hint)
        return value

    @staticmethod
    def in_project(ctx: "IkagentContext") -> ProjectContext:
        """Ensure the command runs inside an ikagent project.

        Returns:
            The discovered project

        Raises:
            SystemExit: If no `.ikagent/` directory was found above cwd
        """
        if isinstance(ctx.project, NoProjectSentinel):
            fail(ctx.project.message)
        return ctx.project

    @staticmethod
    def docker_running(ctx: "IkagentContext") -> None:
        """Ensure the Docker daemon answers before any container operation.

        Raises:
            SystemExit: If `docker info` fails
        """
        if not ctx.docker.is_daemon_running():
            fail(
                "Docker is not running",
                "Start Docker Desktop or the docker daemon and try again.",
            )
